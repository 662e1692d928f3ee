import io
import logging
import os
import time
from dataclasses import dataclass
from typing import Optional

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_PADDING = 10


def find_ink_bottom(buffer: np.ndarray) -> int:
    """
    Returns the index of the lowest row holding any ink, or 0 if none does.

    Rows are scanned from the bottom up and the scan stops at the first row
    with a non-zero alpha pixel.
    """
    alpha = buffer[:, :, 3]
    for y in range(alpha.shape[0] - 1, -1, -1):
        if alpha[y].any():
            return y
    return 0


def export_filename(prefix: str = "whiteboard", now: Optional[float] = None) -> str:
    """Builds ``<prefix>-<unix milliseconds>.png``."""
    if now is None:
        now = time.time()
    return f"{prefix}-{int(now * 1000)}.png"


@dataclass
class ExportResult:
    pixels: np.ndarray
    filename: str

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels, 'RGBA')

    def to_png_bytes(self) -> bytes:
        out = io.BytesIO()
        self.to_image().save(out, format="PNG")
        return out.getvalue()

    def save(self, directory: str = ".") -> str:
        """Writes the PNG under ``directory`` and returns its path."""
        path = os.path.join(directory, self.filename)
        self.to_image().save(path, format="PNG")
        logger.info("Exported %dx%d image to %s", self.width, self.height, path)
        return path


def export_buffer(buffer: Optional[np.ndarray], padding: int = DEFAULT_PADDING,
                  filename: Optional[str] = None) -> Optional[ExportResult]:
    """
    Crops the buffer to full width and the rows down to the ink bottom plus padding.

    Rows the padding reaches past the bottom of the buffer come out transparent.
    Returns None when there is no buffer to export yet.
    """
    if buffer is None or buffer.size == 0:
        logger.debug("Nothing to export before the surface is allocated")
        return None
    if filename is None:
        filename = export_filename()

    crop_height = max(1, find_ink_bottom(buffer) + padding)
    height, width = buffer.shape[:2]
    pixels = np.zeros((crop_height, width, 4), dtype=np.uint8)
    rows = min(crop_height, height)
    pixels[:rows] = buffer[:rows]
    logger.debug("Trimmed %dx%d buffer to %d rows", width, height, crop_height)
    return ExportResult(pixels, filename)
