import logging
import math
from typing import NamedTuple, Optional, Tuple

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


class Point(NamedTuple):
    x: float
    y: float


class Surface:
    """
    Owns the logical canvas size, the device scale factor and the RGBA pixel buffer.

    The buffer is ``floor(height * scale)`` rows by ``floor(width * scale)`` columns.
    Every size or scale change replaces it with a fresh buffer and carries the old
    content over, rescaled so strokes keep their logical position and size.
    """
    def __init__(self, width: float, height: float, scale: float = 1.0):
        # Kept as given even if invalid, so a later valid setter can complete them.
        self.width = width
        self.height = height
        self.scale = scale
        self.buffer: Optional[np.ndarray] = None
        # Scale the current buffer was allocated at; drives the rescale on copy.
        self._buffer_scale = 1.0
        self._apply(width, height, scale)

    @property
    def ready(self) -> bool:
        return self.buffer is not None

    @property
    def physical_size(self) -> Tuple[int, int]:
        if self.buffer is None:
            return 0, 0
        return self.buffer.shape[1], self.buffer.shape[0]

    def set_logical_width(self, width: float) -> bool:
        return self._apply(width, self.height, self.scale)

    def set_scale_factor(self, scale: float) -> bool:
        return self._apply(self.width, self.height, scale)

    def grow_height(self, delta: float) -> bool:
        if not delta or delta <= 0:
            logger.warning("Ignoring non-positive growth of %r", delta)
            return False
        return self._apply(self.width, self.height + delta, self.scale)

    def resize(self, width: float, scale: float) -> bool:
        """Applies a container resize and a scale change with one reallocation."""
        return self._apply(width, self.height, scale)

    def _apply(self, width, height, scale) -> bool:
        if (not (width and height and scale)
                or not all(math.isfinite(v) for v in (width, height, scale))
                or width <= 0 or height <= 0 or scale <= 0):
            logger.warning(
                "Ignoring invalid surface configuration width=%r height=%r scale=%r",
                width, height, scale,
            )
            return False
        if math.floor(width * scale) < 1 or math.floor(height * scale) < 1:
            logger.warning(
                "Ignoring surface configuration with empty buffer: %rx%r at scale %r",
                width, height, scale,
            )
            return False
        self.width = float(width)
        self.height = float(height)
        self.scale = float(scale)
        self.reallocate()
        return True

    def reallocate(self) -> None:
        """Replaces the buffer with one sized for the current size and scale."""
        phys_w = math.floor(self.width * self.scale)
        phys_h = math.floor(self.height * self.scale)
        if phys_w < 1 or phys_h < 1:
            logger.warning("Cannot allocate a %dx%d buffer", phys_w, phys_h)
            return

        previous = self.buffer
        buffer = np.zeros((phys_h, phys_w, 4), dtype=np.uint8)
        if previous is not None:
            source = self._rescaled(previous, self.scale / self._buffer_scale)
            rows = min(source.shape[0], phys_h)
            cols = min(source.shape[1], phys_w)
            buffer[:rows, :cols] = source[:rows, :cols]

        self.buffer = buffer
        self._buffer_scale = self.scale
        logger.debug(
            "Reallocated surface %gx%g @%g -> %dx%d px",
            self.width, self.height, self.scale, phys_w, phys_h,
        )

    @staticmethod
    def _rescaled(pixels: np.ndarray, factor: float) -> np.ndarray:
        if factor == 1.0:
            return pixels
        size = (
            max(1, int(round(pixels.shape[1] * factor))),
            max(1, int(round(pixels.shape[0] * factor))),
        )
        image = Image.fromarray(pixels, "RGBA").resize(size, Image.Resampling.BILINEAR)
        return np.asarray(image, dtype=np.uint8)

    def to_physical(self, point) -> Point:
        return Point(point[0] * self.scale, point[1] * self.scale)

    def clear(self) -> None:
        """Resets every pixel to transparent."""
        if self.buffer is None:
            logger.debug("Clear requested before the surface was allocated")
            return
        self.buffer[...] = 0
        logger.info("Surface cleared")
