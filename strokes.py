import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

import numpy as np

from canvas import Surface
from config import clamp

logger = logging.getLogger(__name__)

# Just over the distance from a pixel centre to its corners. A stroke always
# covers every pixel its centre line passes through, however thin it is.
_PIXEL_REACH = 0.71


class Tool(Enum):
    PEN = "pen"
    ERASER = "eraser"


@dataclass
class ToolState:
    """Current tool selection, owned and mutated by the UI."""
    tool: Tool = Tool.PEN
    color: Tuple[int, int, int] = (0x11, 0x18, 0x27)
    width: float = 4


class StrokeRenderer:
    """
    Rasterizes line segments onto a Surface's buffer.

    A segment covers the pixels whose centres lie within half the stroke width
    of it, which gives round caps and round joins, so a chain of short segments
    reads as one continuous curve and a zero-length segment is a dot.
    """
    def __init__(self, surface: Surface, min_width: float = 1, max_width: float = 64):
        self.surface = surface
        self.min_width = min_width
        self.max_width = max_width

    def draw(self, start, end, state: ToolState) -> None:
        self.draw_segment(start, end, state.tool, state.color, state.width)

    def draw_segment(self, start, end, tool: Tool, color: Sequence[int], width: float) -> None:
        buffer = self.surface.buffer
        if buffer is None:
            logger.debug("Dropping segment drawn before the surface was allocated")
            return

        width = clamp(width, self.min_width, self.max_width)
        p0 = self.surface.to_physical(start)
        p1 = self.surface.to_physical(end)
        radius = max(width * self.surface.scale / 2.0, _PIXEL_REACH)

        height_px, width_px = buffer.shape[:2]
        x0 = max(int(math.floor(min(p0.x, p1.x) - radius)), 0)
        x1 = min(int(math.ceil(max(p0.x, p1.x) + radius)) + 1, width_px)
        y0 = max(int(math.floor(min(p0.y, p1.y) - radius)), 0)
        y1 = min(int(math.ceil(max(p0.y, p1.y) + radius)) + 1, height_px)
        if x0 >= x1 or y0 >= y1:
            return

        mask = self._capsule_mask(p0, p1, radius, x0, x1, y0, y1)
        if not mask.any():
            return

        region = buffer[y0:y1, x0:x1]
        if tool is Tool.ERASER:
            region[mask] = 0
        else:
            region[mask] = self._source_over(region[mask], color)

    @staticmethod
    def _capsule_mask(p0, p1, radius, x0, x1, y0, y1) -> np.ndarray:
        px = (np.arange(x0, x1, dtype=np.float64) + 0.5)[np.newaxis, :]
        py = (np.arange(y0, y1, dtype=np.float64) + 0.5)[:, np.newaxis]
        dx = p1.x - p0.x
        dy = p1.y - p0.y
        length_sq = dx * dx + dy * dy
        if length_sq == 0:
            t = 0.0
        else:
            t = np.clip(((px - p0.x) * dx + (py - p0.y) * dy) / length_sq, 0.0, 1.0)
        dist = np.hypot(px - (p0.x + t * dx), py - (p0.y + t * dy))
        return dist <= radius

    @staticmethod
    def _source_over(dest: np.ndarray, color: Sequence[int]) -> np.ndarray:
        """Alpha-over of a flat colour onto an (N, 4) block of RGBA pixels."""
        src_rgb = np.asarray(color[:3], dtype=np.float64)
        src_a = (color[3] if len(color) > 3 else 255) / 255.0

        dst = dest.astype(np.float64)
        dst_a = dst[:, 3] / 255.0
        out_a = src_a + dst_a * (1.0 - src_a)
        weight = (dst_a * (1.0 - src_a))[:, np.newaxis]
        safe_a = np.where(out_a > 0, out_a, 1.0)[:, np.newaxis]
        out_rgb = (src_rgb * src_a + dst[:, :3] * weight) / safe_a

        out = np.empty_like(dest)
        out[:, :3] = np.clip(np.rint(out_rgb), 0, 255)
        out[:, 3] = np.clip(np.rint(out_a * 255.0), 0, 255)
        return out
