import logging

from canvas import Surface

logger = logging.getLogger(__name__)


class GrowthPolicy:
    """Extends the surface downwards whenever drawing comes near its bottom edge."""
    def __init__(self, surface: Surface, threshold: float = 200, increment: float = 1000):
        self.surface = surface
        self.threshold = threshold
        self.increment = increment

    def maybe_grow(self, logical_y: float) -> bool:
        if self.surface.height - logical_y >= self.threshold:
            return False
        grown = self.surface.grow_height(self.increment)
        if grown:
            logger.info("Extended surface to %g logical units", self.surface.height)
        return grown
