import logging
from enum import Enum
from typing import NamedTuple, Optional

from canvas import Point
from growth import GrowthPolicy
from strokes import StrokeRenderer, ToolState

logger = logging.getLogger(__name__)


class PointerKind(Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    CANCEL = "cancel"
    LEAVE = "leave"
    OUT = "out"


_SESSION_END = (PointerKind.UP, PointerKind.CANCEL, PointerKind.LEAVE, PointerKind.OUT)


class PointerEvent(NamedTuple):
    """A pointer sample in device (screen) coordinates."""
    kind: PointerKind
    x: float
    y: float


class State(Enum):
    IDLE = "idle"
    DRAWING = "drawing"


class InputController:
    """
    Turns pointer events into stroke segments.

    Idle until a pointer goes down; while drawing, each move draws from the
    previous sample to the new one and lets the growth policy extend the surface.
    """
    def __init__(self, renderer: StrokeRenderer, growth: GrowthPolicy, tool_state: ToolState,
                 origin: Point = Point(0.0, 0.0)):
        self.renderer = renderer
        self.growth = growth
        self.tool_state = tool_state
        # On-screen position of the surface's top-left corner, in device coordinates.
        self.origin = origin
        self.state = State.IDLE
        self.last_point: Optional[Point] = None

    def to_local(self, x: float, y: float) -> Point:
        return Point(x - self.origin.x, y - self.origin.y)

    def handle(self, event: PointerEvent) -> State:
        if event.kind is PointerKind.DOWN:
            self.state = State.DRAWING
            self.last_point = self.to_local(event.x, event.y)
        elif event.kind is PointerKind.MOVE:
            if self.state is State.DRAWING and self.last_point is not None:
                point = self.to_local(event.x, event.y)
                self.renderer.draw(self.last_point, point, self.tool_state)
                self.last_point = point
                self.growth.maybe_grow(point.y)
        elif event.kind in _SESSION_END:
            if self.state is State.DRAWING:
                logger.debug("Stroke session ended by %s", event.kind.value)
            self.state = State.IDLE
            self.last_point = None
        return self.state
