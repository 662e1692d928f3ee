import logging
from typing import Optional, Sequence, Union

from canvas import Point, Surface
from config import BoardConfig, clamp, parse_hex_color
from controller import InputController, PointerEvent, PointerKind, State
from export import ExportResult, export_buffer, export_filename
from growth import GrowthPolicy
from strokes import StrokeRenderer, Tool, ToolState

logger = logging.getLogger(__name__)


class Whiteboard:
    """
    A growable drawing board: surface, renderer, growth policy and pointer
    controller wired together behind the operations a front end needs.
    """
    def __init__(self, config: Optional[BoardConfig] = None, scale: float = 1.0):
        self.config = config or BoardConfig()
        self.surface = Surface(self.config.initial_width, self.config.initial_height, scale)
        self.renderer = StrokeRenderer(
            self.surface, self.config.min_stroke_width, self.config.max_stroke_width
        )
        self.growth = GrowthPolicy(
            self.surface, self.config.growth_threshold, self.config.growth_increment
        )
        self.tool_state = ToolState(
            tool=Tool.PEN,
            color=self.config.default_color,
            width=self.config.default_stroke_width,
        )
        self.controller = InputController(self.renderer, self.growth, self.tool_state)

    # Resize notification -------------------------------------------------

    def on_resize(self, container_width: float, device_scale: Optional[float] = None) -> bool:
        width = max(self.config.min_width, container_width - self.config.container_padding)
        scale = max(device_scale or 1, self.config.min_scale)
        return self.surface.resize(width, scale)

    def set_origin(self, x: float, y: float) -> None:
        self.controller.origin = Point(x, y)

    # Pointer boundary ----------------------------------------------------

    def pointer(self, kind: PointerKind, x: float, y: float) -> State:
        return self.controller.handle(PointerEvent(kind, x, y))

    def pointer_down(self, x, y):
        return self.pointer(PointerKind.DOWN, x, y)

    def pointer_move(self, x, y):
        return self.pointer(PointerKind.MOVE, x, y)

    def pointer_up(self, x=0, y=0):
        return self.pointer(PointerKind.UP, x, y)

    def pointer_cancel(self, x=0, y=0):
        return self.pointer(PointerKind.CANCEL, x, y)

    def pointer_leave(self, x=0, y=0):
        return self.pointer(PointerKind.LEAVE, x, y)

    def pointer_out(self, x=0, y=0):
        return self.pointer(PointerKind.OUT, x, y)

    @property
    def drawing(self) -> bool:
        return self.controller.state is State.DRAWING

    # Tool state ----------------------------------------------------------

    def select_tool(self, tool: Tool) -> None:
        self.tool_state.tool = tool

    def select_color(self, color: Union[str, Sequence[int]]) -> bool:
        """Sets the pen colour from an RGB triple or hex string and switches to the pen."""
        if isinstance(color, str):
            try:
                color = parse_hex_color(color)
            except ValueError as exc:
                logger.warning("%s", exc)
                return False
        self.tool_state.color = tuple(int(c) for c in color[:3])
        self.tool_state.tool = Tool.PEN
        return True

    def set_stroke_width(self, width: float) -> float:
        self.tool_state.width = clamp(width, self.config.min_stroke_width, self.config.max_stroke_width)
        return self.tool_state.width

    def change_stroke_width(self, delta: float) -> float:
        return self.set_stroke_width(self.tool_state.width + delta)

    # Clear / export ------------------------------------------------------

    def clear(self) -> None:
        self.surface.clear()

    def export(self, now: Optional[float] = None) -> Optional[ExportResult]:
        if not self.surface.ready:
            return None
        filename = export_filename(self.config.export_prefix, now)
        return export_buffer(self.surface.buffer, self.config.export_padding, filename)

    def export_to(self, directory: str = ".") -> Optional[str]:
        result = self.export()
        if result is None:
            return None
        return result.save(directory)
