import logging
import os
import sys
import time

import numpy as np
from asciimatics.screen import Screen
from asciimatics.event import KeyboardEvent, MouseEvent
from asciimatics.exceptions import ResizeScreenError
from asciimatics.scene import Scene
from asciimatics.effects import Effect

from config import BoardConfig
from strokes import Tool
from ui import UIFrame
from whiteboard import Whiteboard

logger = logging.getLogger(__name__)

# Basic terminal colours and the RGB they usually render as.
_TERMINAL_COLOURS = [
    (Screen.COLOUR_BLACK, (0, 0, 0)),
    (Screen.COLOUR_RED, (205, 0, 0)),
    (Screen.COLOUR_GREEN, (0, 205, 0)),
    (Screen.COLOUR_YELLOW, (205, 205, 0)),
    (Screen.COLOUR_BLUE, (0, 0, 238)),
    (Screen.COLOUR_MAGENTA, (205, 0, 205)),
    (Screen.COLOUR_CYAN, (0, 205, 205)),
    (Screen.COLOUR_WHITE, (229, 229, 229)),
]
_COLOUR_CODES = np.array([code for code, _ in _TERMINAL_COLOURS])
_COLOUR_RGB = np.array([rgb for _, rgb in _TERMINAL_COLOURS], dtype=np.int32)

SCROLL_STEP = 20


def terminal_colours(pixels):
    """Maps RGBA pixels, composited over white paper, to the nearest terminal colour."""
    alpha = pixels[..., 3:4].astype(np.int32)
    rgb = (pixels[..., :3].astype(np.int32) * alpha + 255 * (255 - alpha)) // 255
    dist = ((rgb[..., np.newaxis, :] - _COLOUR_RGB) ** 2).sum(axis=-1)
    return _COLOUR_CODES[dist.argmin(axis=-1)]


def half_block_render(screen, board, view, cols, rows):
    """Renders the visible part of the board using half-blocks."""
    buffer = board.surface.buffer
    if buffer is None:
        return
    scale = board.surface.scale
    top = int(view.top * scale)
    # Each character cell shows two pixel rows: upper (y) and lower (y+1).
    window = np.zeros((rows * 2, cols, 4), dtype=np.uint8)
    visible = buffer[top:top + rows * 2, :cols]
    window[:visible.shape[0], :visible.shape[1]] = visible
    colours = terminal_colours(window)
    for row in range(rows):
        for x in range(cols):
            fg = int(colours[row * 2, x])
            bg = int(colours[row * 2 + 1, x])
            # If both halves share the same colour, draw a full-block for crisper output.
            if fg == bg:
                screen.print_at('█', x, row, colour=fg, bg=bg)
            else:
                screen.print_at('▀', x, row, colour=fg, bg=bg)


class View:
    """Vertical scroll position of the terminal window over the board."""
    def __init__(self):
        self.top = 0
        self.message = ""


class CanvasEffect(Effect):
    """Asciimatics Effect that renders the board and a status line."""

    def __init__(self, screen, board, view, cols, rows):
        super().__init__(screen)
        self._board = board
        self._view = view
        self._cols = cols
        self._rows = rows

    def reset(self):
        # Nothing to reset between scene restarts.
        pass

    @property
    def stop_frame(self):
        # Run indefinitely; Scene duration is -1.
        return 0

    def _update(self, frame_no):
        half_block_render(self._screen, self._board, self._view, self._cols, self._rows)
        state = self._board.tool_state
        tool = "Eraser" if state.tool is Tool.ERASER else "Pen"
        colour = "#{:02X}{:02X}{:02X}".format(*state.color)
        line = (
            f"[Q]uit [P]en [E]raser [X]Clear [ ] Width ^S Export  "
            f"{tool} {colour} {state.width}px  top {self._view.top}/{int(self._board.surface.height)}"
        )
        if self._view.message:
            line = f"{line}  | {self._view.message}"
        self._screen.print_at(line[:self._cols].ljust(self._cols), 0, self._rows)


def export_board(board, view):
    try:
        path = board.export_to(os.getcwd())
    except OSError as exc:
        logger.error("Export failed: %s", exc)
        view.message = f"Export failed: {exc}"
        return
    if path is None:
        view.message = "Nothing to export yet"
        return
    view.message = f"Saved {os.path.basename(path)}"


def scroll(board, view, delta):
    limit = max(0, int(board.surface.height) - 1)
    view.top = max(0, min(limit, view.top + delta))
    # The board's on-screen origin moves up as the view scrolls down.
    board.set_origin(0, -view.top)


def main(screen, board, view):
    canvas_cols = screen.width - screen.width // 4
    canvas_rows = max(screen.height - 1, 1)  # Last row is the status line
    board.on_resize(canvas_cols)
    scroll(board, view, 0)

    ui = UIFrame(screen, board, lambda: export_board(board, view))
    canvas_effect = CanvasEffect(screen, board, view, canvas_cols, canvas_rows)
    screen.set_scenes([Scene([canvas_effect, ui], duration=-1)])

    while True:
        if screen.has_resized():
            raise ResizeScreenError("Terminal resized")

        # Event handling ----------------------------------------------------
        event = screen.get_event()

        # Let the UI consume the event first (e.g., button clicks).
        event = ui.process_event(event)

        if isinstance(event, KeyboardEvent):
            key = event.key_code
            if key in (ord('q'), ord('Q')):
                return
            elif key in (ord('p'), ord('P')):
                board.select_tool(Tool.PEN)
            elif key in (ord('e'), ord('E')):
                board.select_tool(Tool.ERASER)
            elif key in (ord('x'), ord('X')):
                board.clear()
            elif key == ord('['):
                board.change_stroke_width(-1)
            elif key == ord(']'):
                board.change_stroke_width(1)
            elif key == Screen.ctrl("s"):
                export_board(board, view)
            elif key in (Screen.KEY_PAGE_DOWN, Screen.KEY_DOWN):
                scroll(board, view, SCROLL_STEP if key == Screen.KEY_DOWN else canvas_rows * 2)
            elif key in (Screen.KEY_PAGE_UP, Screen.KEY_UP):
                scroll(board, view, -SCROLL_STEP if key == Screen.KEY_UP else -canvas_rows * 2)
        elif isinstance(event, MouseEvent):
            # The UI occupies the right-most quarter of the screen, the status line the last row.
            ui.has_focus = event.x >= canvas_cols
            outside = ui.has_focus or event.y >= canvas_rows

            # Character cells to device pixels; two pixel rows per cell.
            pixel_x = event.x
            pixel_y = event.y * 2

            if outside:
                board.pointer_leave(pixel_x, pixel_y)
            elif event.buttons & MouseEvent.LEFT_CLICK:
                if board.drawing:
                    board.pointer_move(pixel_x, pixel_y)
                else:
                    board.pointer_down(pixel_x, pixel_y)
            else:
                board.pointer_up(pixel_x, pixel_y)

        # ------------------------------------------------------------------
        # Draw the next frame for the Scene (canvas effect + UI).
        screen.draw_next_frame()

        # Cap the frame-rate to ~30 FPS to reduce flicker and CPU usage.
        time.sleep(1 / 30)


def configure_logging():
    # The terminal belongs to asciimatics, so logs only ever go to a file.
    path = os.environ.get("WHITEBOARD_LOG")
    if path:
        level = os.environ.get("WHITEBOARD_LOG_LEVEL", "WARNING").upper()
        logging.basicConfig(
            filename=path,
            level=getattr(logging, level, logging.WARNING),
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
    else:
        logging.getLogger().addHandler(logging.NullHandler())


def run():
    configure_logging()
    # One board per terminal cell is one logical unit; the width tracks the terminal.
    board = Whiteboard(BoardConfig(initial_width=80, min_width=1, container_padding=0))
    view = View()
    while True:
        try:
            Screen.wrapper(main, arguments=[board, view])
            sys.exit(0)
        except ResizeScreenError:
            # Drawing is interrupted by the scene restart.
            board.pointer_cancel()


if __name__ == "__main__":
    run()
