from asciimatics.widgets import Frame, Layout, Divider, Button, DropdownList, Label

from strokes import Tool


class ToolSelector:
    """
    Pen and eraser buttons.
    """
    def __init__(self, frame, on_tool_change):
        self.frame = frame
        self.on_tool_change = on_tool_change

        layout = Layout([1, 1])
        self.frame.add_layout(layout)
        layout.add_widget(Button("Pen", on_click=lambda: self.on_tool_change(Tool.PEN)), 0)
        layout.add_widget(Button("Eraser", on_click=lambda: self.on_tool_change(Tool.ERASER)), 1)


class ColorPalette:
    """
    One button per preset colour.
    """
    def __init__(self, frame, colors, on_color_change):
        self.frame = frame
        self.on_color_change = on_color_change
        self.colors = list(colors)

        layout = Layout([1, 1])
        self.frame.add_layout(layout)
        for i, (name, color) in enumerate(self.colors):
            # Bind the current colour value into the callback.
            button = Button(name, on_click=lambda c=color: self._select_color(c))
            layout.add_widget(button, i % 2)

    def _select_color(self, color):
        self.on_color_change(color)


class StrokeWidthSelector:
    """
    A dropdown list to choose the stroke width.
    """
    def __init__(self, frame, on_width_change, low=1, high=64, initial=4):
        self.frame = frame
        self.on_width_change = on_width_change

        layout = Layout([1])
        self.frame.add_layout(layout)

        widths = [(str(i), i) for i in range(low, high + 1)]

        def _on_change():
            if self.on_width_change:
                self.on_width_change(self.dropdown.value)

        self.dropdown = DropdownList(widths, label="Width:", on_change=_on_change)
        self.dropdown.value = initial
        layout.add_widget(self.dropdown)


class UIFrame(Frame):
    """
    The side panel: tools, palette, width and the clear/export actions.
    """
    def __init__(self, screen, board, on_export):
        super(UIFrame, self).__init__(
            screen,
            screen.height,
            screen.width // 4,
            x=screen.width - screen.width // 4,
            y=0,
            has_border=True,
            name="Tools"
        )
        # Whether the mouse is currently over the panel rather than the canvas.
        self.has_focus: bool = False
        self.board = board

        self.tool_selector = ToolSelector(self, board.select_tool)
        self._add_divider()
        self.color_palette = ColorPalette(self, board.config.palette, board.select_color)
        self._add_divider()
        self.width_selector = StrokeWidthSelector(
            self,
            board.set_stroke_width,
            low=board.config.min_stroke_width,
            high=board.config.max_stroke_width,
            initial=int(board.tool_state.width),
        )
        self._add_divider()

        actions = Layout([1, 1])
        self.add_layout(actions)
        actions.add_widget(Button("Clear", on_click=board.clear), 0)
        actions.add_widget(Button("Export", on_click=on_export), 1)

        hint = Layout([1])
        self.add_layout(hint)
        hint.add_widget(Label("The board grows as you draw near the bottom."))
        self.fix()

    def _add_divider(self):
        layout = Layout([1])
        self.add_layout(layout)
        layout.add_widget(Divider())
