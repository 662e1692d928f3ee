from dataclasses import dataclass, field
from typing import List, Tuple

RGB = Tuple[int, int, int]


def clamp(value, low, high):
    return max(low, min(high, value))


def parse_hex_color(value: str) -> RGB:
    """Parse ``#rrggbb`` or ``#rgb`` into an RGB triple."""
    text = value.strip()
    if text.startswith("#"):
        text = text[1:]
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)
    if len(text) != 6:
        raise ValueError(f"Not a hex colour: {value!r}")
    try:
        return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)
    except ValueError:
        raise ValueError(f"Not a hex colour: {value!r}") from None


@dataclass
class BoardConfig:
    initial_width: float = 1600
    initial_height: float = 1400
    # Width on resize is the container width minus padding, never below min_width.
    min_width: float = 800
    container_padding: float = 32
    min_scale: float = 1.0
    growth_threshold: float = 200
    growth_increment: float = 1000
    export_padding: int = 10
    export_prefix: str = "whiteboard"
    min_stroke_width: int = 1
    max_stroke_width: int = 64
    default_stroke_width: int = 4
    palette: List[Tuple[str, RGB]] = field(
        default_factory=lambda: [
            ("Ink", (0x11, 0x18, 0x27)),
            ("Red", (0xEF, 0x44, 0x44)),
            ("Amber", (0xF5, 0x9E, 0x0B)),
            ("Emerald", (0x10, 0xB9, 0x81)),
            ("Blue", (0x3B, 0x82, 0xF6)),
            ("Violet", (0x8B, 0x5C, 0xF6)),
            ("Pink", (0xEC, 0x48, 0x99)),
            ("Paper", (0xF3, 0xF4, 0xF6)),
        ]
    )

    @property
    def default_color(self) -> RGB:
        return self.palette[0][1] if self.palette else (0, 0, 0)
