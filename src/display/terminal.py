"""Render sink that draws lyrics in the terminal through rich."""

from __future__ import annotations

from rich.align import Align
from rich.cells import cell_len
from rich.color import ColorParseError
from rich.console import Group, RenderableType
from rich.errors import StyleSyntaxError
from rich.panel import Panel
from rich.style import Style
from rich.text import Text

from src.display.sink import RenderSink
from src.utils.config import DisplayConfig
from src.utils.logging import warn


def _parse_style(spec: str, fallback: str) -> Style:
    try:
        return Style.parse(spec)
    except (StyleSyntaxError, ColorParseError):
        warn(f"Unknown terminal style '{spec}', using '{fallback}'")
        return Style.parse(fallback)


class TerminalSink(RenderSink):
    """Keeps the drawn lines and renders them centered when rich asks.

    Pixel coordinates only decide line order; one terminal cell counts as
    half a font size wide.
    """

    def __init__(self, config: DisplayConfig):
        self.config = config
        self.visible = True
        self._lines: list[tuple[float, float, str]] = []
        self._text_style = _parse_style(f"bold {config.text_color}", "bold white")
        self._border_style = _parse_style(config.outline_color, "black")

    @property
    def lines(self) -> list[str]:
        return [text for _, _, text in sorted(self._lines, key=lambda item: (item[0], item[1]))]

    def clear(self) -> None:
        self._lines.clear()

    def draw_text(self, text: str, x: float, y: float, max_width: float, line_height: float) -> None:
        self._lines.append((y, x, text))

    def measure_text_width(self, text: str) -> float:
        return cell_len(text) * self.config.font_size / 2

    def set_visible(self, visible: bool) -> None:
        self.visible = visible

    def __rich__(self) -> RenderableType:
        if not self.visible or not self._lines:
            return Text("")
        body = Group(*(Align.center(Text(line, style=self._text_style)) for line in self.lines))
        if self.config.outline_width <= 0:
            return body
        return Panel(body, border_style=self._border_style, padding=(0, self.config.outline_width))
