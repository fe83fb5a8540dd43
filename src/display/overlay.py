"""Draw the active lyric line (and its secondary text) onto a render sink."""

from __future__ import annotations

from src.display.sink import RenderSink, resolve_anchor
from src.lyrics.parser import LyricLine
from src.utils.config import DisplayConfig


class LyricsOverlay:
    def __init__(self, sink: RenderSink, config: DisplayConfig):
        self.sink = sink
        self.config = config
        self.anchor = resolve_anchor(config)
        self.visible = False
        self.sink.set_visible(False)

    def attach(self, sink: RenderSink) -> None:
        self.sink = sink
        self.sink.set_visible(self.visible)

    def set_visible(self, visible: bool) -> None:
        if visible != self.visible:
            self.visible = visible
            self.sink.set_visible(visible)

    def clear(self) -> None:
        self.sink.clear()

    def show(self, line: LyricLine | None) -> None:
        """Replace whatever is drawn with `line`; None just clears."""
        self.sink.clear()
        if line is None:
            return
        x, y = self.anchor
        size = self.config.font_size
        width = self.config.viewport_width
        self._draw_centered(line.primary, x, y, width, size)
        if line.secondary:
            self._draw_centered(line.secondary, x, y + size, width, size)

    def _draw_centered(self, text: str, x: float, y: float, max_width: float, line_height: float) -> None:
        w = self.sink.measure_text_width(text)
        self.sink.draw_text(text, x - w / 2, y, max_width, line_height)
