"""Render sink contract and anchor-position helpers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.utils.config import DisplayConfig


class RenderSink(ABC):
    """Text-drawing surface owned by the host.

    A sink must survive scene/context transitions; the session re-attaches
    it with `LyricsSession.attach_sink` when the host recreates its scene.
    """

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def draw_text(self, text: str, x: float, y: float, max_width: float, line_height: float) -> None:
        ...

    @abstractmethod
    def measure_text_width(self, text: str) -> float:
        ...

    @abstractmethod
    def set_visible(self, visible: bool) -> None:
        ...


def resolve_axis(value: str, extent: int) -> float:
    """'50%' -> half of extent, '120' -> 120 px."""
    value = value.strip()
    if value.endswith("%"):
        return extent * float(value[:-1]) / 100
    return float(value)


def resolve_anchor(cfg: DisplayConfig) -> tuple[float, float]:
    return (
        resolve_axis(cfg.x_position, cfg.viewport_width),
        resolve_axis(cfg.y_position, cfg.viewport_height),
    )
