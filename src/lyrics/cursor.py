"""Time-to-line lookup with change detection."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

from src.lyrics.parser import Timeline

NO_LINE = -1


def resolve(current_time: float, timeline: Timeline, offset: float = 0.0) -> int:
    """Index of the last line with time <= current_time + offset, or NO_LINE."""
    return bisect_right(timeline.times, current_time + offset) - 1


@dataclass
class CursorState:
    current_index: int = NO_LINE
    offset: float = 0.0


@dataclass(frozen=True)
class CursorChange:
    previous: int
    index: int

    @property
    def has_line(self) -> bool:
        return self.index != NO_LINE


class TimelineCursor:
    """Tracks the active line and reports only transitions.

    The index is recomputed from scratch on every update, so seeks and
    restarts in either direction resolve correctly.
    """

    def __init__(self, offset: float = 0.0):
        self.state = CursorState(offset=offset)
        self._invalidated = True

    @property
    def current_index(self) -> int:
        return self.state.current_index

    @property
    def offset(self) -> float:
        return self.state.offset

    def update(self, current_time: float, timeline: Timeline) -> CursorChange | None:
        index = resolve(current_time, timeline, self.state.offset)
        if index == self.state.current_index and not self._invalidated:
            return None
        change = CursorChange(previous=self.state.current_index, index=index)
        self.state.current_index = index
        self._invalidated = False
        return change

    def reset(self, offset: float | None = None) -> None:
        """Forget the active line; the next update always reports a change."""
        self.state.current_index = NO_LINE
        if offset is not None:
            self.state.offset = offset
        self._invalidated = True

    def invalidate(self) -> None:
        self._invalidated = True
