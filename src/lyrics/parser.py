"""Lyric file parsing: timestamped lines into a sorted Timeline."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Iterator

from src.lyrics.timestamp import INVALID_TIMESTAMP, split_timestamp

DEFAULT_SEPARATOR = "//"


@dataclass(frozen=True)
class LyricLine:
    time: float
    primary: str
    secondary: str = ""


@dataclass(frozen=True)
class Timeline:
    """Lyric lines sorted ascending by time. Never mutated after parsing."""

    lines: tuple[LyricLine, ...] = ()
    source: str = ""
    skipped: int = 0

    @cached_property
    def times(self) -> tuple[float, ...]:
        return tuple(line.time for line in self.lines)

    @property
    def primary_texts(self) -> list[str]:
        return [line.primary for line in self.lines]

    @property
    def secondary_texts(self) -> list[str]:
        return [line.secondary for line in self.lines]

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def end_time(self) -> float:
        return self.lines[-1].time if self.lines else 0.0

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> LyricLine:
        return self.lines[index]

    def __iter__(self) -> Iterator[LyricLine]:
        return iter(self.lines)


def separator_pattern(separator: str = DEFAULT_SEPARATOR) -> re.Pattern[str]:
    return re.compile(r"\s*" + re.escape(separator) + r"\s*")


def parse_lyrics_text(text: str, separator: str = DEFAULT_SEPARATOR, source: str = "") -> Timeline:
    """Parse raw lyric text.

    Blank lines are ignored; lines without a valid leading timestamp are
    skipped and counted. The text after the timestamp is split on
    `separator` into primary and secondary text; anything after a second
    separator is dropped. The result is stable-sorted by time, so lines
    sharing a timestamp keep their file order.
    """
    split_re = separator_pattern(separator)
    lines: list[LyricLine] = []
    skipped = 0

    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            continue
        seconds, rest = split_timestamp(line)
        if seconds == INVALID_TIMESTAMP:
            skipped += 1
            continue
        parts = split_re.split(rest.strip())[:2]
        primary = parts[0].strip()
        secondary = parts[1].strip() if len(parts) > 1 else ""
        lines.append(LyricLine(time=seconds, primary=primary, secondary=secondary))

    lines.sort(key=lambda ln: ln.time)
    return Timeline(lines=tuple(lines), source=source, skipped=skipped)


def read_lyrics_file(path: Path, separator: str = DEFAULT_SEPARATOR) -> Timeline:
    text = path.read_text(encoding="utf-8-sig")
    return parse_lyrics_text(text, separator=separator, source=str(path))
