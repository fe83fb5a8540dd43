"""LRC timestamp tags: `[m:ss.ff]` (centiseconds) or `[m:ss.fff]` (milliseconds)."""

from __future__ import annotations

import re

INVALID_TIMESTAMP = -1.0

TIMESTAMP_RE = re.compile(r"\[(\d+):(\d{2})\.(\d{2,3})\]")


def _to_seconds(m: re.Match[str]) -> float:
    minutes, seconds, fraction = m.group(1), m.group(2), m.group(3)
    scale = 100 if len(fraction) == 2 else 1000
    return int(minutes) * 60 + int(seconds) + int(fraction) / scale


def parse_timestamp(token: str) -> float:
    """Convert one timestamp tag to seconds.

    Returns INVALID_TIMESTAMP for anything that is not a well-formed tag;
    callers skip the line instead of failing.
    """
    m = TIMESTAMP_RE.fullmatch(token.strip())
    if m is None:
        return INVALID_TIMESTAMP
    return _to_seconds(m)


def split_timestamp(line: str) -> tuple[float, str]:
    """Parse the leading tag of a lyric line.

    Returns (seconds, text after the closing bracket), or
    (INVALID_TIMESTAMP, line) when the line does not start with a tag.
    """
    m = TIMESTAMP_RE.match(line)
    if m is None:
        return INVALID_TIMESTAMP, line
    return _to_seconds(m), line[m.end():]


def format_timestamp(seconds: float) -> str:
    total_cs = int(round(max(seconds, 0.0) * 100))
    m, rem = divmod(total_cs, 6000)
    s, cs = divmod(rem, 100)
    return f"{m:02d}:{s:02d}.{cs:02d}"
