"""Plugin-style command surface: `showLyrics`, `hideLyrics`, `playLinkedAudio`.

Commands arrive as a name plus string arguments, e.g.::

    showLyrics song.lrc -0.5
    playLinkedAudio song 90 100 0
    hideLyrics

Numeric arguments that are missing or do not parse fall back to their
defaults. Unknown commands are left for other handlers.
"""

from __future__ import annotations

import math
import shlex
from typing import Callable

from rich.markup import escape

from src.playback.session import LyricsSession
from src.utils.logging import error


def _number(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        n = float(value)
    except ValueError:
        return default
    return n if math.isfinite(n) else default


def _arg(args: list[str], i: int) -> str | None:
    return args[i] if len(args) > i and args[i] != "" else None


def _show(session: LyricsSession, args: list[str]) -> None:
    offset_arg = _arg(args, 1)
    offset = _number(offset_arg, session.config.lyrics.offset) if offset_arg is not None else None
    session.show_lyrics(_arg(args, 0), offset)


def _hide(session: LyricsSession, args: list[str]) -> None:
    session.hide_lyrics()


def _play(session: LyricsSession, args: list[str]) -> None:
    name = _arg(args, 0)
    if name is None:
        error("playLinkedAudio needs a track name")
        return
    session.play_linked_audio(
        name,
        volume=int(_number(_arg(args, 1), 100)),
        pitch=int(_number(_arg(args, 2), 100)),
        pan=int(_number(_arg(args, 3), 0)),
    )


COMMANDS: dict[str, Callable[[LyricsSession, list[str]], None]] = {
    "showlyrics": _show,
    "hidelyrics": _hide,
    "playlinkedaudio": _play,
    "playlyricsbgm": _play,
}


def dispatch(session: LyricsSession, command: str, args: list[str]) -> bool:
    """Run one command. Returns False if the command is not a lyrics command."""
    handler = COMMANDS.get(command.replace("_", "").lower())
    if handler is None:
        return False
    try:
        handler(session, args)
    except Exception as e:
        error(f"{command} failed: {escape(str(e))}")
    return True


def run_command(session: LyricsSession, line: str) -> bool:
    try:
        parts = shlex.split(line, comments=True)
    except ValueError as e:
        error(f"Cannot parse command {escape(line)!r}: {e}")
        return False
    if not parts:
        return False
    return dispatch(session, parts[0], parts[1:])
