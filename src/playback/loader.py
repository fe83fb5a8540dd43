"""Background lyric file loading with load generations."""

from __future__ import annotations

import itertools
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from src.lyrics.parser import DEFAULT_SEPARATOR, Timeline, read_lyrics_file
from src.utils.logging import debug


class LyricsLoadError(Exception):
    """A lyric file could not be read."""


@dataclass
class LoadTicket:
    generation: int
    path: Path
    offset: float
    future: Future
    done: threading.Event = field(default_factory=threading.Event)

    def __post_init__(self) -> None:
        self.future.add_done_callback(lambda _f: self.done.set())

    def result(self) -> Timeline:
        """Parsed timeline; raises LyricsLoadError if the load failed."""
        return self.future.result()


def resolve_lyrics_path(filename: str, data_dir: Path) -> Path:
    p = Path(filename)
    return p if p.is_absolute() else data_dir / p


def _load(path: Path, separator: str) -> Timeline:
    try:
        return read_lyrics_file(path, separator=separator)
    except (OSError, UnicodeDecodeError) as e:
        raise LyricsLoadError(f"{path}: {e}") from e


class LyricsLoader:
    """Reads lyric files off the tick thread.

    Every submit gets a higher generation number than the one before, so
    the owner can tell a stale completion from the latest request.
    """

    def __init__(self, data_dir: Path = Path("data"), executor: Executor | None = None):
        self.data_dir = Path(data_dir)
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="lyrics-load")
        self._owns_executor = executor is None
        self._generations = itertools.count(1)

    def submit(self, filename: str, offset: float = 0.0, separator: str = DEFAULT_SEPARATOR) -> LoadTicket:
        path = resolve_lyrics_path(filename, self.data_dir)
        generation = next(self._generations)
        debug(f"Loading lyrics #{generation}: {path}")
        future = self._executor.submit(_load, path, separator)
        return LoadTicket(generation=generation, path=path, offset=offset, future=future)

    def shutdown(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
