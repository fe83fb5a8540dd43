"""Audio playback clock contract.

The lyrics session never decodes audio; it only needs to know which track
is current and how far into it playback is.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable


@dataclass(eq=False)
class AudioTrack:
    """One started playback. Compared by identity: replaying the same file
    yields a new track."""
    name: str
    volume: int = 100
    pitch: int = 100
    pan: int = 0


class AudioSource(ABC):
    @abstractmethod
    def play(self, name: str, volume: int = 100, pitch: int = 100, pan: int = 0) -> AudioTrack:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @abstractmethod
    def current_track(self) -> AudioTrack | None:
        ...

    @abstractmethod
    def is_playing(self) -> bool:
        ...

    @abstractmethod
    def elapsed(self) -> float:
        """Playback position of the current track in seconds."""

    def position(self) -> float:
        return self.elapsed() if self.is_playing() else 0.0


class WallClockAudioSource(AudioSource):
    """Plays nothing; advances a position from a monotonic clock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._track: AudioTrack | None = None
        self._started_at = 0.0
        self._paused_at: float | None = None

    def play(self, name: str, volume: int = 100, pitch: int = 100, pan: int = 0) -> AudioTrack:
        self._track = AudioTrack(name=name, volume=volume, pitch=pitch, pan=pan)
        self._started_at = self._clock()
        self._paused_at = None
        return self._track

    def stop(self) -> None:
        self._track = None
        self._paused_at = None

    def pause(self) -> None:
        if self._track is not None and self._paused_at is None:
            self._paused_at = self._clock()

    def resume(self) -> None:
        if self._paused_at is not None:
            self._started_at += self._clock() - self._paused_at
            self._paused_at = None

    def seek_to(self, seconds: float) -> None:
        now = self._paused_at if self._paused_at is not None else self._clock()
        self._started_at = now - max(0.0, seconds)

    def current_track(self) -> AudioTrack | None:
        return self._track

    def is_playing(self) -> bool:
        return self._track is not None and self._paused_at is None

    def elapsed(self) -> float:
        if self._track is None:
            return 0.0
        now = self._paused_at if self._paused_at is not None else self._clock()
        return now - self._started_at
