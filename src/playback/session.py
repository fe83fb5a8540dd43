"""Lyrics display session: loads timelines, follows the audio clock, draws on change."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rich.markup import escape

from src.display.overlay import LyricsOverlay
from src.display.sink import RenderSink
from src.lyrics.cursor import CursorChange, TimelineCursor
from src.lyrics.parser import Timeline
from src.playback.audio import AudioSource, AudioTrack
from src.playback.loader import LoadTicket, LyricsLoader, LyricsLoadError
from src.utils.config import AppConfig
from src.utils.logging import debug, error, info, warn


@dataclass(frozen=True)
class PlayRequest:
    name: str
    volume: int = 100
    pitch: int = 100
    pan: int = 0


class LyricsSession:
    """All display state for one lyrics overlay.

    Commands (`show_lyrics`, `hide_lyrics`, `play_linked_audio`) may be
    issued at any time; `tick` is called once per frame by the host and is
    the only place loaded timelines are installed.
    """

    def __init__(
        self,
        config: AppConfig,
        audio: AudioSource,
        sink: RenderSink,
        loader: LyricsLoader | None = None,
    ):
        self.config = config
        self.audio = audio
        self.overlay = LyricsOverlay(sink, config.display)
        self.loader = loader or LyricsLoader(Path(config.lyrics.data_dir))
        self.cursor = TimelineCursor(offset=config.lyrics.offset)

        self.timeline: Timeline | None = None
        self.loaded = False
        self.active = False
        self.linked_track: AudioTrack | None = None
        self._reference_track: AudioTrack | None = None
        self.generation = 0

        self._pending_load: LoadTicket | None = None
        self._activate_on_load = False
        self._pending_plays: list[PlayRequest] = []

    # ── Commands ────────────────────────────────────────────────────────────

    def show_lyrics(self, filename: str | None = None, offset: float | None = None) -> LoadTicket:
        """Start loading a lyric file; the display activates once it is applied."""
        filename = filename or self.config.lyrics.file
        if offset is None:
            offset = self.config.lyrics.offset
        ticket = self.loader.submit(filename, offset=offset, separator=self.config.display.separator)
        if self._pending_load is not None:
            debug(f"Lyrics #{self._pending_load.generation} superseded by #{ticket.generation}")
        self._pending_load = ticket
        self.generation = ticket.generation
        self.loaded = False
        self.active = False
        self._activate_on_load = True
        self.overlay.clear()
        self.overlay.set_visible(False)
        return ticket

    def hide_lyrics(self) -> None:
        self.active = False
        self._activate_on_load = False
        self.cursor.reset()
        self.overlay.clear()
        self.overlay.set_visible(False)

    def play_linked_audio(self, name: str, volume: int = 100, pitch: int = 100, pan: int = 0) -> AudioTrack | None:
        """Play `name` once the latest lyric load has been applied.

        Returns the started track, or None when playback is queued behind a
        pending load.
        """
        request = PlayRequest(name=name, volume=volume, pitch=pitch, pan=pan)
        if self._pending_load is not None:
            debug(f"Queued '{escape(name)}' until lyrics #{self._pending_load.generation} are loaded")
            self._pending_plays.append(request)
            return None
        return self._start(request)

    def attach_sink(self, sink: RenderSink) -> None:
        """Re-attach the render sink after the host rebuilt its scene."""
        self.overlay.attach(sink)
        if self.active:
            self.overlay.set_visible(True)
            self.cursor.invalidate()

    # ── Loading ─────────────────────────────────────────────────────────────

    @property
    def loading(self) -> bool:
        return self._pending_load is not None

    def poll_loads(self) -> None:
        """Install the latest load if it has finished."""
        ticket = self._pending_load
        if ticket is None or not ticket.done.is_set():
            return
        self._pending_load = None
        try:
            timeline = ticket.result()
        except LyricsLoadError as e:
            error(f"Failed to load lyrics: {escape(str(e))}")
            self._fail_load()
            return
        self._install(timeline, ticket.offset)

    def wait_for_load(self, timeout: float | None = None) -> bool:
        """Block until the latest load completes; True if lyrics are loaded."""
        ticket = self._pending_load
        if ticket is not None:
            ticket.done.wait(timeout)
            self.poll_loads()
        return self.loaded

    def _install(self, timeline: Timeline, offset: float) -> None:
        self.timeline = timeline
        self.cursor.reset(offset)
        self._reference_track = None
        self.overlay.clear()
        self.loaded = True
        self.active = self._activate_on_load
        self.overlay.set_visible(self.active)
        if timeline.is_empty:
            warn(f"No timed lines in {escape(timeline.source)}; nothing will be shown")
        else:
            info(f"Loaded {len(timeline)} lyric lines from {escape(timeline.source)}")
        if timeline.skipped:
            debug(f"Skipped {timeline.skipped} lines without a valid timestamp")
        plays, self._pending_plays = self._pending_plays, []
        for request in plays:
            self._start(request)

    def _fail_load(self) -> None:
        self.loaded = False
        self.active = False
        self.timeline = None
        self.cursor.reset()
        self.overlay.clear()
        self.overlay.set_visible(False)
        for request in self._pending_plays:
            warn(f"Not playing '{escape(request.name)}': lyrics failed to load")
        self._pending_plays = []

    def _start(self, request: PlayRequest) -> AudioTrack:
        track = self.audio.play(request.name, volume=request.volume, pitch=request.pitch, pan=request.pan)
        self.linked_track = track
        debug(f"Playing '{escape(request.name)}' linked to lyrics")
        return track

    # ── Per-frame update ────────────────────────────────────────────────────

    def tick(self) -> CursorChange | None:
        """Advance the display by one frame; returns the change drawn, if any."""
        try:
            self.poll_loads()
            if not self.active or not self.loaded or self.timeline is None or self.timeline.is_empty:
                return None
            self._sync_visibility()
            change = self.cursor.update(self.audio.position(), self.timeline)
            if change is not None:
                self.overlay.show(self.timeline[change.index] if change.has_line else None)
            return change
        except Exception as e:
            error(f"Lyrics display update failed: {escape(str(e))}")
            return None

    def _sync_visibility(self) -> None:
        """Hide the lyrics while a track other than the one they belong to plays.

        Without a linked track, the first track heard after a load becomes the
        reference.
        """
        current = self.audio.current_track()
        expected = self.linked_track
        if expected is None:
            if self._reference_track is None:
                self._reference_track = current
            expected = self._reference_track
            if expected is None:
                return
        self.overlay.set_visible(current is expected)

    def close(self) -> None:
        self.loader.shutdown()
