"""Shared test fixtures.

Provides:
- Sample lyric text and files in an isolated data directory
- Fake audio source with a hand-driven clock
- Recording render sink
- Manual executor for controlling when background loads finish
"""

from __future__ import annotations

from concurrent.futures import Executor, Future

import pytest

from src.display.sink import RenderSink
from src.playback.audio import AudioSource, AudioTrack


# ── Seed data ────────────────────────────────────────────────────────────────

SAMPLE_LRC = """\
[ti:Sample Song]
[ar:Nobody]

[00:01.00] First line // Erste Zeile
[00:03.00] Second line
[00:05.500]Third line//Dritte Zeile
not a lyric line
[00:02.00] Between // Dazwischen
"""


@pytest.fixture
def sample_lrc() -> str:
    return SAMPLE_LRC


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "data"
    d.mkdir()
    (d / "song.lrc").write_text(SAMPLE_LRC, encoding="utf-8")
    (d / "garbage.lrc").write_text("no timestamps\n[xx:yy.zz] nope\n\n", encoding="utf-8")
    return d


@pytest.fixture
def config(data_dir):
    from src.utils.config import AppConfig, merge_cli_overrides
    return merge_cli_overrides(AppConfig(), {"lyrics.data_dir": str(data_dir), "lyrics.file": "song.lrc"})


# ── Collaborator fakes ───────────────────────────────────────────────────────

class FakeAudioSource(AudioSource):
    """Audio source whose position is set by the test."""

    def __init__(self):
        self.now = 0.0
        self.track = None
        self.played = []

    def play(self, name, volume=100, pitch=100, pan=0):
        self.track = AudioTrack(name=name, volume=volume, pitch=pitch, pan=pan)
        self.played.append(self.track)
        self.now = 0.0
        return self.track

    def stop(self):
        self.track = None

    def current_track(self):
        return self.track

    def is_playing(self):
        return self.track is not None

    def elapsed(self):
        return self.now


class RecordingSink(RenderSink):
    """Render sink that records every call."""

    def __init__(self, char_width: float = 10.0):
        self.char_width = char_width
        self.visible = False
        self.drawn = []  # (text, x, y)
        self.clears = 0
        self.draw_calls = 0

    def clear(self):
        self.drawn.clear()
        self.clears += 1

    def draw_text(self, text, x, y, max_width, line_height):
        self.drawn.append((text, x, y))
        self.draw_calls += 1

    def measure_text_width(self, text):
        return len(text) * self.char_width

    def set_visible(self, visible):
        self.visible = visible

    @property
    def texts(self):
        return [t for t, _, _ in self.drawn]


class ManualExecutor(Executor):
    """Executor that runs submitted work only when the test says so."""

    def __init__(self):
        self.jobs = []

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        self.jobs.append((future, fn, args, kwargs))
        return future

    def complete(self, index: int = -1) -> None:
        future, fn, args, kwargs = self.jobs[index]
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)


@pytest.fixture
def audio():
    return FakeAudioSource()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def executor():
    return ManualExecutor()


@pytest.fixture
def session(config, audio, sink):
    from src.playback.session import LyricsSession
    s = LyricsSession(config, audio, sink)
    yield s
    s.close()


@pytest.fixture
def manual_session(config, audio, sink, executor, data_dir):
    from src.playback.loader import LyricsLoader
    from src.playback.session import LyricsSession
    s = LyricsSession(config, audio, sink, loader=LyricsLoader(data_dir, executor=executor))
    yield s
    s.close()


@pytest.fixture
def make_sink():
    return RecordingSink
