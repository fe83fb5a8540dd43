"""Tests for the wall-clock audio source and the background loader."""

from __future__ import annotations

import pytest


class FakeClock:
    def __init__(self):
        self.t = 100.0

    def __call__(self):
        return self.t


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def source(clock):
    from src.playback.audio import WallClockAudioSource
    return WallClockAudioSource(clock=clock)


class TestWallClockAudioSource:

    def test_idle_position_is_zero(self, source):
        assert source.current_track() is None
        assert not source.is_playing()
        assert source.position() == 0.0

    def test_advances_with_clock(self, source, clock):
        track = source.play("song", volume=90)
        assert source.current_track() is track
        assert track.volume == 90
        clock.t += 2.5
        assert source.position() == pytest.approx(2.5)

    def test_each_play_is_a_new_track(self, source):
        a = source.play("song")
        b = source.play("song")
        assert a is not b
        assert a != b

    def test_pause_reports_zero_and_resume_continues(self, source, clock):
        source.play("song")
        clock.t += 3
        source.pause()
        clock.t += 10
        assert source.position() == 0.0
        assert source.elapsed() == pytest.approx(3)
        source.resume()
        clock.t += 1
        assert source.position() == pytest.approx(4)

    def test_seek_to(self, source, clock):
        source.play("song")
        clock.t += 30
        source.seek_to(5)
        assert source.position() == pytest.approx(5)
        source.seek_to(-3)
        assert source.position() == pytest.approx(0)

    def test_stop(self, source):
        source.play("song")
        source.stop()
        assert source.current_track() is None
        assert source.position() == 0.0


class TestLyricsLoader:

    def test_generations_increase(self, data_dir, executor):
        from src.playback.loader import LyricsLoader
        loader = LyricsLoader(data_dir, executor=executor)
        a = loader.submit("song.lrc")
        b = loader.submit("song.lrc")
        assert b.generation > a.generation

    def test_done_event_set_on_completion(self, data_dir, executor):
        from src.playback.loader import LyricsLoader
        ticket = LyricsLoader(data_dir, executor=executor).submit("song.lrc", offset=1.0, separator="//")
        assert not ticket.done.is_set()
        executor.complete()
        assert ticket.done.is_set()
        assert len(ticket.result()) == 4
        assert ticket.offset == 1.0

    def test_failure_wrapped(self, data_dir, executor):
        from src.playback.loader import LyricsLoader, LyricsLoadError
        ticket = LyricsLoader(data_dir, executor=executor).submit("absent.lrc")
        executor.complete()
        with pytest.raises(LyricsLoadError):
            ticket.result()

    def test_invalid_utf8_is_load_error(self, data_dir, executor):
        from src.playback.loader import LyricsLoader, LyricsLoadError
        (data_dir / "latin1.lrc").write_bytes("[00:01.00] caf\xe9".encode("latin-1"))
        ticket = LyricsLoader(data_dir, executor=executor).submit("latin1.lrc")
        executor.complete()
        with pytest.raises(LyricsLoadError):
            ticket.result()

    def test_absolute_path_ignores_data_dir(self, tmp_path, data_dir):
        from src.playback.loader import resolve_lyrics_path
        abs_path = tmp_path / "elsewhere.lrc"
        assert resolve_lyrics_path(str(abs_path), data_dir) == abs_path
        assert resolve_lyrics_path("song.lrc", data_dir) == data_dir / "song.lrc"

    def test_real_executor(self, data_dir):
        from src.playback.loader import LyricsLoader
        loader = LyricsLoader(data_dir)
        try:
            ticket = loader.submit("song.lrc")
            assert ticket.done.wait(5)
            assert ticket.result().primary_texts[0] == "First line"
        finally:
            loader.shutdown()
