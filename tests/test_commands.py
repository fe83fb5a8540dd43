"""Tests for the plugin-style command surface."""

from __future__ import annotations


class TestDispatch:

    def test_show_uses_defaults(self, manual_session):
        from src.commands import run_command
        assert run_command(manual_session, "showLyrics")
        ticket = manual_session._pending_load
        assert ticket.path.name == "song.lrc"
        assert ticket.offset == 0.0

    def test_show_with_file_and_offset(self, manual_session):
        from src.commands import run_command
        run_command(manual_session, "showLyrics garbage.lrc -1.5")
        ticket = manual_session._pending_load
        assert ticket.path.name == "garbage.lrc"
        assert ticket.offset == -1.5

    def test_show_bad_offset_falls_back_to_config(self, manual_session):
        from src.commands import run_command
        run_command(manual_session, "showLyrics song.lrc soon")
        assert manual_session._pending_load.offset == manual_session.config.lyrics.offset

    def test_quoted_file_name(self, manual_session):
        from src.commands import run_command
        run_command(manual_session, 'showLyrics "my song.lrc"')
        assert manual_session._pending_load.path.name == "my song.lrc"

    def test_hide(self, session, sink):
        from src.commands import dispatch
        session.show_lyrics()
        session.wait_for_load(timeout=5)
        assert dispatch(session, "hideLyrics", [])
        assert not session.active
        assert not sink.visible

    def test_play_parses_numbers(self, session, audio):
        from src.commands import run_command
        run_command(session, "playLinkedAudio theme 80 120 -20")
        t = audio.track
        assert (t.name, t.volume, t.pitch, t.pan) == ("theme", 80, 120, -20)

    def test_play_defaults_for_bad_numbers(self, session, audio):
        from src.commands import run_command
        run_command(session, "playLyricsBGM theme loud nan")
        t = audio.track
        assert (t.volume, t.pitch, t.pan) == (100, 100, 0)

    def test_play_without_track_is_ignored(self, session, audio):
        from src.commands import run_command
        assert run_command(session, "playLinkedAudio")
        assert audio.track is None

    def test_play_queued_behind_load(self, manual_session, executor, audio):
        from src.commands import run_command
        run_command(manual_session, "showLyrics")
        run_command(manual_session, "playLinkedAudio song")
        assert audio.track is None
        executor.complete()
        manual_session.tick()
        assert audio.track.name == "song"

    def test_snake_case_alias(self, manual_session):
        from src.commands import run_command
        assert run_command(manual_session, "show_lyrics")
        assert manual_session.loading

    def test_unknown_and_empty(self, session):
        from src.commands import run_command
        assert run_command(session, "changeWeather rain") is False
        assert run_command(session, "   ") is False
        assert run_command(session, "# comment only") is False

    def test_unbalanced_quotes(self, session):
        from src.commands import run_command
        assert run_command(session, 'showLyrics "broken') is False

    def test_handler_errors_are_contained(self, session, audio):
        from src.commands import run_command

        def boom(*args, **kwargs):
            raise RuntimeError("device lost")

        audio.play = boom
        assert run_command(session, "playLinkedAudio theme") is True
