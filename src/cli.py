"""Command line interface with typer subcommands."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.live import Live
from rich.markup import escape
from rich.prompt import Confirm
from rich.table import Table

from src.utils.config import AppConfig, DEFAULT_CONFIG_YAML, load_config, merge_cli_overrides
from src.utils.logging import setup_logging, Verbosity, console, info, success, warn, error

load_dotenv()

app = typer.Typer(
    name="timeline-lyrics",
    help="Show timestamped lyrics in sync with a playing track.",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# ── Helper functions ──────────────────────────────────────────────────────────

def _verbosity(silent: bool, verbose: bool) -> Verbosity:
    return Verbosity.SILENT if silent else (Verbosity.VERBOSE if verbose else Verbosity.NORMAL)


def _load_config(path: Path | None, overrides: dict[str, Any]) -> AppConfig:
    try:
        return merge_cli_overrides(load_config(path), overrides)
    except ValidationError as e:
        error(f"Invalid configuration:\n{escape(str(e))}")
        raise typer.Exit(1)


def _make_session(cfg: AppConfig):
    from src.display.terminal import TerminalSink
    from src.playback.audio import WallClockAudioSource
    from src.playback.session import LyricsSession

    source = WallClockAudioSource()
    sink = TerminalSink(cfg.display)
    return LyricsSession(cfg, source, sink), source, sink


def _run_for(session, seconds: float, interval: float) -> None:
    deadline = time.monotonic() + seconds
    while time.monotonic() < deadline:
        session.tick()
        time.sleep(interval)


# ── PLAY ──────────────────────────────────────────────────────────────────────

@app.command()
def play(
    lyrics: Annotated[Path, typer.Argument(help="Lyric file (.lrc)")],
    audio: Annotated[Optional[str], typer.Option("--audio", "-a", help="Track name to link (default: file stem)")] = None,
    offset: Annotated[Optional[float], typer.Option(help="Seconds added to playback time")] = None,
    start: Annotated[float, typer.Option(help="Start position in seconds")] = 0.0,
    separator: Annotated[Optional[str], typer.Option(help="Primary/secondary separator")] = None,
    config: Annotated[Optional[Path], typer.Option("--config")] = None,
    silent: Annotated[bool, typer.Option("--silent")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
):
    """Play a lyric file against a wall-clock track and render it in the terminal."""
    setup_logging(_verbosity(silent, verbose))
    cfg = _load_config(config, {"lyrics.offset": offset, "display.separator": separator})

    session, source, sink = _make_session(cfg)
    try:
        session.show_lyrics(str(lyrics.resolve()))
        session.play_linked_audio(audio or lyrics.stem)
        if not session.wait_for_load(cfg.playback.load_timeout):
            error(f"Could not load {escape(str(lyrics))}")
            raise typer.Exit(1)
        if start:
            source.seek_to(start)

        end = session.timeline.end_time + cfg.playback.tail_seconds
        interval = cfg.playback.tick_interval_ms / 1000
        try:
            with Live(sink, console=console, refresh_per_second=min(30, max(1, int(1 / interval))), transient=True):
                while source.elapsed() < end:
                    session.tick()
                    time.sleep(interval)
        except KeyboardInterrupt:
            warn("Stopped")
            return
        success(f"Finished {escape(lyrics.name)}")
    finally:
        session.close()


# ── INSPECT ───────────────────────────────────────────────────────────────────

@app.command()
def inspect(
    lyrics: Annotated[Path, typer.Argument(help="Lyric file (.lrc)")],
    separator: Annotated[Optional[str], typer.Option(help="Primary/secondary separator")] = None,
    at: Annotated[Optional[float], typer.Option(help="Highlight the line active at this time")] = None,
    offset: Annotated[float, typer.Option(help="Offset used with --at")] = 0.0,
    config: Annotated[Optional[Path], typer.Option("--config")] = None,
):
    """Print the parsed timeline of a lyric file."""
    setup_logging(Verbosity.NORMAL)
    from src.lyrics.cursor import NO_LINE, resolve
    from src.lyrics.parser import read_lyrics_file
    from src.lyrics.timestamp import format_timestamp

    cfg = _load_config(config, {"display.separator": separator})
    try:
        timeline = read_lyrics_file(lyrics, separator=cfg.display.separator)
    except (OSError, UnicodeDecodeError) as e:
        error(f"Cannot read {escape(str(lyrics))}: {escape(str(e))}")
        raise typer.Exit(1)

    active = resolve(at, timeline, offset) if at is not None else NO_LINE

    table = Table(title=escape(lyrics.name))
    table.add_column("#", justify="right", style="dim")
    table.add_column("Time", style="cyan")
    table.add_column("Primary")
    table.add_column("Secondary", style="magenta")
    for i, line in enumerate(timeline):
        table.add_row(
            str(i), format_timestamp(line.time), escape(line.primary), escape(line.secondary),
            style="highlight" if i == active else None,
        )
    console.print(table)

    info(f"{len(timeline)} timed lines, {timeline.skipped} skipped")
    if at is not None:
        info(f"Active at {at:.2f}s: {'none' if active == NO_LINE else f'#{active}'}")


# ── RUN ───────────────────────────────────────────────────────────────────────

@app.command()
def run(
    script: Annotated[Path, typer.Argument(help="Command script, one command per line")],
    config: Annotated[Optional[Path], typer.Option("--config")] = None,
    silent: Annotated[bool, typer.Option("--silent")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
):
    """Run a command script (showLyrics / hideLyrics / playLinkedAudio / wait N)."""
    setup_logging(_verbosity(silent, verbose))
    from src.commands import run_command

    try:
        lines = script.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        error(f"Cannot read {escape(str(script))}: {escape(str(e))}")
        raise typer.Exit(1)

    cfg = _load_config(config, {})
    session, _source, sink = _make_session(cfg)
    interval = cfg.playback.tick_interval_ms / 1000
    try:
        with Live(sink, console=console, refresh_per_second=min(30, max(1, int(1 / interval))), transient=True):
            for n, raw in enumerate(lines, 1):
                line = raw.strip()
                if not line or line.startswith("#"):
                    continue
                parts = line.split()
                if parts[0].lower() == "wait":
                    try:
                        seconds = float(parts[1])
                    except (IndexError, ValueError):
                        warn(f"Line {n}: wait needs a number of seconds")
                        continue
                    _run_for(session, seconds, interval)
                elif not run_command(session, line):
                    warn(f"Line {n}: unknown command {escape(parts[0])!r}")
                session.tick()
    except KeyboardInterrupt:
        warn("Stopped")
    finally:
        session.close()


# ── INIT CONFIG ───────────────────────────────────────────────────────────────

@app.command(name="init-config")
def init_config(
    output: Annotated[Path, typer.Option("--output", "-o")] = Path("lyrics.yaml"),
    force: Annotated[bool, typer.Option("--force")] = False,
):
    """Generate a default lyrics.yaml in the current directory."""
    setup_logging(Verbosity.NORMAL)
    if output.exists() and not force:
        if not Confirm.ask(f"{output} exists. Overwrite?", default=False):
            raise typer.Exit(0)
    output.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")
    success(f"Created {output}")


# ── ENTRY POINT ───────────────────────────────────────────────────────────────

def app_entry():
    app()


if __name__ == "__main__":
    app_entry()
