"""Configuration management with YAML support and pydantic models."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

_POSITION_RE = re.compile(r"^-?\d+(?:\.\d+)?%?$")


class LyricsConfig(BaseModel):
    file: str = "lyrics.lrc"
    data_dir: str = "data"
    offset: float = 0.0  # seconds, may be negative


class DisplayConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    font_size: int = Field(default=24, gt=0)
    text_color: str = "white"
    outline_color: str = "black"
    outline_width: int = Field(default=2, ge=0)
    x_position: str = "50%"  # absolute px ("120") or percent of viewport width ("50%")
    y_position: str = "80%"
    separator: str = Field(default="//", min_length=1)
    viewport_width: int = Field(default=816, gt=0)
    viewport_height: int = Field(default=624, gt=0)

    @field_validator("x_position", "y_position", mode="before")
    @classmethod
    def _check_position(cls, v: Any) -> str:
        s = str(v).strip()
        if not _POSITION_RE.match(s):
            raise ValueError(f"position must be a number or a percentage, got {v!r}")
        return s


class PlaybackConfig(BaseModel):
    tick_interval_ms: int = Field(default=16, gt=0)
    load_timeout: float = Field(default=10.0, gt=0)
    tail_seconds: float = Field(default=3.0, ge=0)


class AppConfig(BaseModel):
    lyrics: LyricsConfig = LyricsConfig()
    display: DisplayConfig = DisplayConfig()
    playback: PlaybackConfig = PlaybackConfig()


def load_config(path: str | Path | None = None) -> AppConfig:
    if path is None:
        candidates = [Path("lyrics.yaml"), Path("lyrics.yml"), Path("config.yaml")]
        for c in candidates:
            if c.exists():
                path = c
                break
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return AppConfig(**data)
    return AppConfig()


def merge_cli_overrides(cfg: AppConfig, overrides: dict[str, Any]) -> AppConfig:
    data = cfg.model_dump()
    for key, val in overrides.items():
        if val is None:
            continue
        parts = key.split(".")
        d = data
        for p in parts[:-1]:
            d = d.setdefault(p, {})
        d[parts[-1]] = val
    return AppConfig(**data)


DEFAULT_CONFIG_YAML = """\
# timeline-lyrics configuration

lyrics:
  file: lyrics.lrc           # default file for showLyrics without a file name
  data_dir: data             # relative file names resolve against this folder
  offset: 0.0                # seconds added to playback time, may be negative

display:
  font_size: 24
  text_color: white
  outline_color: black
  outline_width: 2
  x_position: "50%"          # pixels ("120") or percent of viewport width
  y_position: "80%"          # pixels or percent of viewport height
  separator: "//"            # splits primary and secondary text
  viewport_width: 816
  viewport_height: 624

playback:
  tick_interval_ms: 16       # display refresh interval
  load_timeout: 10.0         # seconds to wait for a lyric file to load
  tail_seconds: 3.0          # keep playing this long after the last line
"""
