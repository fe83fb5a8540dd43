"""timeline-lyrics: show timestamped lyrics in sync with a playing track.

Start with:
    python main.py play data/lyrics.lrc
    python main.py inspect data/lyrics.lrc --at 42
    python main.py run data/demo.txt
"""

from __future__ import annotations

from src.cli import app_entry

if __name__ == "__main__":
    app_entry()
