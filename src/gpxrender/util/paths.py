# gpxrender/util/paths.py
from __future__ import annotations

from pathlib import Path

GPX_SUFFIX = ".gpx"


def ensure_dir(path: Path) -> None:
    """Ensure a directory exists."""
    path.mkdir(parents=True, exist_ok=True)


def list_gpx_files(input_dir: Path) -> list[Path]:
    """Regular *.gpx files (case-insensitive) directly inside input_dir, sorted by name."""
    return sorted(
        (p for p in input_dir.iterdir() if p.is_file() and p.suffix.lower() == GPX_SUFFIX),
        key=lambda p: p.name,
    )
