# gpxrender/batch/convert.py
"""
Batch conversion of GPX files into track images.

One pipeline covers every variant:
  - renderer: RasterRenderer (png) or VectorRenderer (svg)
  - summarize: append trip totals to each log line, or not

Per file:
  read_track -> compute_transform -> (summarize_trip) -> render
  -> write <formatted start time>.<ext> -> append one log line

Files are processed strictly sequentially in name order. A failing file is
reported and skipped; the batch always runs to the end.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Optional

from gpxrender.analyze.track import TripSummary, summarize_trip
from gpxrender.errors import GPXRenderError
from gpxrender.formats.gpx import read_track
from gpxrender.geometry.projection import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    DEFAULT_MIN_RANGE,
    compute_transform,
)
from gpxrender.render.base import Renderer, StrokeStyle
from gpxrender.util.logging import log, warn
from gpxrender.util.paths import ensure_dir, list_gpx_files

LOG_NAME = "log.txt"

_unsafe_chars = re.compile(r"[:.\-]")


# ----------------------------
# Naming / log formatting
# ----------------------------

def format_start_time(start_time: str) -> str:
    """
    Turn an ISO-8601 start time into a filesystem-safe stem.

      "2023-08-01T14:30:00Z" -> "2023_08_01_14_30_00"
    """
    s = _unsafe_chars.sub("_", start_time.strip())
    s = s.replace("T", "_", 1)
    if s.endswith("Z"):
        s = s[:-1]
    return s


def format_log_entry(filename: str, name: str, summary: Optional[TripSummary] = None) -> str:
    if summary is None:
        return f"{filename} - {name}"
    return (
        f"{filename} - {name}"
        f" - Total Time: {summary.total_elapsed_s}s"
        f" - Total Distance: {summary.total_distance_m:.2f}m"
    )


# ----------------------------
# Log sink
# ----------------------------

class ConversionLog:
    """
    Append-only conversion log for one batch.

    Opening truncates the file. The handle is unbuffered binary: an append
    either lands whole or is rolled back, so no line survives a failed write.
    """

    def __init__(self, path: Path, fh: BinaryIO) -> None:
        self.path = path
        self._fh = fh

    @classmethod
    def open(cls, path: Path) -> "ConversionLog":
        return cls(path, path.open("wb", buffering=0))

    def append(self, line: str) -> None:
        data = (line + "\n").encode("utf-8")
        pos = self._fh.tell()
        try:
            written = self._fh.write(data)
            if written is not None and written != len(data):
                raise OSError(f"short write to {self.path}: {written} of {len(data)} bytes")
        except OSError:
            self._fh.seek(pos)
            self._fh.truncate(pos)
            raise

    def close(self) -> None:
        self._fh.close()

    def __enter__(self) -> "ConversionLog":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


# ----------------------------
# Results
# ----------------------------

@dataclass(frozen=True)
class ConversionResult:
    source: Path
    output: Path
    track_name: str
    log_entry: str
    summary: Optional[TripSummary] = None


@dataclass(frozen=True)
class FileFailure:
    source: Path
    error: Exception

    @property
    def message(self) -> str:
        return str(self.error) or type(self.error).__name__


@dataclass
class BatchResult:
    converted: list[ConversionResult] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)
    planned: list[tuple[Path, Path]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


# ----------------------------
# Pipeline
# ----------------------------

@dataclass(frozen=True)
class TrackConverter:
    """One GPX -> image pipeline, parameterized by renderer and summarizer."""

    renderer: Renderer
    summarize: bool = False
    canvas_width: int = CANVAS_WIDTH
    canvas_height: int = CANVAS_HEIGHT
    style: StrokeStyle = StrokeStyle()
    min_range: Optional[float] = DEFAULT_MIN_RANGE

    def output_name(self, start_time: str) -> str:
        return f"{format_start_time(start_time)}.{self.renderer.extension}"

    def plan(self, gpx_path: Path, out_dir: Path) -> Path:
        """Output path a conversion would write, without rendering anything."""
        return out_dir / self.output_name(read_track(gpx_path).start_time)

    def convert(self, gpx_path: Path, out_dir: Path, sink: ConversionLog) -> ConversionResult:
        """
        Convert one GPX file and append its log line.

        Raises:
          GPXRenderError subclasses, OSError
        """
        track = read_track(gpx_path)
        transform = compute_transform(
            track.points, self.canvas_width, self.canvas_height, min_range=self.min_range,
        )
        summary = summarize_trip(track.points) if self.summarize else None

        image = self.renderer.render(
            transform.project(track.points),
            width=self.canvas_width,
            height=self.canvas_height,
            style=self.style,
        )

        filename = self.output_name(track.start_time)
        out_path = out_dir / filename
        entry = format_log_entry(filename, track.name, summary)

        # Nothing is left behind for a file whose image or log line fails.
        try:
            out_path.write_bytes(image)
            sink.append(entry)
        except OSError:
            out_path.unlink(missing_ok=True)
            raise

        return ConversionResult(
            source=gpx_path,
            output=out_path,
            track_name=track.name,
            log_entry=entry,
            summary=summary,
        )


def run_batch(
        input_dir: Path,
        out_dir: Path,
        converter: TrackConverter,
        *,
        log_name: str = LOG_NAME,
        dry_run: bool = False,
        verbose: bool = False,
) -> BatchResult:
    """
    Convert every *.gpx in input_dir into out_dir.

    Per-file errors (GPXRenderError, OSError) are reported and collected in
    BatchResult.failures; they never propagate. Errors listing input_dir or
    creating out_dir/the log do propagate, since nothing can be converted.
    """
    result = BatchResult()
    files = list_gpx_files(input_dir)

    if not files:
        log(f"No GPX files found in {input_dir}")

    if dry_run:
        for src in files:
            try:
                dest = converter.plan(src, out_dir)
            except (GPXRenderError, OSError) as e:
                result.failures.append(FileFailure(source=src, error=e))
                warn(f"Would fail {src}: {e}")
                continue
            result.planned.append((src, dest))
            if verbose:
                log(f"  {src} -> {dest}")
        log(f"DRY RUN: would convert {len(result.planned)} file(s) into {out_dir}")
        return result

    ensure_dir(out_dir)
    with ConversionLog.open(out_dir / log_name) as sink:
        for src in files:
            try:
                res = converter.convert(src, out_dir, sink)
            except (GPXRenderError, OSError) as e:
                failure = FileFailure(source=src, error=e)
                result.failures.append(failure)
                warn(f"Failed to process {src}: {failure.message}")
                continue

            result.converted.append(res)
            log(f"Generated {res.output}")
            if verbose:
                log(f"  {res.log_entry}")

    log(f"Batch complete: {len(result.converted)} converted, {len(result.failures)} failed.")
    return result
