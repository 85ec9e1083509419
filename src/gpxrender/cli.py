#!/usr/bin/env python3
"""
gpxrender: draw GPX tracks as PNG or SVG images.

Converts every *.gpx in the input directory into
    <output_dir>/<start time>.<png|svg>
and writes <output_dir>/log.txt with one line per converted file:
    2023_08_01_07_00_00.png - Morning Run
or, with --totals,
    2023_08_01_07_00_00.png - Morning Run - Total Time: 1800s - Total Distance: 1412.34m

Paths and drawing options come from gpxrender.config (CLI > env > user
config > project config > defaults).
"""

from __future__ import annotations

import argparse
from pathlib import Path

from gpxrender.batch.convert import TrackConverter, run_batch
from gpxrender.config import load_config
from gpxrender.errors import ConfigError
from gpxrender.render.base import FORMATS, StrokeStyle, get_renderer
from gpxrender.util.logging import log, warn


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="gpxrender: Draw GPX tracks as PNG or SVG images.")
    ap.add_argument("--input-dir", type=Path, default=None,
                    help="Directory of GPX files (default: from config or ./gpx-files)")
    ap.add_argument("--output-dir", type=Path, default=None,
                    help="Directory for images and log.txt (default: from config or ./output-images)")
    ap.add_argument("--format", choices=FORMATS, default=None,
                    help="Image format (default: from config or png)")
    ap.add_argument("--totals", action=argparse.BooleanOptionalAction, default=None,
                    help="Append total time and distance to each log line.")
    ap.add_argument("--width", type=int, default=None,
                    help="Canvas width in pixels (default: 800)")
    ap.add_argument("--height", type=int, default=None,
                    help="Canvas height in pixels (default: 600)")
    ap.add_argument("--stroke-color", default=None,
                    help="Polyline colour (default: blue)")
    ap.add_argument("--stroke-width", type=float, default=None,
                    help="Polyline width in pixels (default: 4)")
    ap.add_argument("--min-range", type=float, default=None,
                    help="Minimum bounding-box extent in degrees; 0 rejects flat tracks (default: 1e-6)")
    ap.add_argument("--log-name", default=None,
                    help="Log file name inside the output directory (default: log.txt)")
    ap.add_argument("--dry-run", action="store_true",
                    help="List planned outputs, but do not write images or the log.")
    ap.add_argument("--verbose", action="store_true",
                    help="More logging.")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(overrides={
            "paths.input_dir": args.input_dir,
            "paths.output_dir": args.output_dir,
            "paths.log_name": args.log_name,
            "canvas.width": args.width,
            "canvas.height": args.height,
            "canvas.min_range": args.min_range,
            "stroke.color": args.stroke_color,
            "stroke.width": args.stroke_width,
            "output.format": args.format,
            "output.totals": args.totals,
        })
    except ConfigError as e:
        warn(f"ERROR: {e}")
        return 2

    if args.verbose:
        for key, origin in sorted(cfg.source.items()):
            log(f"config {key} <- {origin}")

    input_dir = cfg.paths.input_dir
    if not input_dir.is_dir():
        warn(f"ERROR: input directory does not exist: {input_dir}")
        return 2

    converter = TrackConverter(
        renderer=get_renderer(cfg.output.format),
        summarize=cfg.output.totals,
        canvas_width=cfg.canvas.width,
        canvas_height=cfg.canvas.height,
        style=StrokeStyle(color=cfg.stroke.color, width=cfg.stroke.width),
        min_range=cfg.canvas.min_range,
    )

    try:
        result = run_batch(
            input_dir,
            cfg.paths.output_dir,
            converter,
            log_name=cfg.paths.log_name,
            dry_run=args.dry_run,
            verbose=args.verbose,
        )
    except OSError as e:
        warn(f"ERROR: cannot prepare output directory {cfg.paths.output_dir}: {e}")
        return 2
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
