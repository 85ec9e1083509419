# gpxrender/formats/gpx.py
"""
GPX reading for gpxrender

This module is intentionally format-focused:
- namespace-agnostic element lookup (GPX 1.0, 1.1, or none)
- extracting the first track segment as an ordered point list
- extracting the mandatory metadata (name, start time)

Key design principle:
  Keep orchestration (directories, output files, the log) in the batch
  driver, separate from GPX parsing (here).
"""

from __future__ import annotations

import datetime as _dt
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from xml.etree import ElementTree as ET

from gpxrender.errors import MalformedDocumentError, MissingMetadataError

# Fractional seconds of any length; fromisoformat before 3.11 wants 3 or 6 digits
_fraction = re.compile(r"\.(\d+)")


def qn(tag: str) -> str:
    """
    Build a namespace-wildcard ElementTree path step for a GPX tag.

    "{*}trk" matches <trk> in the GPX 1.0 namespace, the GPX 1.1 namespace,
    or no namespace at all.
    """
    return f"{{*}}{tag}"


def _parse_gpx_time(text: str) -> Optional[_dt.datetime]:
    """
    Parse an ISO-8601 timestamp commonly found in GPX <time> nodes.

    Expected examples:
      - "2026-01-02T21:14:44Z"
      - "2026-01-02T21:14:44.123Z"
      - "2026-01-02T21:14:44+00:00"

    Returns None for blank or unparseable text.
    """
    if not text:
        return None
    s = text.strip()
    if not s:
        return None

    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    s = _fraction.sub(lambda m: "." + (m.group(1) + "000000")[:6], s, count=1)

    try:
        dt = _dt.datetime.fromisoformat(s)
    except ValueError:
        return None

    # Naive times are assumed to be UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)

    return dt.astimezone(_dt.timezone.utc)


@dataclass(frozen=True)
class TrackPoint:
    lat: float
    lon: float
    time: Optional[_dt.datetime] = None


@dataclass(frozen=True)
class Track:
    """
    The first segment of the first track of a GPX document.

    start_time is kept as the raw metadata string; output filenames are
    derived from it verbatim.
    """
    points: tuple[TrackPoint, ...]
    name: str
    start_time: str


def _parse_coord(trkpt: ET.Element, attr: str, index: int) -> float:
    raw = trkpt.get(attr)
    if raw is None:
        raise MalformedDocumentError(f"trkpt #{index} has no '{attr}' attribute")
    try:
        value = float(raw)
    except ValueError:
        raise MalformedDocumentError(
            f"trkpt #{index} has non-numeric '{attr}': {raw!r}"
        ) from None
    if not math.isfinite(value):
        raise MalformedDocumentError(f"trkpt #{index} has non-finite '{attr}': {raw!r}")
    return value


def extract_trackpoints(trkseg: ET.Element) -> list[TrackPoint]:
    """Extract ordered trackpoints from a single <trkseg> element."""
    pts: list[TrackPoint] = []

    for i, trkpt in enumerate(trkseg.findall(qn("trkpt"))):
        lat = _parse_coord(trkpt, "lat", i)
        lon = _parse_coord(trkpt, "lon", i)
        time = _parse_gpx_time(trkpt.findtext(qn("time")) or "")
        pts.append(TrackPoint(lat=lat, lon=lon, time=time))

    return pts


def _metadata_field(root: ET.Element, tag: str) -> Optional[str]:
    md = root.find(qn("metadata"))
    if md is None:
        return None
    value = (md.findtext(qn(tag)) or "").strip()
    return value or None


def parse_track(text: Union[str, bytes]) -> Track:
    """
    Parse GPX XML text into a Track.

    Only the first <trk> and the first <trkseg> within it are read.

    Raises:
      MalformedDocumentError: not well-formed XML, no trk/trkseg, empty
        segment, or bad coordinates
      MissingMetadataError: <metadata><name> or <metadata><time> absent
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise MalformedDocumentError(f"not well-formed XML ({e})") from e

    trk = root.find(qn("trk"))
    if trk is None:
        raise MalformedDocumentError("no <trk> element")
    trkseg = trk.find(qn("trkseg"))
    if trkseg is None:
        raise MalformedDocumentError("no <trkseg> element in first <trk>")

    points = extract_trackpoints(trkseg)

    name = _metadata_field(root, "name")
    start_time = _metadata_field(root, "time")
    if name is None or start_time is None:
        missing = [k for k, v in (("name", name), ("time", start_time)) if v is None]
        raise MissingMetadataError(f"missing required metadata: {', '.join(missing)}")

    if not points:
        raise MalformedDocumentError("first <trkseg> contains no <trkpt>")

    return Track(points=tuple(points), name=name, start_time=start_time)


def read_track(path: Path) -> Track:
    """
    Read a GPX file into a Track.

    Raises:
      MalformedDocumentError, MissingMetadataError, OSError
    """
    return parse_track(Path(path).read_bytes())
