# gpxrender/analyze/track.py
"""
Trip totals for gpxrender: elapsed time and great-circle distance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from haversine import haversine, Unit

from gpxrender.errors import GeometryError
from gpxrender.formats.gpx import TrackPoint

EARTH_RADIUS_M = 6_371_000.0


@dataclass(frozen=True)
class TripSummary:
    total_elapsed_s: int = 0
    total_distance_m: float = 0.0


def haversine_m(p0: TrackPoint, p1: TrackPoint) -> float:
    """Great-circle distance in metres on a sphere of radius EARTH_RADIUS_M."""
    # Angular distance, so the radius is ours rather than the library's mean radius.
    # Coordinates are not range-checked.
    try:
        angle = haversine((p0.lat, p0.lon), (p1.lat, p1.lon), unit=Unit.RADIANS, check=False)
    except ValueError as e:
        raise GeometryError(
            f"cannot measure ({p0.lat}, {p0.lon}) -> ({p1.lat}, {p1.lon}): {e}"
        ) from e
    return angle * EARTH_RADIUS_M


def elapsed_seconds(p0: TrackPoint, p1: TrackPoint) -> int:
    """Whole seconds from p0 to p1, truncated toward zero; 0 if either lacks a time."""
    if p0.time is None or p1.time is None:
        return 0
    return int((p1.time - p0.time).total_seconds())


def compute_step_metrics(points: Sequence[TrackPoint]) -> tuple[list[int], list[float]]:
    """Return per-step elapsed seconds and distance (m) for consecutive point pairs."""
    dts = []
    ds = []

    for p0, p1 in zip(points, points[1:]):
        dts.append(elapsed_seconds(p0, p1))
        ds.append(haversine_m(p0, p1))

    return dts, ds


def summarize_trip(points: Sequence[TrackPoint]) -> TripSummary:
    """
    Fold over consecutive pairs: distance always accumulates, time only when
    both points of the pair are timestamped. A single point yields (0, 0.0).
    """
    dts, ds = compute_step_metrics(points)
    return TripSummary(total_elapsed_s=sum(dts), total_distance_m=sum(ds, 0.0))
