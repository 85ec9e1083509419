# gpxrender/geometry/projection.py
"""
Coordinate-to-canvas projection for gpxrender

Maps WGS84 lat/lon onto a fixed-size canvas:
  - bounding box of all points
  - one scale for both axes (aspect preserving), fitted to the tighter axis
  - centred on the canvas
  - y flipped so north is up on a down-positive screen axis

Longitude is treated as x and latitude as y directly; no map projection
(Mercator, UTM) is applied.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from gpxrender.errors import DegenerateGeometryError
from gpxrender.formats.gpx import TrackPoint

CANVAS_WIDTH = 800
CANVAS_HEIGHT = 600

# Degrees; roughly 0.1 m of latitude
DEFAULT_MIN_RANGE = 1e-6


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @property
    def lat_range(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lon_range(self) -> float:
        return self.max_lon - self.min_lon

    @classmethod
    def of(cls, points: Iterable[TrackPoint]) -> "BoundingBox":
        pts = list(points)
        if not pts:
            raise DegenerateGeometryError("cannot fit an empty point sequence")
        lats = [p.lat for p in pts]
        lons = [p.lon for p in pts]
        if not all(math.isfinite(v) for v in lats + lons):
            raise DegenerateGeometryError("track contains non-finite coordinates")
        return cls(min(lats), max(lats), min(lons), max(lons))

    def expanded(self, min_range: float) -> "BoundingBox":
        """
        Widen any axis narrower than min_range symmetrically about its centre.
        """
        min_lat, max_lat = _widen(self.min_lat, self.max_lat, min_range)
        min_lon, max_lon = _widen(self.min_lon, self.max_lon, min_range)
        return BoundingBox(min_lat, max_lat, min_lon, max_lon)


def _widen(lo: float, hi: float, min_range: float) -> tuple[float, float]:
    if hi - lo >= min_range:
        return lo, hi
    mid = (lo + hi) / 2
    return mid - min_range / 2, mid + min_range / 2


@dataclass(frozen=True)
class ProjectionTransform:
    """
    Affine lat/lon -> pixel mapping derived once per track.

    offset_x/offset_y are the translation terms, already including the
    centring offsets.
    """
    scale: float
    offset_x: float
    offset_y: float
    canvas_width: int
    canvas_height: int

    def apply(self, lat: float, lon: float) -> tuple[float, float]:
        x = lon * self.scale + self.offset_x
        y = self.canvas_height - (lat * self.scale + self.offset_y)
        return x, y

    def project(self, points: Iterable[TrackPoint]) -> list[tuple[float, float]]:
        return [self.apply(p.lat, p.lon) for p in points]


def compute_transform(
        points: Sequence[TrackPoint],
        canvas_width: int = CANVAS_WIDTH,
        canvas_height: int = CANVAS_HEIGHT,
        *,
        min_range: Optional[float] = DEFAULT_MIN_RANGE,
) -> ProjectionTransform:
    """
    Fit the bounding box of `points` onto the canvas.

    scale     = min(W / lon_range, H / lat_range)
    x_offset  = (W - lon_range * scale) / 2
    y_offset  = (H - lat_range * scale) / 2
    offset_x  = -min_lon * scale + x_offset
    offset_y  = -min_lat * scale + y_offset

    Axes narrower than min_range degrees are widened to min_range first, so a
    single point or a straight N-S / E-W line ends up centred. With
    min_range=None (or 0) a zero extent raises DegenerateGeometryError.

    Raises:
      DegenerateGeometryError, ValueError (non-positive canvas)
    """
    if canvas_width <= 0 or canvas_height <= 0:
        raise ValueError(f"canvas must be positive, got {canvas_width}x{canvas_height}")

    if min_range is not None and min_range < 0:
        raise ValueError(f"min_range must not be negative, got {min_range}")

    bbox = BoundingBox.of(points)
    if min_range:
        bbox = bbox.expanded(min_range)

    lat_range = bbox.lat_range
    lon_range = bbox.lon_range
    if lat_range <= 0 or lon_range <= 0:
        raise DegenerateGeometryError(
            f"zero-extent bounding box (lat range {lat_range}, lon range {lon_range})"
        )
    scale = min(canvas_width / lon_range, canvas_height / lat_range)
    if not math.isfinite(scale) or scale <= 0:
        raise DegenerateGeometryError(f"bounding box yields unusable scale {scale}")

    x_offset = (canvas_width - lon_range * scale) / 2
    y_offset = (canvas_height - lat_range * scale) / 2

    transform = ProjectionTransform(
        scale=scale,
        offset_x=-bbox.min_lon * scale + x_offset,
        offset_y=-bbox.min_lat * scale + y_offset,
        canvas_width=canvas_width,
        canvas_height=canvas_height,
    )

    # The mapping is affine, so finite corners mean every point inside is finite.
    corners = (
        transform.apply(bbox.min_lat, bbox.min_lon) + transform.apply(bbox.max_lat, bbox.max_lon)
    )
    if not all(math.isfinite(v) for v in (transform.offset_x, transform.offset_y) + corners):
        raise DegenerateGeometryError(
            f"bounding box {bbox} overflows the canvas mapping at scale {scale}"
        )
    return transform


def project_track(
        points: Sequence[TrackPoint],
        canvas_width: int = CANVAS_WIDTH,
        canvas_height: int = CANVAS_HEIGHT,
        *,
        min_range: Optional[float] = DEFAULT_MIN_RANGE,
) -> list[tuple[float, float]]:
    """Project every point to canvas pixel coordinates."""
    transform = compute_transform(points, canvas_width, canvas_height, min_range=min_range)
    return transform.project(points)
