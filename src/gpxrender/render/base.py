# gpxrender/render/base.py
"""
Renderer contract shared by the raster and vector backends.

A renderer receives projected pixel coordinates only, never lat/lon, and
returns the encoded image as bytes. Writing to disk is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from gpxrender.errors import ConfigError

Path2D = Sequence[tuple[float, float]]


@dataclass(frozen=True)
class StrokeStyle:
    color: str = "blue"
    width: float = 4.0


class Renderer(Protocol):
    extension: str

    def render(self, path: Path2D, *, width: int, height: int, style: StrokeStyle) -> bytes:
        """Draw one open polyline (no fill, transparent background)."""
        ...


FORMATS = ("png", "svg")


def get_renderer(fmt: str) -> Renderer:
    """Return the renderer for an output format ("png" or "svg")."""
    key = (fmt or "").strip().lower()
    if key == "png":
        from gpxrender.render.raster import RasterRenderer
        return RasterRenderer()
    if key == "svg":
        from gpxrender.render.vector import VectorRenderer
        return VectorRenderer()
    raise ConfigError(f"Unknown output format {fmt!r}; expected one of {', '.join(FORMATS)}")
