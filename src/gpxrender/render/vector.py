# gpxrender/render/vector.py
"""
SVG rendering via svgwrite: a single <path> with M/L commands.
"""

from __future__ import annotations

import svgwrite

from gpxrender.errors import RenderError
from gpxrender.render.base import Path2D, StrokeStyle


def path_data(path: Path2D, precision: int = 3) -> str:
    """Build SVG path data: move-to the first point, line-to each following point."""
    fmt = "{:.%df}" % precision
    return " ".join(
        f"{'M' if i == 0 else 'L'}{fmt.format(x)},{fmt.format(y)}"
        for i, (x, y) in enumerate(path)
    )


class VectorRenderer:
    extension = "svg"

    def __init__(self, precision: int = 3) -> None:
        self.precision = precision

    def render(self, path: Path2D, *, width: int, height: int, style: StrokeStyle) -> bytes:
        try:
            dwg = svgwrite.Drawing(size=(width, height))
            dwg.viewbox(0, 0, width, height)
            if path:
                dwg.add(dwg.path(
                    d=path_data(path, self.precision),
                    fill="none",
                    stroke=style.color,
                    stroke_width=style.width,
                ))
            return dwg.tostring().encode("utf-8")
        except (ValueError, TypeError) as e:
            raise RenderError(f"SVG rendering failed: {e}") from e
