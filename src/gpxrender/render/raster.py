# gpxrender/render/raster.py
"""
PNG rendering via matplotlib (Agg).

The figure is sized so that one canvas unit is one pixel, the axes fill the
whole figure with the y axis inverted (screen coordinates), and both figure
and axes backgrounds are transparent.
"""

from __future__ import annotations

import io

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from gpxrender.errors import RenderError
from gpxrender.render.base import Path2D, StrokeStyle

DPI = 100
POINTS_PER_INCH = 72


class RasterRenderer:
    extension = "png"

    def __init__(self, dpi: int = DPI) -> None:
        self.dpi = dpi

    def render(self, path: Path2D, *, width: int, height: int, style: StrokeStyle) -> bytes:
        fig = Figure(figsize=(width / self.dpi, height / self.dpi), dpi=self.dpi)
        FigureCanvasAgg(fig)
        fig.patch.set_alpha(0.0)

        ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
        ax.set_axis_off()
        ax.patch.set_alpha(0.0)
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)

        xs = [x for x, _ in path]
        ys = [y for _, y in path]

        buf = io.BytesIO()
        try:
            # stroke width is in pixels; matplotlib wants points
            ax.plot(
                xs, ys,
                color=style.color,
                linewidth=style.width * POINTS_PER_INCH / self.dpi,
                solid_joinstyle="miter",
                solid_capstyle="butt",
            )
            fig.savefig(buf, format="png", dpi=self.dpi, transparent=True)
        except (ValueError, TypeError) as e:
            raise RenderError(f"PNG rendering failed: {e}") from e
        return buf.getvalue()
