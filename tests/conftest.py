from pathlib import Path
import pytest


@pytest.fixture
def sample_gpx_path() -> Path:
    return Path(__file__).parent / "data" / "morning_run.gpx"


def make_gpx(
        points=(),
        *,
        name="Morning Run",
        time="2023-08-01T07:00:00Z",
        ns="http://www.topografix.com/GPX/1/1",
        extra_tracks="",
        extra_segments="",
) -> str:
    """Build GPX text; points are (lat, lon) or (lat, lon, time) tuples."""
    md = ""
    if name is not None:
        md += f"<name>{name}</name>"
    if time is not None:
        md += f"<time>{time}</time>"

    pts = ""
    for p in points:
        t = f"<time>{p[2]}</time>" if len(p) > 2 and p[2] else ""
        pts += f'<trkpt lat="{p[0]}" lon="{p[1]}">{t}</trkpt>'

    xmlns = f' xmlns="{ns}"' if ns else ""
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>'
        f'<gpx version="1.1"{xmlns}>'
        f"<metadata>{md}</metadata>"
        f"<trk><trkseg>{pts}</trkseg>{extra_segments}</trk>"
        f"{extra_tracks}"
        f"</gpx>"
    )


@pytest.fixture
def gpx_text():
    return make_gpx
