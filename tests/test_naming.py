import pytest

from gpxrender.analyze.track import TripSummary
from gpxrender.batch.convert import format_log_entry, format_start_time


@pytest.mark.parametrize(
    "start_time, expected",
    [
        ("2023-08-01T14:30:00Z", "2023_08_01_14_30_00"),
        ("2023-08-01T07:00:00.123Z", "2023_08_01_07_00_00_123"),
        ("2023-08-01T07:00:00", "2023_08_01_07_00_00"),
        (" 2023-08-01T07:00:00Z\n", "2023_08_01_07_00_00"),
    ],
)
def test_format_start_time(start_time, expected):
    assert format_start_time(start_time) == expected


def test_simple_log_entry():
    assert format_log_entry("2023_08_01_07_00_00.png", "Morning Run") == (
        "2023_08_01_07_00_00.png - Morning Run"
    )


def test_totals_log_entry():
    entry = format_log_entry("a.svg", "Loop", TripSummary(total_elapsed_s=630, total_distance_m=1412.3456))
    assert entry == "a.svg - Loop - Total Time: 630s - Total Distance: 1412.35m"


def test_totals_log_entry_zero():
    entry = format_log_entry("a.png", "Loop", TripSummary())
    assert entry == "a.png - Loop - Total Time: 0s - Total Distance: 0.00m"
