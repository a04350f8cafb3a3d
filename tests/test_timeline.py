import pytest

from cooking_path.services.timeline import format_clock, format_minutes, format_step_window


@pytest.mark.parametrize(
    "minutes, expected",
    [
        (0, "0min"),
        (45, "45min"),
        (60, "1h"),
        (65, "1h 5min"),
        (120, "2h"),
        (125, "2h 5min"),
    ],
)
def test_format_minutes(minutes, expected):
    assert format_minutes(minutes) == expected


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "0:00"),
        (65, "1:05"),
        (600, "10:00"),
        (3725, "1:02:05"),
    ],
)
def test_format_clock(seconds, expected):
    assert format_clock(seconds) == expected


def test_format_step_window():
    assert format_step_window(15, 15) == "15min → 30min"
    assert format_step_window(50, 25) == "50min → 1h 15min"
