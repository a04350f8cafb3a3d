"""
Timeline formatting helpers.

Pure functions shared by the progress tracker and the API responses.
"""

# Literal signals shown next to a step while the timer runs
START_NOW = "START NOW!"
SHOULD_BE_DONE = "should be done"


def format_minutes(minutes: int) -> str:
    """45 -> "45min", 60 -> "1h", 65 -> "1h 5min"."""
    if minutes < 60:
        return f"{minutes}min"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}min" if mins > 0 else f"{hours}h"


def format_clock(seconds: int) -> str:
    """Elapsed timer display: "4:05" or "1:02:09"."""
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_step_window(start_time: int, duration: int) -> str:
    """Step window label, e.g. "15min → 30min"."""
    return f"{format_minutes(start_time)} → {format_minutes(start_time + duration)}"
