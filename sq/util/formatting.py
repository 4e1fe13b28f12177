"""Turning nights into human readable text for the history view."""

from datetime import datetime

_QUALITY_LABELS = {
    -1: "--",
    0: "Very bad",
    1: "Poor",
    2: "So-so",
    3: "OK",
    4: "Pretty good",
    5: "Excellent",
}

DATE_FORMAT = "%A %b-%d-%Y Time: %H:%M"
TITLE = "Here is your sleep data"


# Anything unrecognised reads as "OK", same as an explicit 3.
def convert_numeric_quality_to_string(quality):
    return _QUALITY_LABELS.get(quality, _QUALITY_LABELS[3])


def convert_long_to_date_string(system_time_milli):
    return datetime.fromtimestamp(system_time_milli / 1000).strftime(DATE_FORMAT)


def format_duration(milli):
    """Format a millisecond span as H:MM:SS. Negative spans clamp to zero."""
    seconds = max(0, int(milli) // 1000)
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h}:{m:02d}:{s:02d}"


def format_nights(nights):
    """Render the full sleep history as rich text, newest night first.

    In-progress nights only show their start time; finished nights also get
    the end time, the quality rating and how long was slept.
    """
    parts = [TITLE]
    for night in nights:
        parts.append("<br>")
        parts.append(f"<b>Start:</b>\t{convert_long_to_date_string(night.start_time_milli)}<br>")
        if night.end_time_milli != night.start_time_milli:
            parts.append(f"<b>End:</b>\t{convert_long_to_date_string(night.end_time_milli)}<br>")
            parts.append(f"<b>Quality:</b>\t{convert_numeric_quality_to_string(night.sleep_quality)}<br>")
            duration = format_duration(night.end_time_milli - night.start_time_milli)
            parts.append(f"<b>Hours:Minutes:Seconds:</b>\t{duration}<br><br>")
    return "".join(parts)
