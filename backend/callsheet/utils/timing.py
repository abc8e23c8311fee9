"""Wall-clock time utilities for schedule processing.

All times are "HH:MM" strings on a single 24-hour day with no date or
timezone context. Keystroke input goes through ``normalize_time`` first;
the arithmetic helpers expect already-normalized strings and raise
``ValueError`` otherwise.
"""

import re

MINUTES_PER_DAY = 24 * 60

_NON_DIGIT_RE = re.compile(r"\D")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def normalize_time(raw: str | None) -> str:
    """Turn ad hoc keystroke input into a zero-padded "HH:MM" string.

    "8" -> "08:00", "830" -> "08:30", "0830" / "08:30" -> "08:30".
    Out-of-range components are clamped (hour to 23, minute to 59).
    Returns "" when the input holds no digits at all.
    """
    digits = _NON_DIGIT_RE.sub("", raw or "")
    if not digits:
        return ""

    if len(digits) <= 2:
        hours, minutes = int(digits), 0
    elif len(digits) == 3:
        hours, minutes = int(digits[:1]), int(digits[1:])
    else:
        hours, minutes = int(digits[:2]), int(digits[2:4])

    hours = min(hours, 23)
    minutes = min(minutes, 59)
    return f"{hours:02d}:{minutes:02d}"


def is_valid_time(value: str | None) -> bool:
    """True if ``value`` is a well-formed 24-hour "HH:MM" string."""
    if not value:
        return False
    match = _TIME_RE.match(value)
    if not match:
        return False
    return int(match.group(1)) <= 23 and int(match.group(2)) <= 59


def time_to_minutes(value: str) -> int:
    """Minutes since midnight for an "HH:MM" string."""
    match = _TIME_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid time string: {value!r}")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_time(total_minutes: int) -> str:
    """Format minutes since midnight as "HH:MM", wrapping at 24:00."""
    total_minutes %= MINUTES_PER_DAY
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def calculate_time_from_duration(start_time: str, duration_minutes: int) -> str:
    """Add ``duration_minutes`` to ``start_time``, wrapping past midnight."""
    return minutes_to_time(time_to_minutes(start_time) + int(duration_minutes))


def get_minutes_between(start_time: str, end_time: str) -> int:
    """Signed minute difference ``end - start`` on the same day.

    No overnight inference: "23:00" -> "01:00" gives -1320, not 120.
    """
    return time_to_minutes(end_time) - time_to_minutes(start_time)


def format_time_range(start_time: str, end_time: str) -> str:
    return f"{start_time} ~ {end_time}"
