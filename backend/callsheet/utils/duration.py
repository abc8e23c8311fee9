"""Duration parsing and formatting.

Free-text duration input is classified into one of four forms, tried in
order:

    DIGITS     "90"                    -> minutes as-is
    LATIN      "1h30m", "2h", "45m"    -> hours*60 + minutes
    LOCALIZED  "1시간30분", "90분"      -> hours*60 + minutes
    COLON      "1:30"                  -> hours*60 + minutes

Anything else parses to 0, which callers treat as "unparsed" rather than a
legitimate zero-length duration.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable


class DurationForm(str, Enum):
    DIGITS = "digits"
    LATIN = "latin"
    LOCALIZED = "localized"
    COLON = "colon"


# Numbers longer than six digits are not durations
_DIGITS_RE = re.compile(r"^\d{1,6}$")
_LATIN_HOURS_RE = re.compile(r"(?<!\d)(\d{1,6})\s*h", re.IGNORECASE)
_LATIN_MINUTES_RE = re.compile(r"(?<!\d)(\d{1,6})\s*m", re.IGNORECASE)
_LOCAL_HOURS_RE = re.compile(r"(?<!\d)(\d{1,6})\s*시간")
_LOCAL_MINUTES_RE = re.compile(r"(?<!\d)(\d{1,6})\s*분")


def _hours_minutes(text: str, hours_re: re.Pattern, minutes_re: re.Pattern) -> int | None:
    hours = hours_re.search(text)
    minutes = minutes_re.search(text)
    if not hours and not minutes:
        return None
    h = int(hours.group(1)) if hours else 0
    m = int(minutes.group(1)) if minutes else 0
    return h * 60 + m


def _parse_digits(text: str) -> int | None:
    return int(text) if _DIGITS_RE.match(text) else None


def _parse_latin(text: str) -> int | None:
    return _hours_minutes(text, _LATIN_HOURS_RE, _LATIN_MINUTES_RE)


def _parse_localized(text: str) -> int | None:
    return _hours_minutes(text, _LOCAL_HOURS_RE, _LOCAL_MINUTES_RE)


def _parse_colon(text: str) -> int | None:
    if ":" not in text:
        return None
    parts = text.split(":")

    def _part(index: int) -> int:
        try:
            return int(parts[index].strip())
        except (IndexError, ValueError):
            return 0

    return _part(0) * 60 + _part(1)


_FORMS: list[tuple[DurationForm, Callable[[str], int | None]]] = [
    (DurationForm.DIGITS, _parse_digits),
    (DurationForm.LATIN, _parse_latin),
    (DurationForm.LOCALIZED, _parse_localized),
    (DurationForm.COLON, _parse_colon),
]


def classify_duration(text: str | None) -> DurationForm | None:
    """Return the first form that recognizes ``text``, or None."""
    cleaned = (text or "").strip()
    if not cleaned:
        return None
    for form, parser in _FORMS:
        if parser(cleaned) is not None:
            return form
    return None


def parse_duration(text: str | None) -> int:
    """Parse a duration expression into whole minutes. Never raises; 0 if unrecognized."""
    cleaned = (text or "").strip()
    if not cleaned:
        return 0
    for _form, parser in _FORMS:
        minutes = parser(cleaned)
        if minutes is not None:
            return minutes
    return 0


def _split(minutes: int) -> tuple[int, int]:
    minutes = max(int(minutes), 0)
    return minutes // 60, minutes % 60


def format_duration(minutes: int) -> str:
    """Long localized form: "45분", "2시간", "1시간 30분"."""
    hours, mins = _split(minutes)
    if hours == 0:
        return f"{mins}분"
    if mins == 0:
        return f"{hours}시간"
    return f"{hours}시간 {mins}분"


def format_duration_short(minutes: int) -> str:
    """Short Latin form: "45m", "2h", "1h30m"."""
    hours, mins = _split(minutes)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h{mins}m"
