# barbershop/core/timegrid.py

import re
from datetime import date, datetime
from math import ceil
from typing import List, Optional, TypedDict

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

MORNING_END = "12:00"
AFTERNOON_END = "17:00"

_TIME_RE = re.compile(r"^(\d{2}):(\d{2})$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ParseError(ValueError):
    """A time or date string that does not follow the HH:MM / YYYY-MM-DD contract."""


class SlotGroups(TypedDict):
    morning: List[str]
    afternoon: List[str]
    evening: List[str]


def to_minutes(t: str, allow_end_of_day: bool = False) -> int:
    match = _TIME_RE.match(t) if isinstance(t, str) else None
    if match is None:
        raise ParseError(f"Invalid time {t!r}, expected HH:MM")
    hour, minute = int(match.group(1)), int(match.group(2))
    if allow_end_of_day and hour == 24 and minute == 0:
        return 24 * 60
    if hour > 23 or minute > 59:
        raise ParseError(f"Time out of range: {t!r}")
    return hour * 60 + minute


def from_minutes(total: int) -> str:
    if not 0 <= total <= 24 * 60:
        raise ParseError(f"Minute of day out of range: {total}")
    return f"{total // 60:02d}:{total % 60:02d}"


def overlaps(start_a, end_a, start_b, end_b) -> bool:
    return start_a < end_b and start_b < end_a


def generate_slots(
    open_: str,
    break_start: Optional[str],
    break_end: Optional[str],
    close: str,
    interval: int,
) -> List[str]:
    """
    Every start time from `open_` in `interval` steps whose slot fits before
    `close` and does not overlap the break.

    A slot ending exactly at break_start, or starting exactly at break_end,
    touches the break without overlapping it and is kept.
    """
    if interval <= 0:
        raise ValueError("interval must be a positive number of minutes")

    start = to_minutes(open_)
    end = to_minutes(close, allow_end_of_day=True)

    break_window = None
    if break_start and break_end:
        break_window = (to_minutes(break_start), to_minutes(break_end, allow_end_of_day=True))

    slots = []
    t = start
    while t + interval <= end:
        # half-open test: starting inside, ending inside or containing the break
        if break_window is None or not overlaps(t, t + interval, *break_window):
            slots.append(from_minutes(t))
        t += interval
    return slots


def group_slots(slots: List[str]) -> SlotGroups:
    # zero padded HH:MM strings order the same way as their minute values
    return {
        "morning": [s for s in slots if s < MORNING_END],
        "afternoon": [s for s in slots if MORNING_END <= s < AFTERNOON_END],
        "evening": [s for s in slots if s >= AFTERNOON_END],
    }


def slots_needed(duration: int, granularity: int) -> int:
    if duration <= 0:
        raise ValueError("duration must be positive")
    if granularity <= 0:
        raise ValueError("granularity must be positive")
    return ceil(duration / granularity)


def parse_date(date_str: str) -> date:
    if not isinstance(date_str, str) or not _DATE_RE.match(date_str):
        raise ParseError(f"Invalid date {date_str!r}, expected YYYY-MM-DD")
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError as exc:
        raise ParseError(f"Invalid date {date_str!r}") from exc


def weekday_name(date_str: str) -> str:
    return WEEKDAYS[parse_date(date_str).weekday()]
