# week references -> calendar dates

# uniflo/extraction/dates.py
from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

NON_DIGIT_RE = re.compile(r"\D")

WeekLike = Union[int, str]


class SyllabusParseError(ValueError):
    pass


class InvalidWeekReference(SyllabusParseError):
    pass


class MalformedStartDate(SyllabusParseError):
    pass


def parse_week_number(week: WeekLike) -> int:
    """
    Week number from an int or a label like "Week 5" / "week5" / " WEEK  5 ".

    Every non-digit character is discarded before parsing, so "Week 3-4"
    reads as week 34.
    """
    if isinstance(week, bool):
        raise InvalidWeekReference(f"Invalid week reference: {week!r}")

    if isinstance(week, int):
        n = week
    else:
        digits = NON_DIGIT_RE.sub("", str(week))
        if not digits:
            raise InvalidWeekReference(f"No week number in {week!r}")
        try:
            n = int(digits)
        except ValueError as e:
            # longer than the interpreter's int string limit
            raise InvalidWeekReference(f"Week number too long: {len(digits)} digits") from e

    if n <= 0:
        raise InvalidWeekReference(f"Week number must be >= 1, got {n}")
    return n


def parse_start_date(value: Union[str, date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise MalformedStartDate(f"Invalid start date: {value!r}")
    try:
        return datetime.fromisoformat(value.strip()).date()
    except ValueError as e:
        raise MalformedStartDate(f"Invalid start date: {value!r}") from e


def resolve_week(week: WeekLike, start_date: Union[str, date]) -> date:
    """Week 1 is the start date itself; each later week adds 7 days."""
    n = parse_week_number(week)
    start = parse_start_date(start_date)
    try:
        return start + timedelta(days=(n - 1) * 7)
    except OverflowError as e:
        raise InvalidWeekReference(f"Week {n} is out of the calendar range") from e


def week_range(week: WeekLike, start_date: Union[str, date]) -> Tuple[date, date]:
    first = resolve_week(week, start_date)
    try:
        return first, first + timedelta(days=6)
    except OverflowError as e:
        raise InvalidWeekReference(f"Week {week!r} is out of the calendar range") from e


def try_resolve_week(week: Optional[WeekLike], start_date: Union[str, date, None]) -> Optional[date]:
    """Tolerant resolve_week: None instead of raising."""
    if week is None or start_date is None:
        return None
    try:
        return resolve_week(week, start_date)
    except SyllabusParseError:
        return None


LITERAL_DATE_FORMATS = (
    "%B %d, %Y",
    "%b %d, %Y",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%m-%d-%y",
)


def parse_literal_date(raw: str) -> Optional[date]:
    """
    "March 3, 2024" / "Mar. 3, 2024" / "12/15/2024" / "3-4-24" -> date, else None.
    """
    if not raw:
        return None
    s = " ".join(raw.split())
    s = re.sub(r"\s*,\s*", ", ", s)
    s = re.sub(r"^(\w{3,})\.", r"\1", s)
    s = re.sub(r"^Sept\b", "Sep", s, flags=re.IGNORECASE)
    for fmt in LITERAL_DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None
