# normalize_weeks: annotate "Week N" with concrete dates

# uniflo/extraction/preprocessing.py
from __future__ import annotations

import re
from datetime import date
from typing import Optional, Union

from .dates import SyllabusParseError, parse_start_date, week_range

ANNOTATION_PATTERN = r"\s*\(\d{4}-\d{2}-\d{2} to \d{4}-\d{2}-\d{2}\)"
ANNOTATION_RE = re.compile(ANNOTATION_PATTERN)

# Digits must not be followed by another digit (no backtracking into "Week 1" of
# "Week 12") nor by an annotation this module already wrote.
WEEK_RE = re.compile(
    rf"\bWeek\s+(\d+)(?!\d)(?!{ANNOTATION_PATTERN})",
    re.IGNORECASE,
)


def _annotation(first: date, last: date) -> str:
    return f" ({first.isoformat()} to {last.isoformat()})"


def strip_annotations(text: str) -> str:
    return ANNOTATION_RE.sub("", text)


def normalize_weeks(text: str, start_date: Optional[Union[str, date]]) -> str:
    """
    Append the date range after every "Week N" in text.

      "Assignment due Week 3" + 2024-01-08
        -> "Assignment due Week 3 (2024-01-22 to 2024-01-28)"

    Missing or unparseable start date -> text unchanged.
    Week numbers that do not resolve (Week 0) are left as they are.
    Already annotated occurrences are skipped, so normalizing twice is the
    same as normalizing once.
    """
    if start_date is None or not text:
        return text
    try:
        start = parse_start_date(start_date)
    except SyllabusParseError:
        return text

    def _sub(m: re.Match) -> str:
        try:
            first, last = week_range(m.group(1), start)
        except SyllabusParseError:
            return m.group(0)
        return m.group(0) + _annotation(first, last)

    return WEEK_RE.sub(_sub, text)
