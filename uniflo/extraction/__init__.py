# uniflo/extraction/__init__.py
"""
Syllabus text extraction & parsing package.

Public API:
- normalize_weeks(text, start_date) -> str
- resolve_week(week, start_date) -> date
- extract_instructor / extract_textbooks / extract_grading / extract_dates
- parse_syllabus_text(text, start_date=None) -> ParsedSyllabus
- run_parse(path, file_type, mode="regex", ...) -> ParseOutcome
"""

from .dates import InvalidWeekReference, MalformedStartDate, resolve_week, week_range
from .pipeline import ParseOutcome, parse_syllabus_text, parse_syllabus_with_model, run_parse
from .preprocessing import normalize_weeks
from .regex_fields import extract_dates, extract_grading, extract_instructor, extract_textbooks

__all__ = [
    "InvalidWeekReference",
    "MalformedStartDate",
    "ParseOutcome",
    "extract_dates",
    "extract_grading",
    "extract_instructor",
    "extract_textbooks",
    "normalize_weeks",
    "parse_syllabus_text",
    "parse_syllabus_with_model",
    "resolve_week",
    "run_parse",
    "week_range",
]
