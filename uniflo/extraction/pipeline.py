# uniflo/extraction/pipeline.py
# text -> normalized text -> regex or model -> ParsedSyllabus

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Union

from uniflo.schemas import CourseRecord, ParsedSyllabus

from .dates import SyllabusParseError, parse_start_date, try_resolve_week
from .document_text import extract_document_text
from .llm_parser import SyllabusModelClient
from .preprocessing import normalize_weeks
from .regex_fields import (
    extract_dates,
    extract_events,
    extract_grading,
    extract_instructor,
    extract_term,
    extract_textbooks,
    guess_course_name,
)

PARSE_MODES = ("regex", "llm")


def _log(message: str) -> None:
    print(f"[extraction] {message}", file=sys.stderr)


@dataclass
class ParseOutcome:
    parsed: ParsedSyllabus
    text: str
    normalized_text: str
    warnings: List[str] = field(default_factory=list)


def coerce_start_date(value: Union[str, date, None]) -> Optional[date]:
    """Start date or None; a malformed value is logged and ignored."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return parse_start_date(value)
    except SyllabusParseError as e:
        _log(f"Ignoring start date: {e}")
        return None


def resolve_event_dates(parsed: ParsedSyllabus) -> ParsedSyllabus:
    """
    Fill dueDate from weekReference when the course has a start date.

    Events that already carry a dueDate keep it; week references that don't
    resolve leave the event as it was.
    """
    start = parsed.course.startDate
    if start is None:
        return parsed

    events = []
    for ev in parsed.events:
        if ev.dueDate is None and ev.weekReference:
            resolved = try_resolve_week(ev.weekReference, start)
            if resolved is not None:
                ev = ev.model_copy(update={"dueDate": resolved})
        events.append(ev)
    return parsed.model_copy(update={"events": events})


def parse_syllabus_text(text: str, start_date: Union[str, date, None] = None) -> ParsedSyllabus:
    """Regex path over plain syllabus text."""
    start = coerce_start_date(start_date)
    normalized = normalize_weeks(text, start)

    course = CourseRecord(
        name=guess_course_name(text),
        startDate=start,
        academicTerm=extract_term(text),
        instructor=extract_instructor(text),
        textbooks=extract_textbooks(text),
        gradingWeights=extract_grading(text),
    )
    parsed = ParsedSyllabus(
        course=course,
        events=extract_events(normalized),
        importantDates=extract_dates(text),
        source="regex",
    )
    return resolve_event_dates(parsed)


def parse_syllabus_with_model(
    text: str,
    model_client: SyllabusModelClient,
    start_date: Union[str, date, None] = None,
) -> ParsedSyllabus:
    """
    Model path. A start date given by the caller wins over the one the model
    finds in the text.
    """
    start = coerce_start_date(start_date)
    normalized = normalize_weeks(text, start)

    parsed = model_client.parse(normalized)
    if start is not None:
        parsed = parsed.model_copy(
            update={"course": parsed.course.model_copy(update={"startDate": start})}
        )
    parsed = parsed.model_copy(update={"importantDates": extract_dates(text)})
    return resolve_event_dates(parsed)


def run_parse(
    path: str,
    file_type: str,
    *,
    mode: str = "regex",
    start_date: Union[str, date, None] = None,
    model_client: Optional[SyllabusModelClient] = None,
    work_dir: Optional[str] = None,
    prefer_ocr: bool = True,
) -> ParseOutcome:
    """
    Reads a stored syllabus and parses it.

    Raises DocumentTextError / ModelResponseError; the caller decides what a
    failure means for the request.
    """
    if mode not in PARSE_MODES:
        raise ValueError(f"Unknown parse mode: {mode!r}")

    _log(f"Reading {file_type} document path={path}")
    text, warnings = extract_document_text(path, file_type, work_dir=work_dir, prefer_ocr=prefer_ocr)
    for w in warnings:
        _log(w)
    if not text.strip():
        warnings.append(f"No text extracted from {path}")

    start = coerce_start_date(start_date)

    if mode == "llm":
        if model_client is None:
            raise ValueError("mode='llm' needs a model_client")
        parsed = parse_syllabus_with_model(text, model_client, start)
    else:
        parsed = parse_syllabus_text(text, start)

    _log(
        f"Parsed via {parsed.source}: events={len(parsed.events)} "
        f"textbooks={len(parsed.course.textbooks)} grading={len(parsed.course.gradingWeights)}"
    )
    return ParseOutcome(
        parsed=parsed,
        text=text,
        normalized_text=normalize_weeks(text, start),
        warnings=warnings,
    )
