# extract_instructor, extract_textbooks, extract_grading, extract_dates, extract_events

# uniflo/extraction/regex_fields.py
from __future__ import annotations

import re
from typing import List, Optional, Tuple

from uniflo.schemas import (
    OFFICE_HOURS_NOT_PROVIDED,
    EventKind,
    GradingWeight,
    InstructorInfo,
    SyllabusEvent,
    Textbook,
    TextbookKind,
)

from .dates import parse_literal_date
from .preprocessing import strip_annotations

# Instructor: Jane Doe
# Email: jane@example.edu
# Office Hours: MWF 2-3pm        (optional)
INSTRUCTOR_RE = re.compile(
    r"Instructor:[ \t]*(?P<name>[\w.,' -]+?)[ \t]*\r?\n\s*"
    r"Email:[ \t]*(?P<email>\S+)"
    r"(?:[ \t]*\r?\n\s*Office Hours:[ \t]*(?P<office_hours>[^\r\n]*))?",
    re.IGNORECASE,
)

# Required Textbook: Introduction to Algorithms, by Cormen
# Required Textbook: Learning by Doing, by Jane Smith   (", by" wins over a bare "by")
TEXTBOOK_RE = re.compile(
    r"\b(?P<kind>Required|Optional)\s+Textbook:[ \t]*"
    r"(?P<rest>(?:(?!\b(?:Required|Optional)\s+Textbook:)[^\r\n])+)",
    re.IGNORECASE,
)
COMMA_BY_RE = re.compile(r"[ \t]*,[ \t]*by[ \t]+", re.IGNORECASE)
BARE_BY_RE = re.compile(r"[ \t]+by[ \t]+", re.IGNORECASE)
AUTHOR_RE = re.compile(r"[\w.'-]+(?:[ \t]+[\w.'-]+)*")

# Homework: 20%   (label stays on one line)
GRADING_RE = re.compile(
    r"(?P<category>[^\W\d_][\w&/' -]*?)[ \t]*:[ \t]*(?P<weight>\d+)[ \t]*%"
)

MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|"
    r"Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)

# March 3, 2024 | 12/15/2024 | 3-4-24
DATE_RE = re.compile(
    rf"\b(?:{MONTHS}\.?\s+\d{{1,2}},\s*\d{{4}}"
    r"|\d{1,2}(?P<sep>[/-])\d{1,2}(?P=sep)(?:\d{4}|\d{2}))\b",
    re.IGNORECASE,
)


def extract_instructor(text: str) -> Optional[InstructorInfo]:
    """
    Instructor block, or None when there is no "Instructor:" / "Email:" pair.

    A missing "Office Hours:" line is reported as "Not provided".
    """
    if not text:
        return None
    m = INSTRUCTOR_RE.search(text)
    if not m:
        return None

    office_hours = (m.group("office_hours") or "").strip()
    return InstructorInfo(
        name=m.group("name").strip(),
        email=m.group("email").strip(),
        officeHours=office_hours or OFFICE_HOURS_NOT_PROVIDED,
    )


def _split_title_author(rest: str) -> Optional[Tuple[str, str]]:
    sep = COMMA_BY_RE.search(rest) or BARE_BY_RE.search(rest)
    if not sep:
        return None
    title = rest[: sep.start()].strip().rstrip(",").strip()
    author = AUTHOR_RE.match(rest, sep.end())
    if not title or not author:
        return None
    return title, author.group(0).strip()


def extract_textbooks(text: str) -> List[Textbook]:
    books: List[Textbook] = []
    for m in TEXTBOOK_RE.finditer(text or ""):
        split = _split_title_author(m.group("rest"))
        if split is None:
            continue
        title, author = split
        books.append(Textbook(kind=TextbookKind(m.group("kind").capitalize()), title=title, author=author))
    return books


def extract_grading(text: str) -> List[GradingWeight]:
    # no dedupe, no check that weights add up to 100
    return [
        GradingWeight(category=m.group("category").strip(), weightPercent=int(m.group("weight")))
        for m in GRADING_RE.finditer(text or "")
    ]


def extract_dates(text: str) -> List[str]:
    """Literal date strings in order of appearance, not converted."""
    return [m.group(0) for m in DATE_RE.finditer(text or "")]


# ---------------------------------------------------------------------------
# Course-level heuristics and events (regex path only)
# ---------------------------------------------------------------------------

TERM_RE = re.compile(r"\b(Fall|Spring|Summer|Winter|Autumn)\s+((?:19|20)\d{2})\b", re.IGNORECASE)

WEEK_REF_RE = re.compile(r"\bWeek\s*(\d+)", re.IGNORECASE)

# checked in order, first hit wins
EVENT_KEYWORDS = (
    (
        EventKind.EXAM,
        re.compile(r"\b(?:exam|midterm)s?\b|\bfinal\b(?!\s+(?:project|paper|essay|report))", re.IGNORECASE),
    ),
    (EventKind.QUIZ, re.compile(r"\bquiz(?:zes)?\b", re.IGNORECASE)),
    (EventKind.PROJECT, re.compile(r"\bprojects?\b", re.IGNORECASE)),
    (
        EventKind.ASSIGNMENT,
        re.compile(r"\b(?:assignment|homework|problem set|lab report|essay|paper)s?\b", re.IGNORECASE),
    ),
)


def extract_term(text: str) -> Optional[str]:
    m = TERM_RE.search(text or "")
    if not m:
        return None
    return f"{m.group(1).capitalize()} {m.group(2)}"


def guess_course_name(text: str) -> str:
    """First meaningful line, minus markdown heading marks and a leading "Course:" label."""
    for line in (text or "").splitlines():
        cleaned = line.strip().lstrip("#").strip()
        cleaned = re.sub(r"^(?:Course(?: Name| Title)?)\s*:\s*", "", cleaned, flags=re.IGNORECASE)
        if cleaned and len(cleaned) <= 140:
            return cleaned
    return ""


def _event_kind(line: str) -> Optional[EventKind]:
    for kind, pattern in EVENT_KEYWORDS:
        if pattern.search(line):
            return kind
    return None


def extract_events(text: str) -> List[SyllabusEvent]:
    """
    One event per line that names a graded item and carries a date or a week.

      "Midterm Exam - March 3, 2024"   -> Exam, dueDate 2024-03-03
      "Project proposal due Week 4"    -> Project, weekReference "Week 4"

    dueDate here only comes from a literal date on the line; week references
    are resolved later against the course start date.
    """
    events: List[SyllabusEvent] = []
    for line in (text or "").splitlines():
        kind = _event_kind(line)
        if kind is None:
            continue

        date_m = DATE_RE.search(line)
        week_m = WEEK_REF_RE.search(line)
        if not date_m and not week_m:
            continue

        title = strip_annotations(line).strip().lstrip("-*•|#>").strip().rstrip(".:;,").strip()
        if not title:
            continue

        events.append(
            SyllabusEvent(
                kind=kind,
                title=title[:200],
                dueDate=parse_literal_date(date_m.group(0)) if date_m else None,
                weekReference=f"Week {week_m.group(1).lstrip('0') or '0'}" if week_m else None,
            )
        )
    return events
