# SyllabusModelClient: prompt the model, validate its JSON

# uniflo/extraction/llm_parser.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from uniflo.config import ModelConfig
from uniflo.schemas import (
    CourseRecord,
    GradingWeight,
    InstructorInfo,
    OFFICE_HOURS_NOT_PROVIDED,
    ParsedSyllabus,
    SyllabusEvent,
    Textbook,
)

from .dates import SyllabusParseError, parse_start_date

PARSER_PROMPT = """You are an expert academic syllabus parser. Analyze the syllabus text and:

1. Identify the course name (usually at the top of the syllabus).
2. Determine the course start date (phrases like "course begins" or "term starts", or the earliest event).
3. Note the academic term (Fall 2023, Spring 2024, ...).
4. Extract the instructor: name, email and office hours.
5. Extract textbooks with title, author and ISBN when present.
6. Extract the grading scheme as categories with integer percentages.
7. Extract every assignment, exam, quiz and project with:
   - the exact date converted to YYYY-MM-DD, or null
   - the week reference ("Week 5"), or null
   - both if available

Week references in the text may already carry a date range in parentheses,
for example "Week 3 (2024-01-22 to 2024-01-28)". Use those dates.

Output ONLY a JSON object in this format:
{
  "course": "Course Name",
  "startDate": "YYYY-MM-DD or null",
  "academicTerm": "Term identifier or null",
  "instructor": {"name": "", "email": "", "officeHours": ""} or null,
  "textbooks": [{"title": "", "author": "", "isbn": null}],
  "gradingWeights": [{"category": "Homework", "weightPercent": 20}],
  "events": [
    {
      "type": "Assignment|Exam|Quiz|Project",
      "title": "Name",
      "dueDate": "YYYY-MM-DD or null",
      "weekReference": "Week X or null"
    }
  ]
}

Only include information actually found in the syllabus. Do not fabricate."""


class ModelResponseError(RuntimeError):
    pass


class ModelNotConfiguredError(RuntimeError):
    pass


def _str_or_none(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    if not s or s.lower() in ("null", "none", "unknown"):
        return None
    return s


def _instructor_from_json(raw: Any) -> Optional[InstructorInfo]:
    if not isinstance(raw, dict):
        return None
    name = _str_or_none(raw.get("name"))
    email = _str_or_none(raw.get("email"))
    if not name and not email:
        return None
    return InstructorInfo(
        name=name or "",
        email=email or "",
        officeHours=_str_or_none(raw.get("officeHours")) or OFFICE_HOURS_NOT_PROVIDED,
    )


def _textbooks_from_json(raw: Any) -> List[Textbook]:
    books: List[Textbook] = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict) or not _str_or_none(item.get("title")):
            continue
        books.append(
            Textbook(
                title=_str_or_none(item.get("title")),
                author=_str_or_none(item.get("author")) or "",
                isbn=_str_or_none(item.get("isbn")),
            )
        )
    return books


def _grading_from_json(raw: Any) -> List[GradingWeight]:
    weights: List[GradingWeight] = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict):
            continue
        category = _str_or_none(item.get("category"))
        weight = str(item.get("weightPercent", item.get("weight", ""))).strip().rstrip("%")
        if not category:
            continue
        try:
            weights.append(GradingWeight(category=category, weightPercent=int(float(weight))))
        except (ValueError, OverflowError, ValidationError):
            continue
    return weights


def _events_from_json(raw: Any) -> List[SyllabusEvent]:
    events: List[SyllabusEvent] = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict) or not _str_or_none(item.get("title")):
            continue
        candidate = {
            "type": item.get("type"),
            "title": _str_or_none(item.get("title")),
            "dueDate": _str_or_none(item.get("dueDate")),
            "weekReference": _str_or_none(item.get("weekReference")),
        }
        try:
            events.append(SyllabusEvent.model_validate(candidate))
        except ValidationError:
            # unparseable dueDate ("TBD", "end of term"): keep the event undated
            candidate["dueDate"] = None
            events.append(SyllabusEvent.model_validate(candidate))
    return events


def parsed_syllabus_from_json(payload: Dict[str, Any]) -> ParsedSyllabus:
    """Map the model's JSON object onto ParsedSyllabus, dropping what doesn't fit."""
    start_raw = _str_or_none(payload.get("startDate"))
    try:
        start_date = parse_start_date(start_raw) if start_raw else None
    except SyllabusParseError:
        start_date = None

    course = CourseRecord(
        name=_str_or_none(payload.get("course")) or "",
        startDate=start_date,
        academicTerm=_str_or_none(payload.get("academicTerm")),
        instructor=_instructor_from_json(payload.get("instructor")),
        textbooks=_textbooks_from_json(payload.get("textbooks")),
        gradingWeights=_grading_from_json(payload.get("gradingWeights")),
    )
    return ParsedSyllabus(
        course=course,
        events=_events_from_json(payload.get("events")),
        source="llm",
    )


class SyllabusModelClient:
    """
    Thin wrapper over the OpenAI chat completions API.

    The client object is created lazily so tests (and the regex path) never
    need an API key; pass client= to inject one.
    """

    def __init__(self, config: ModelConfig, client: Any = None):
        self.config = config
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self.config.api_key:
                raise ModelNotConfiguredError("OPENAI_API_KEY is not set.")
            import openai

            self._client = openai.OpenAI(
                api_key=self.config.api_key,
                timeout=httpx.Timeout(self.config.timeout_secs, connect=15.0),
            )
        return self._client

    def complete(self, syllabus_text: str) -> str:
        text = syllabus_text
        if self.config.max_prompt_chars:
            text = text[: self.config.max_prompt_chars]

        response = self.client.chat.completions.create(
            model=self.config.model,
            messages=[
                {"role": "system", "content": PARSER_PROMPT},
                {"role": "user", "content": text},
            ],
            response_format={"type": "json_object"},
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        )
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ModelResponseError("Empty model response")
        return content

    def parse(self, syllabus_text: str) -> ParsedSyllabus:
        raw = self.complete(syllabus_text)
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ModelResponseError(f"Model returned invalid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise ModelResponseError("Model returned JSON that is not an object")
        return parsed_syllabus_from_json(payload)
