from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

OFFICE_HOURS_NOT_PROVIDED = "Not provided"


class EventKind(str, Enum):
    ASSIGNMENT = "Assignment"
    EXAM = "Exam"
    QUIZ = "Quiz"
    PROJECT = "Project"


class TextbookKind(str, Enum):
    REQUIRED = "Required"
    OPTIONAL = "Optional"


class SyllabusEvent(BaseModel):
    """
    One schedulable item from a syllabus.

    Neither dueDate nor weekReference is required; an event with neither is
    kept as an undated event.
    """
    model_config = ConfigDict(populate_by_name=True)

    kind: EventKind = Field(default=EventKind.ASSIGNMENT, alias="type")
    title: str = Field(min_length=1)
    dueDate: Optional[date] = None
    weekReference: Optional[str] = None

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, v: Any) -> Any:
        if isinstance(v, EventKind):
            return v
        if not isinstance(v, str) or not v.strip():
            return EventKind.ASSIGNMENT
        for k in EventKind:
            if k.value.lower() == v.strip().lower():
                return k
        return EventKind.ASSIGNMENT

    @field_validator("dueDate", "weekReference", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and (not v.strip() or v.strip().lower() == "null"):
            return None
        return v


class InstructorInfo(BaseModel):
    name: str
    email: str
    officeHours: str = OFFICE_HOURS_NOT_PROVIDED


class Textbook(BaseModel):
    kind: Optional[TextbookKind] = None
    title: str
    author: str
    isbn: Optional[str] = None


class GradingWeight(BaseModel):
    category: str
    weightPercent: int = Field(ge=0)


class CourseRecord(BaseModel):
    name: str = ""
    startDate: Optional[date] = None
    academicTerm: Optional[str] = None
    instructor: Optional[InstructorInfo] = None
    textbooks: List[Textbook] = Field(default_factory=list)
    gradingWeights: List[GradingWeight] = Field(default_factory=list)


class ParsedSyllabus(BaseModel):
    course: CourseRecord
    events: List[SyllabusEvent] = Field(default_factory=list)
    importantDates: List[str] = Field(default_factory=list)
    source: Literal["regex", "llm"] = "regex"


# API payloads

class ParseSyllabusIn(BaseModel):
    documentId: int
    startDate: Optional[str] = None


class UploadOut(BaseModel):
    message: str
    documentId: int
    courseId: int
    data: ParsedSyllabus
    warnings: List[str] = Field(default_factory=list)


class ParseSyllabusOut(BaseModel):
    success: bool
    courseId: int
    course: str
    startDate: Optional[date]
    events: List[SyllabusEvent]


class CourseOut(BaseModel):
    courseId: int
    name: str
    startDate: Optional[date]
    academicTerm: Optional[str]
    source: str
    createdAt: datetime


class CourseDetailOut(BaseModel):
    course: CourseOut
    instructor: Optional[InstructorInfo]
    textbooks: List[Textbook]
    gradingWeights: List[GradingWeight]
    events: List[SyllabusEvent]
    importantDates: List[str]
