# uniflo/store.py
# ParsedSyllabus -> courses / events / textbooks / grading_weights / important_dates
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from uniflo.models import Course, Event, GradingWeightRow, ImportantDate, TextbookRow
from uniflo.schemas import ParsedSyllabus


def store_parsed_syllabus(db: Session, parsed: ParsedSyllabus, document_id: Optional[int] = None) -> Course:
    """
    Insert one course row and its children in a single commit.

    Returns the refreshed Course (course_id is the generated identifier).
    """
    record = parsed.course
    instructor = record.instructor

    course = Course(
        document_id=document_id,
        name=record.name,
        start_date=record.startDate,
        academic_term=record.academicTerm,
        source=parsed.source,
        professor_name=instructor.name if instructor else None,
        professor_email=instructor.email if instructor else None,
        office_hours=instructor.officeHours if instructor else None,
    )

    for i, ev in enumerate(parsed.events):
        course.events.append(
            Event(
                position=i,
                event_type=ev.kind.value,
                title=ev.title,
                due_date=ev.dueDate,
                week_reference=ev.weekReference,
            )
        )

    for i, book in enumerate(record.textbooks):
        course.textbooks.append(
            TextbookRow(
                position=i,
                type=book.kind.value if book.kind else None,
                title=book.title,
                author=book.author,
                isbn=book.isbn,
            )
        )

    for i, gw in enumerate(record.gradingWeights):
        course.grading_weights.append(GradingWeightRow(position=i, category=gw.category, weight=gw.weightPercent))

    for i, raw in enumerate(parsed.importantDates):
        course.important_dates.append(ImportantDate(position=i, date=raw))

    db.add(course)
    db.commit()
    db.refresh(course)
    return course
