from __future__ import annotations

import hashlib
import os
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

import openai
from fastapi import (
    APIRouter,
    Depends,
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
)
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from uniflo.config import Settings
from uniflo.extraction.document_text import DocumentTextError, detect_file_type
from uniflo.extraction.llm_parser import ModelNotConfiguredError, ModelResponseError, SyllabusModelClient
from uniflo.extraction.pipeline import PARSE_MODES, run_parse
from uniflo.models import Base, Course, Document
from uniflo.schemas import (
    CourseDetailOut,
    CourseOut,
    OFFICE_HOURS_NOT_PROVIDED,
    GradingWeight,
    InstructorInfo,
    ParseSyllabusIn,
    ParseSyllabusOut,
    SyllabusEvent,
    Textbook,
    UploadOut,
)
from uniflo.store import store_parsed_syllabus
from uniflo.workflow_logger import configure_log_dir, log_event

PARSE_FAILURES = (DocumentTextError, ModelResponseError, ModelNotConfiguredError, openai.OpenAIError)

router = APIRouter()


def get_db(request: Request) -> Session:
    db = request.app.state.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def compute_sha256(data: bytes) -> str:
    h = hashlib.sha256()
    h.update(data)
    return h.hexdigest()


def save_upload(file: UploadFile, upload_dir: str) -> Dict[str, Any]:
    raw = file.file.read()
    sha = compute_sha256(raw)
    safe_name = f"{uuid.uuid4()}_{Path(file.filename or 'syllabus').name}"
    path = os.path.join(upload_dir, safe_name)
    with open(path, "wb") as f:
        f.write(raw)
    return {
        "filename": file.filename,
        "content_type": file.content_type or "application/octet-stream",
        "sha256": sha,
        "storage_uri": path,
        "size_bytes": len(raw),
    }


def course_to_out(c: Course) -> CourseOut:
    return CourseOut(
        courseId=c.course_id,
        name=c.name,
        startDate=c.start_date,
        academicTerm=c.academic_term,
        source=c.source,
        createdAt=c.created_at,
    )


def course_to_detail(c: Course) -> CourseDetailOut:
    instructor = None
    if c.professor_name is not None or c.professor_email is not None:
        instructor = InstructorInfo(
            name=c.professor_name or "",
            email=c.professor_email or "",
            officeHours=c.office_hours or OFFICE_HOURS_NOT_PROVIDED,
        )
    return CourseDetailOut(
        course=course_to_out(c),
        instructor=instructor,
        textbooks=[Textbook(kind=t.type, title=t.title, author=t.author, isbn=t.isbn) for t in c.textbooks],
        gradingWeights=[GradingWeight(category=g.category, weightPercent=g.weight) for g in c.grading_weights],
        events=[
            SyllabusEvent(kind=e.event_type, title=e.title, dueDate=e.due_date, weekReference=e.week_reference)
            for e in c.events
        ],
        importantDates=[d.date for d in c.important_dates],
    )


def _doc_request_id(doc: Document) -> str:
    return f"document-{doc.document_id}"


@router.get("/health/db")
def health_db(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"ok": True}


@router.post("/api/upload", response_model=UploadOut)
def upload_syllabus(
    request: Request,
    syllabus: Optional[UploadFile] = File(None),
    startDate: Optional[str] = Form(None),
    mode: str = Form("regex"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if syllabus is None or not syllabus.filename:
        raise HTTPException(status_code=400, detail="No file uploaded.")
    if mode not in PARSE_MODES:
        raise HTTPException(status_code=422, detail=f"Invalid mode: {mode} (expected one of {list(PARSE_MODES)})")

    meta = save_upload(syllabus, settings.upload_dir)
    file_type = detect_file_type(meta["content_type"], meta["filename"])

    doc = Document(
        filename=meta["filename"],
        content_type=meta["content_type"],
        file_type=file_type,
        sha256=meta["sha256"],
        storage_uri=meta["storage_uri"],
        size_bytes=meta["size_bytes"],
    )
    db.add(doc)
    db.commit()
    db.refresh(doc)

    log_event(
        request_id=_doc_request_id(doc),
        status="uploaded",
        actor="user",
        event="SyllabusUploaded",
        extra={"filename": doc.filename, "file_type": file_type, "mode": mode, "start_date": startDate},
    )

    try:
        outcome = run_parse(
            doc.storage_uri,
            file_type,
            mode=mode,
            start_date=startDate,
            model_client=request.app.state.model_client,
            work_dir=settings.upload_dir,
            prefer_ocr=settings.prefer_ocr,
        )
    except PARSE_FAILURES as e:
        log_event(
            request_id=_doc_request_id(doc),
            status="failed",
            actor="system",
            event="SyllabusParseFailed",
            extra={"error": str(e), "mode": mode},
        )
        raise HTTPException(status_code=500, detail="Failed to parse syllabus.")

    course = store_parsed_syllabus(db, outcome.parsed, document_id=doc.document_id)

    log_event(
        request_id=_doc_request_id(doc),
        status="stored",
        actor="system",
        event="SyllabusStored",
        extra={
            "course_id": course.course_id,
            "source": outcome.parsed.source,
            "event_count": len(outcome.parsed.events),
            "warnings": outcome.warnings,
        },
    )

    return UploadOut(
        message="File uploaded and parsed successfully.",
        documentId=doc.document_id,
        courseId=course.course_id,
        data=outcome.parsed,
        warnings=outcome.warnings,
    )


@router.post("/api/parse-syllabus", response_model=ParseSyllabusOut)
def parse_stored_syllabus(
    body: ParseSyllabusIn,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    doc = db.query(Document).filter(Document.document_id == body.documentId).first()
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")

    try:
        outcome = run_parse(
            doc.storage_uri,
            doc.file_type,
            mode="llm",
            start_date=body.startDate,
            model_client=request.app.state.model_client,
            work_dir=settings.upload_dir,
            prefer_ocr=settings.prefer_ocr,
        )
    except PARSE_FAILURES as e:
        log_event(
            request_id=_doc_request_id(doc),
            status="failed",
            actor="system",
            event="SyllabusParseFailed",
            extra={"error": str(e), "mode": "llm"},
        )
        raise HTTPException(status_code=500, detail="Failed to parse syllabus.")

    course = store_parsed_syllabus(db, outcome.parsed, document_id=doc.document_id)

    log_event(
        request_id=_doc_request_id(doc),
        status="stored",
        actor="system",
        event="SyllabusStored",
        extra={"course_id": course.course_id, "source": "llm", "event_count": len(outcome.parsed.events)},
    )

    return ParseSyllabusOut(
        success=True,
        courseId=course.course_id,
        course=outcome.parsed.course.name,
        startDate=outcome.parsed.course.startDate,
        events=outcome.parsed.events,
    )


@router.get("/api/courses", response_model=List[CourseOut])
def list_courses(db: Session = Depends(get_db)):
    courses = db.query(Course).order_by(Course.course_id.desc()).all()
    return [course_to_out(c) for c in courses]


@router.get("/api/courses/{courseId}", response_model=CourseDetailOut)
def get_course(courseId: int, db: Session = Depends(get_db)):
    course = db.query(Course).filter(Course.course_id == courseId).first()
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course_to_detail(course)


def create_app(
    settings: Optional[Settings] = None,
    model_client: Optional[SyllabusModelClient] = None,
) -> FastAPI:
    """
    Build the API with its own engine, session factory and model client.

        uvicorn --factory uniflo.main:create_app
    """
    settings = settings or Settings.from_env()

    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False} if settings.database_url.startswith("sqlite") else {},
    )
    if settings.create_tables:
        Base.metadata.create_all(engine)

    os.makedirs(settings.upload_dir, exist_ok=True)
    configure_log_dir(settings.log_dir)

    app = FastAPI(title="UniFLO Syllabus Backend")
    app.state.settings = settings
    app.state.engine = engine
    app.state.SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    app.state.model_client = model_client or SyllabusModelClient(settings.model)
    app.include_router(router)
    return app
