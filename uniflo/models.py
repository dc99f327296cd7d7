from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Document(Base):
    __tablename__ = "documents"

    document_id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    filename = Column(Text, nullable=False)
    content_type = Column(Text, nullable=False)
    file_type = Column(Text, nullable=False)
    sha256 = Column(Text, nullable=False)
    storage_uri = Column(Text, nullable=False)

    size_bytes = Column(Integer)

    courses = relationship("Course", back_populates="document")


class Course(Base):
    __tablename__ = "courses"

    course_id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, ForeignKey("documents.document_id", ondelete="SET NULL"))

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    name = Column(Text, nullable=False, server_default="")
    start_date = Column(Date)
    academic_term = Column(Text)
    source = Column(Text, nullable=False)

    # instructor (all NULL when no instructor was found)
    professor_name = Column(Text)
    professor_email = Column(Text)
    office_hours = Column(Text)

    document = relationship("Document", back_populates="courses")
    events = relationship(
        "Event", back_populates="course", cascade="all, delete-orphan", order_by="Event.position"
    )
    textbooks = relationship(
        "TextbookRow", back_populates="course", cascade="all, delete-orphan", order_by="TextbookRow.position"
    )
    grading_weights = relationship(
        "GradingWeightRow",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="GradingWeightRow.position",
    )
    important_dates = relationship(
        "ImportantDate",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="ImportantDate.position",
    )


class Event(Base):
    __tablename__ = "events"

    event_id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey("courses.course_id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)

    event_type = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    due_date = Column(Date)
    week_reference = Column(Text)

    course = relationship("Course", back_populates="events")


class TextbookRow(Base):
    __tablename__ = "textbooks"

    textbook_id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey("courses.course_id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)

    type = Column(Text)
    title = Column(Text, nullable=False)
    author = Column(Text, nullable=False)
    isbn = Column(Text)

    course = relationship("Course", back_populates="textbooks")


class GradingWeightRow(Base):
    __tablename__ = "grading_weights"

    grading_weight_id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey("courses.course_id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)

    category = Column(Text, nullable=False)
    weight = Column(Integer, nullable=False)

    course = relationship("Course", back_populates="grading_weights")


class ImportantDate(Base):
    __tablename__ = "important_dates"

    important_date_id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey("courses.course_id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)

    # raw matched text, e.g. "March 3, 2024"
    date = Column(Text, nullable=False)

    course = relationship("Course", back_populates="important_dates")
