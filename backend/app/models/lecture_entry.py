import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.subject import Subject
from app.models.teacher import Teacher


class EntryStatus(str, Enum):
    valid = "valid"
    conflict = "conflict"


class LectureEntry(Base):
    __tablename__ = "lecture_entries"
    __table_args__ = (
        UniqueConstraint(
            "program", "class_name", "semester", "division", "day", "time_slot",
            name="uq_lecture_entries_division_slot",
        ),
        UniqueConstraint("teacher_id", "day", "time_slot", name="uq_lecture_entries_teacher_slot"),
        Index("ix_lecture_entries_division", "program", "class_name", "semester", "division"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    program: Mapped[str] = mapped_column(String(100), nullable=False)
    class_name: Mapped[str] = mapped_column(String(20), nullable=False)
    semester: Mapped[int] = mapped_column(Integer, nullable=False)
    division: Mapped[str] = mapped_column(String(10), nullable=False)
    day: Mapped[str] = mapped_column(String(10), nullable=False)
    time_slot: Mapped[str] = mapped_column(String(20), nullable=False)
    subject_id: Mapped[str] = mapped_column(String(36), ForeignKey("subjects.id"), nullable=False, index=True)
    teacher_id: Mapped[str] = mapped_column(String(36), ForeignKey("teachers.id"), nullable=False, index=True)
    classroom_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("classrooms.id", ondelete="SET NULL"), nullable=True, index=True
    )
    status: Mapped[EntryStatus] = mapped_column(
        SAEnum(EntryStatus, name="lecture_entry_status"), nullable=False, default=EntryStatus.valid
    )
    created_by: Mapped[str] = mapped_column(String(36), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    subject: Mapped[Subject] = relationship(lazy="joined")
    teacher: Mapped[Teacher] = relationship(lazy="joined")

    @property
    def subject_name(self) -> str | None:
        return self.subject.subject_name if self.subject is not None else None

    @property
    def faculty_name(self) -> str | None:
        return self.teacher.faculty_name if self.teacher is not None else None
