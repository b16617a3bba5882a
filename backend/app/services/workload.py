from __future__ import annotations

from sqlalchemy.orm import Session

from app.core.exceptions import ResourceNotFoundError
from app.models.subject import Subject
from app.models.teacher import Teacher
from app.schemas.division import DivisionContext
from app.schemas.workload import SubjectPeriods, TeacherWorkload
from app.services.entry_store import count_entries


def compute_teacher_workload(db: Session, teacher_id: str, ctx: DivisionContext) -> TeacherWorkload:
    """Count the teacher's lecture entries inside one division.

    Workload is never stored; it is derived from the entry table on every call.
    """
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise ResourceNotFoundError("Teacher", teacher_id)

    assigned_hours = count_entries(db, ctx=ctx, teacher_id=teacher_id)
    teaching_hours = teacher.teaching_hours or 0
    return TeacherWorkload(
        teacher_id=teacher_id,
        assigned_hours=assigned_hours,
        remaining_hours=max(0, teaching_hours - assigned_hours),
        teaching_hours=teaching_hours,
    )


def compute_subject_periods(db: Session, subject_id: str, ctx: DivisionContext) -> SubjectPeriods:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise ResourceNotFoundError("Subject", subject_id)

    allotted_periods = count_entries(db, ctx=ctx, subject_id=subject_id)
    required_periods = subject.required_periods or 0
    return SubjectPeriods(
        subject_id=subject_id,
        allotted_periods=allotted_periods,
        remaining_periods=max(0, required_periods - allotted_periods),
        required_periods=required_periods,
    )
