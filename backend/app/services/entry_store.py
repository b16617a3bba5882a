"""Lookup and mutation helpers over stored lecture entries.

Every conflict and capacity check goes through these filters, so the
predicates here are the single definition of "matching entries".
"""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import case, delete, func, select
from sqlalchemy.orm import Session

from app.models.lecture_entry import EntryStatus, LectureEntry
from app.schemas.division import DivisionContext
from app.services.timetable_rules import DAYS

_DAY_ORDER = case({day: index for index, day in enumerate(DAYS)}, value=LectureEntry.day, else_=len(DAYS))


def _conditions(
    *,
    ctx: DivisionContext | None = None,
    program: str | None = None,
    class_name: str | None = None,
    semester: int | None = None,
    division: str | None = None,
    teacher_id: str | None = None,
    subject_id: str | None = None,
    classroom_id: str | None = None,
    day: str | None = None,
    days: Iterable[str] | None = None,
    time_slot: str | None = None,
    exclude_id: str | None = None,
) -> list:
    conditions = []
    if ctx is not None:
        conditions.extend(
            [
                LectureEntry.program == ctx.program,
                LectureEntry.class_name == ctx.class_name,
                LectureEntry.semester == ctx.semester,
                LectureEntry.division == ctx.division,
            ]
        )
    if program is not None:
        conditions.append(LectureEntry.program == program)
    if class_name is not None:
        conditions.append(LectureEntry.class_name == class_name)
    if semester is not None:
        conditions.append(LectureEntry.semester == semester)
    if division is not None:
        conditions.append(LectureEntry.division == division)
    if teacher_id is not None:
        conditions.append(LectureEntry.teacher_id == teacher_id)
    if subject_id is not None:
        conditions.append(LectureEntry.subject_id == subject_id)
    if classroom_id is not None:
        conditions.append(LectureEntry.classroom_id == classroom_id)
    if day is not None:
        conditions.append(LectureEntry.day == day)
    if days is not None:
        conditions.append(LectureEntry.day.in_(list(days)))
    if time_slot is not None:
        conditions.append(LectureEntry.time_slot == time_slot)
    if exclude_id is not None:
        conditions.append(LectureEntry.id != exclude_id)
    return conditions


def find_entries(db: Session, **filters) -> list[LectureEntry]:
    query = (
        select(LectureEntry)
        .where(*_conditions(**filters))
        .order_by(
            LectureEntry.program,
            LectureEntry.class_name,
            LectureEntry.semester,
            LectureEntry.division,
            _DAY_ORDER,
            LectureEntry.time_slot,
        )
    )
    return list(db.execute(query).unique().scalars())


def find_entry(db: Session, **filters) -> LectureEntry | None:
    query = select(LectureEntry).where(*_conditions(**filters)).limit(1)
    return db.execute(query).unique().scalars().first()


def count_entries(db: Session, **filters) -> int:
    query = select(func.count()).select_from(LectureEntry).where(*_conditions(**filters))
    return int(db.execute(query).scalar_one())


def create_entry(
    db: Session,
    *,
    ctx: DivisionContext,
    day: str,
    time_slot: str,
    subject_id: str,
    teacher_id: str,
    created_by: str,
    classroom_id: str | None = None,
) -> LectureEntry:
    entry = LectureEntry(
        program=ctx.program,
        class_name=ctx.class_name,
        semester=ctx.semester,
        division=ctx.division,
        day=day,
        time_slot=time_slot,
        subject_id=subject_id,
        teacher_id=teacher_id,
        classroom_id=classroom_id,
        status=EntryStatus.valid,
        created_by=created_by,
    )
    db.add(entry)
    db.flush()
    return entry


def delete_entries(db: Session, **filters) -> int:
    conditions = _conditions(**filters)
    if not conditions:
        raise ValueError("Refusing to delete lecture entries without a filter")
    result = db.execute(delete(LectureEntry).where(*conditions).execution_options(synchronize_session="fetch"))
    return int(result.rowcount or 0)
