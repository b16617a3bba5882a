from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import PlacementRejectedError, ResourceNotFoundError
from app.models.classroom import Classroom
from app.models.lecture_entry import LectureEntry
from app.models.weekly_timetable import WeeklyTimetable
from app.schemas.division import DivisionContext
from app.schemas.timetable import EntryRollback, ValidationResult
from app.services.conflict_service import ConflictService
from app.services.entry_store import create_entry, delete_entries, find_entries
from app.services.weekly_policy import validate_week
from app.services.workload import compute_subject_periods, compute_teacher_workload

logger = logging.getLogger(__name__)


def add_entry(
    db: Session,
    ctx: DivisionContext,
    *,
    day: str,
    time_slot: str,
    subject_id: str,
    teacher_id: str,
    created_by: str,
    classroom_id: str | None = None,
) -> tuple[LectureEntry, ValidationResult]:
    if classroom_id is not None and db.get(Classroom, classroom_id) is None:
        raise ResourceNotFoundError("Classroom", classroom_id)

    verdict = ConflictService(db).validate_candidate_placement(
        ctx, day, time_slot, subject_id, teacher_id, classroom_id=classroom_id
    )
    if not verdict.is_valid:
        raise PlacementRejectedError("Validation failed", verdict.errors, verdict.warnings)

    try:
        entry = create_entry(
            db,
            ctx=ctx,
            day=day,
            time_slot=time_slot,
            subject_id=subject_id,
            teacher_id=teacher_id,
            created_by=created_by,
            classroom_id=classroom_id,
        )
        db.commit()
    except IntegrityError as exc:
        # A concurrent writer took the slot between validation and insert.
        db.rollback()
        raise PlacementRejectedError(
            "Validation failed",
            [f"Slot {day} {time_slot} was taken by a concurrent placement"],
        ) from exc

    db.refresh(entry)
    return entry, verdict


def _safe_teacher_workload(db: Session, teacher_id: str, ctx: DivisionContext):
    try:
        return compute_teacher_workload(db, teacher_id, ctx)
    except ResourceNotFoundError:
        logger.warning("Teacher %s no longer exists; workload omitted from rollback report", teacher_id)
        return None


def _safe_subject_periods(db: Session, subject_id: str, ctx: DivisionContext):
    try:
        return compute_subject_periods(db, subject_id, ctx)
    except ResourceNotFoundError:
        logger.warning("Subject %s no longer exists; periods omitted from rollback report", subject_id)
        return None


def delete_entry(db: Session, entry_id: str) -> EntryRollback:
    """Delete one entry and report workload before and after.

    Nothing is decremented: both snapshots are plain recounts.
    """
    entry = db.get(LectureEntry, entry_id)
    if entry is None:
        raise ResourceNotFoundError("Timetable entry", entry_id)

    ctx = DivisionContext.of(entry)
    teacher_id, subject_id = entry.teacher_id, entry.subject_id
    rollback = EntryRollback(
        entry_id=entry_id,
        context=ctx,
        teacher_before=_safe_teacher_workload(db, teacher_id, ctx),
        subject_before=_safe_subject_periods(db, subject_id, ctx),
    )

    db.delete(entry)
    db.commit()

    rollback.teacher_after = _safe_teacher_workload(db, teacher_id, ctx)
    rollback.subject_after = _safe_subject_periods(db, subject_id, ctx)
    logger.info("Timetable entry deleted: %s", rollback.model_dump_json())
    return rollback


def reset_division(db: Session, ctx: DivisionContext) -> int:
    deleted = delete_entries(db, ctx=ctx)
    db.commit()
    logger.info("Reset timetable for %s: %d entries deleted", ctx.label, deleted)
    return deleted


def list_entries(
    db: Session,
    *,
    program: str | None = None,
    class_name: str | None = None,
    semester: int | None = None,
    division: str | None = None,
    day: str | None = None,
    time_slot: str | None = None,
    teacher_id: str | None = None,
    subject_id: str | None = None,
    classroom_id: str | None = None,
) -> list[LectureEntry]:
    if classroom_id is not None:
        # A classroom already pins the division.
        return find_entries(
            db,
            classroom_id=classroom_id,
            day=day,
            time_slot=time_slot,
            teacher_id=teacher_id,
            subject_id=subject_id,
        )
    return find_entries(
        db,
        program=program or None,
        class_name=class_name or None,
        semester=semester,
        division=division or None,
        day=day,
        time_slot=time_slot,
        teacher_id=teacher_id,
        subject_id=subject_id,
    )


def _get_saved_week(db: Session, ctx: DivisionContext) -> WeeklyTimetable | None:
    return db.execute(
        select(WeeklyTimetable).where(
            WeeklyTimetable.program == ctx.program,
            WeeklyTimetable.class_name == ctx.class_name,
            WeeklyTimetable.semester == ctx.semester,
            WeeklyTimetable.division == ctx.division,
        )
    ).scalar_one_or_none()


def get_saved_week(db: Session, ctx: DivisionContext) -> WeeklyTimetable:
    saved = _get_saved_week(db, ctx)
    if saved is None:
        raise ResourceNotFoundError("Weekly timetable", ctx.label)
    return saved


def save_week(
    db: Session,
    ctx: DivisionContext,
    holidays: list[str],
    created_by: str,
) -> tuple[WeeklyTimetable, ValidationResult]:
    verdict = validate_week(db, ctx, holidays)
    if not verdict.is_valid:
        raise PlacementRejectedError("Timetable validation failed", verdict.errors, verdict.warnings)

    entry_ids = [entry.id for entry in find_entries(db, ctx=ctx)]
    saved = _get_saved_week(db, ctx)
    if saved is None:
        saved = WeeklyTimetable(
            program=ctx.program,
            class_name=ctx.class_name,
            semester=ctx.semester,
            division=ctx.division,
            created_by=created_by,
        )
        db.add(saved)
    saved.holidays = list(holidays)
    saved.entry_ids = entry_ids
    db.commit()
    db.refresh(saved)
    logger.info("Saved week for %s with %d entries", ctx.label, len(entry_ids))
    return saved, verdict
