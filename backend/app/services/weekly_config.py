from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.weekly_config import WeeklyConfig
from app.schemas.division import DivisionContext
from app.schemas.timetable import HolidayChange
from app.services.entry_store import delete_entries, find_entries
from app.services.timetable_rules import day_order

logger = logging.getLogger(__name__)


def _get_config(db: Session, ctx: DivisionContext) -> WeeklyConfig | None:
    return db.execute(
        select(WeeklyConfig).where(
            WeeklyConfig.program == ctx.program,
            WeeklyConfig.class_name == ctx.class_name,
            WeeklyConfig.semester == ctx.semester,
            WeeklyConfig.division == ctx.division,
        )
    ).scalar_one_or_none()


def get_holidays(db: Session, ctx: DivisionContext) -> list[str]:
    config = _get_config(db, ctx)
    if config is None:
        return []
    return sorted(config.holidays or [], key=day_order)


def set_holiday(db: Session, ctx: DivisionContext, day: str) -> HolidayChange:
    """Mark ``day`` as a holiday and clear every entry the division has on it."""
    cleared = find_entries(db, ctx=ctx, day=day)
    affected_subjects = [entry.subject_name for entry in cleared if entry.subject_name]
    affected_teachers: list[str] = []
    for entry in cleared:
        if entry.faculty_name and entry.faculty_name not in affected_teachers:
            affected_teachers.append(entry.faculty_name)

    deleted = delete_entries(db, ctx=ctx, day=day)

    config = _get_config(db, ctx)
    if config is None:
        config = WeeklyConfig(
            program=ctx.program,
            class_name=ctx.class_name,
            semester=ctx.semester,
            division=ctx.division,
            holidays=[],
        )
        db.add(config)
    if day not in (config.holidays or []):
        # Reassign so the JSON column is flagged dirty.
        config.holidays = sorted([*(config.holidays or []), day], key=day_order)

    db.commit()
    logger.info("Holiday %s set for %s; %d entries cleared", day, ctx.label, deleted)
    return HolidayChange(
        holidays=list(config.holidays),
        deleted_entries=deleted,
        affected_subjects=affected_subjects,
        affected_teachers=affected_teachers,
    )


def remove_holiday(db: Session, ctx: DivisionContext, day: str) -> HolidayChange:
    config = _get_config(db, ctx)
    if config is None or day not in (config.holidays or []):
        return HolidayChange(holidays=get_holidays(db, ctx))

    config.holidays = [item for item in config.holidays if item != day]
    db.commit()
    logger.info("Holiday %s removed for %s", day, ctx.label)
    return HolidayChange(holidays=list(config.holidays))
