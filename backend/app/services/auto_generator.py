from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import SchedulerError
from app.models.subject import Subject
from app.schemas.division import DivisionContext
from app.schemas.timetable import GenerationResult
from app.services.conflict_service import ConflictService
from app.services.entry_store import create_entry, delete_entries, find_entries, find_entry
from app.services.timetable_rules import (
    DAYS,
    MAX_CONSECUTIVE_RUN,
    MAX_SAME_DAY_SUBJECT,
    TIME_SLOTS,
    is_break_slot,
)
from app.services.weekly_config import get_holidays
from app.services.workload import compute_subject_periods, compute_teacher_workload

logger = logging.getLogger(__name__)

T = TypeVar("T")

PRIORITY_WEIGHT = 1000


@dataclass(frozen=True)
class Slot:
    day: str
    time_slot: str


@dataclass
class SubjectPriority:
    subject: Subject
    remaining_periods: int
    scheduled_count: int

    @property
    def priority(self) -> int:
        # Furthest from target first; among equals the least scheduled one.
        return self.remaining_periods * PRIORITY_WEIGHT - self.scheduled_count


@dataclass
class TeacherAvailability:
    teacher_id: str
    faculty_name: str
    remaining_hours: int
    scheduled_count: int


def simple_hash(value: str) -> int:
    """32-bit string hash (``h = h * 31 + code unit``), wrapped like a JS int32, absolute value."""
    raw = value.encode("utf-16-le")
    hash_value = 0
    for index in range(0, len(raw), 2):
        unit = raw[index] | (raw[index + 1] << 8)
        hash_value = ((hash_value << 5) - hash_value + unit) & 0xFFFFFFFF
        if hash_value >= 0x80000000:
            hash_value -= 0x100000000
    return abs(hash_value)


def hash_shuffle(items: list[T], seed: str) -> list[T]:
    """Seeded Fisher-Yates variant: step ``i`` swaps with ``(seed + i) % (i + 1)``.

    Reproducible per seed; this diversifies order only and is not a random source.
    """
    shuffled = list(items)
    hash_seed = simple_hash(seed)
    for i in range(len(shuffled) - 1, 0, -1):
        j = (hash_seed + i) % (i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def build_candidate_slots(
    holidays: set[str],
    occupied: set[tuple[str, str]] | None = None,
) -> list[Slot]:
    slots: list[Slot] = []
    for day in DAYS:
        if day in holidays:
            continue
        for time_slot in TIME_SLOTS:
            if is_break_slot(time_slot):
                continue
            if occupied is not None and (day, time_slot) in occupied:
                continue
            slots.append(Slot(day=day, time_slot=time_slot))
    return slots


def consecutive_run_length(day_subjects: dict[str, str], time_slot: str, subject_id: str) -> int:
    """Length of the same-subject run that placing ``subject_id`` at ``time_slot`` would form.

    The scan stops at break slots in both directions.
    """
    position = TIME_SLOTS.index(time_slot)
    run = 1
    for index in range(position - 1, -1, -1):
        neighbour = TIME_SLOTS[index]
        if is_break_slot(neighbour) or day_subjects.get(neighbour) != subject_id:
            break
        run += 1
    for index in range(position + 1, len(TIME_SLOTS)):
        neighbour = TIME_SLOTS[index]
        if is_break_slot(neighbour) or day_subjects.get(neighbour) != subject_id:
            break
        run += 1
    return run


class AutoTimetableGenerator:
    def __init__(self, db: Session, ctx: DivisionContext, mode: Literal["fill", "full"], created_by: str):
        self.db = db
        self.ctx = ctx
        self.mode = mode
        self.created_by = created_by
        self.conflicts = ConflictService(db)
        self.result = GenerationResult(mode=mode)

    def run(self) -> GenerationResult:
        holidays = set(get_holidays(self.db, self.ctx))
        if holidays:
            cleared = delete_entries(self.db, ctx=self.ctx, days=holidays)
            if cleared:
                logger.info("Cleared %d entries on holidays for %s", cleared, self.ctx.label)

        existing = find_entries(self.db, ctx=self.ctx)
        occupied = {(entry.day, entry.time_slot) for entry in existing}
        if self.mode == "full":
            delete_entries(self.db, ctx=self.ctx)
        self.db.commit()

        subjects = list(self.db.execute(select(Subject).order_by(Subject.subject_code)).unique().scalars())
        eligible = [subject for subject in subjects if subject.teacher_id and subject.teacher is not None]
        if not eligible:
            raise SchedulerError(
                "No subjects with assigned teachers found",
                details={"context": self.ctx.model_dump()},
            )

        slots = build_candidate_slots(holidays, occupied if self.mode == "fill" else None)
        shuffled = hash_shuffle(slots, self.ctx.seed_key)

        priorities = self._subject_priorities(eligible)
        teachers = self._teacher_availability(eligible)

        for slot in shuffled:
            if self._allocate(slot, priorities, teachers):
                self.result.generated += 1
            else:
                self.result.skipped += 1

        self._summarize(priorities, teachers, subjects)
        logger.info(
            "Auto-generation (%s) for %s: %d generated, %d skipped",
            self.mode,
            self.ctx.label,
            self.result.generated,
            self.result.skipped,
        )
        return self.result

    def _subject_priorities(self, subjects: list[Subject]) -> list[SubjectPriority]:
        priorities = []
        for subject in subjects:
            periods = compute_subject_periods(self.db, subject.id, self.ctx)
            priorities.append(SubjectPriority(
                subject=subject,
                remaining_periods=periods.remaining_periods,
                scheduled_count=periods.allotted_periods,
            ))
        # Sorted once; afterwards only the remaining counters move.
        priorities.sort(key=lambda item: item.priority, reverse=True)
        return priorities

    def _teacher_availability(self, subjects: list[Subject]) -> dict[str, TeacherAvailability]:
        teachers: dict[str, TeacherAvailability] = {}
        for subject in subjects:
            if subject.teacher_id in teachers:
                continue
            workload = compute_teacher_workload(self.db, subject.teacher_id, self.ctx)
            teachers[subject.teacher_id] = TeacherAvailability(
                teacher_id=subject.teacher_id,
                faculty_name=subject.teacher.faculty_name,
                remaining_hours=workload.remaining_hours,
                scheduled_count=workload.assigned_hours,
            )
        return teachers

    def _allocate(
        self,
        slot: Slot,
        priorities: list[SubjectPriority],
        teachers: dict[str, TeacherAvailability],
    ) -> bool:
        day_entries = find_entries(self.db, ctx=self.ctx, day=slot.day)
        day_subjects = {entry.time_slot: entry.subject_id for entry in day_entries}
        if slot.time_slot in day_subjects:
            return False

        for candidate in priorities:
            if candidate.remaining_periods <= 0:
                continue
            subject = candidate.subject
            teacher = teachers.get(subject.teacher_id)
            if teacher is None or teacher.remaining_hours <= 0:
                continue

            placed_today = sum(1 for subject_id in day_subjects.values() if subject_id == subject.id)
            if placed_today >= MAX_SAME_DAY_SUBJECT:
                continue
            if consecutive_run_length(day_subjects, slot.time_slot, subject.id) > MAX_CONSECUTIVE_RUN:
                continue

            if find_entry(self.db, teacher_id=teacher.teacher_id, day=slot.day, time_slot=slot.time_slot):
                continue

            verdict = self.conflicts.validate_candidate_placement(
                self.ctx, slot.day, slot.time_slot, subject.id, teacher.teacher_id
            )
            if not verdict.is_valid:
                logger.debug("Rejected %s at %s %s: %s", subject.subject_code, slot.day, slot.time_slot, verdict.errors)
                continue

            if not self._commit(slot, subject, teacher):
                continue

            candidate.remaining_periods = compute_subject_periods(self.db, subject.id, self.ctx).remaining_periods
            teacher.remaining_hours = compute_teacher_workload(self.db, teacher.teacher_id, self.ctx).remaining_hours
            candidate.scheduled_count += 1
            teacher.scheduled_count += 1
            return True

        return False

    def _commit(self, slot: Slot, subject: Subject, teacher: TeacherAvailability) -> bool:
        subject_name = subject.subject_name
        try:
            create_entry(
                self.db,
                ctx=self.ctx,
                day=slot.day,
                time_slot=slot.time_slot,
                subject_id=subject.id,
                teacher_id=teacher.teacher_id,
                created_by=self.created_by,
            )
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            self.result.warnings.append(
                f"Failed to allocate {subject_name} at {slot.day} {slot.time_slot}: {exc.orig}"
            )
            return False
        return True

    def _summarize(
        self,
        priorities: list[SubjectPriority],
        teachers: dict[str, TeacherAvailability],
        subjects: list[Subject],
    ) -> None:
        summary = self.result.summary
        for item in priorities:
            if item.remaining_periods <= 0:
                summary.subjects_fully_allocated.append(item.subject.subject_name)
            elif item.scheduled_count == 0:
                summary.unassigned_subjects.append(item.subject.subject_name)

        ranked = {item.subject.id for item in priorities}
        summary.unassigned_subjects.extend(
            subject.subject_name for subject in subjects if subject.id not in ranked
        )

        for teacher in teachers.values():
            if teacher.remaining_hours <= 0 and teacher.scheduled_count > 0:
                summary.teachers_reached_full_load.append(teacher.faculty_name)


def auto_generate_timetable(
    db: Session,
    ctx: DivisionContext,
    mode: Literal["fill", "full"],
    created_by: str,
) -> GenerationResult:
    return AutoTimetableGenerator(db, ctx, mode, created_by).run()

