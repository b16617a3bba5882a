from __future__ import annotations

from typing import List

from sqlalchemy.orm import Session

from app.models.classroom import Classroom
from app.models.lecture_entry import LectureEntry
from app.models.subject import Subject
from app.models.teacher import Teacher
from app.schemas.division import DivisionContext
from app.schemas.timetable import ValidationIssue, ValidationResult
from app.services.entry_store import find_entries, find_entry
from app.services.timetable_rules import is_break_slot
from app.services.workload import compute_subject_periods, compute_teacher_workload


def _subject_label(entry: LectureEntry) -> str:
    return entry.subject_name or entry.subject_id


def _room_label(classroom: Classroom) -> str:
    return classroom.room_number or classroom.id


class ConflictService:
    """Decides whether a lecture placement is legal.

    Candidate checks simulate the +1 a new entry would add; existing checks
    look at the stored state only, so a structurally present entry is flagged
    only once its division is already over capacity.
    """

    def __init__(self, db: Session):
        self.db = db

    def validate_candidate_placement(
        self,
        ctx: DivisionContext,
        day: str,
        time_slot: str,
        subject_id: str,
        teacher_id: str,
        classroom_id: str | None = None,
    ) -> ValidationResult:
        issues: List[ValidationIssue] = []

        if is_break_slot(time_slot):
            issues.append(ValidationIssue(
                kind="policy_violation",
                message=f"Cannot schedule during break time slot: {time_slot}",
            ))
            return ValidationResult.from_issues(issues)

        teacher = self.db.get(Teacher, teacher_id)
        if teacher is None:
            return ValidationResult.from_issues([ValidationIssue(kind="not_found", message="Teacher not found")])
        subject = self.db.get(Subject, subject_id)
        if subject is None:
            return ValidationResult.from_issues([ValidationIssue(kind="not_found", message="Subject not found")])
        classroom = None
        if classroom_id is not None:
            classroom = self.db.get(Classroom, classroom_id)
            if classroom is None:
                return ValidationResult.from_issues([ValidationIssue(kind="not_found", message="Classroom not found")])

        teacher_clash = find_entry(self.db, teacher_id=teacher_id, day=day, time_slot=time_slot)
        if teacher_clash is not None:
            issues.append(ValidationIssue(
                kind="conflict",
                message=(
                    f"Teacher {teacher.faculty_name} is already assigned to "
                    f"{_subject_label(teacher_clash)} at {day} {time_slot}"
                ),
            ))

        class_clash = find_entry(self.db, ctx=ctx, day=day, time_slot=time_slot)
        if class_clash is not None:
            issues.append(ValidationIssue(
                kind="conflict",
                message=f"Class {ctx.label} already has {_subject_label(class_clash)} scheduled at {day} {time_slot}",
            ))

        if classroom is not None:
            issues.extend(self._room_issues(classroom, ctx, day, time_slot))

        workload = compute_teacher_workload(self.db, teacher_id, ctx)
        # Landing exactly on zero remaining is a full load, not a violation.
        if workload.balance - 1 < 0:
            issues.append(ValidationIssue(
                kind="capacity_exceeded",
                message=(
                    f"Teacher {teacher.faculty_name} workload exceeded for {ctx.label}: slot cannot be assigned. "
                    f"Current: {workload.assigned_hours}/{workload.teaching_hours}, adding 1 would exceed the limit."
                ),
            ))

        periods = compute_subject_periods(self.db, subject_id, ctx)
        if periods.balance - 1 < 0:
            issues.append(ValidationIssue(
                kind="capacity_exceeded",
                message=(
                    f"Subject {subject.subject_name} periods exceeded for {ctx.label}: slot cannot be assigned. "
                    f"Current: {periods.allotted_periods}/{periods.required_periods}, adding 1 would exceed the limit."
                ),
            ))

        return ValidationResult.from_issues(issues)

    def _room_issues(
        self,
        classroom: Classroom,
        ctx: DivisionContext,
        day: str,
        time_slot: str,
        exclude_id: str | None = None,
    ) -> List[ValidationIssue]:
        """A room serves only its own division and holds one lecture per slot."""
        issues: List[ValidationIssue] = []
        room = _room_label(classroom)
        owner = DivisionContext.of(classroom)
        if owner != DivisionContext.of(ctx):
            issues.append(ValidationIssue(
                kind="conflict",
                message=f"Classroom {room} belongs to {owner.label}, not {ctx.label}",
            ))

        room_clash = find_entry(
            self.db, classroom_id=classroom.id, day=day, time_slot=time_slot, exclude_id=exclude_id
        )
        if room_clash is not None:
            issues.append(ValidationIssue(
                kind="conflict",
                message=(
                    f"Classroom {room} is already booked for {_subject_label(room_clash)} "
                    f"({DivisionContext.of(room_clash).label}) at {day} {time_slot}"
                ),
            ))
        return issues

    def validate_existing_placement(self, entry: LectureEntry) -> ValidationResult:
        # Break-slot entries are reported by the weekly policy check instead.
        if is_break_slot(entry.time_slot):
            return ValidationResult.from_issues([])

        where = f"{entry.day} {entry.time_slot}"
        teacher = self.db.get(Teacher, entry.teacher_id)
        if teacher is None:
            return ValidationResult.from_issues(
                [ValidationIssue(kind="not_found", message=f"Teacher not found for entry at {where}")]
            )
        subject = self.db.get(Subject, entry.subject_id)
        if subject is None:
            return ValidationResult.from_issues(
                [ValidationIssue(kind="not_found", message=f"Subject not found for entry at {where}")]
            )

        ctx = DivisionContext.of(entry)
        issues: List[ValidationIssue] = []

        teacher_clashes = find_entries(
            self.db, teacher_id=entry.teacher_id, day=entry.day, time_slot=entry.time_slot, exclude_id=entry.id
        )
        if teacher_clashes:
            names = ", ".join(_subject_label(item) for item in teacher_clashes)
            issues.append(ValidationIssue(
                kind="conflict",
                message=f"Teacher {teacher.faculty_name} has multiple assignments at {where}: {names}",
            ))

        class_clashes = find_entries(
            self.db, ctx=ctx, day=entry.day, time_slot=entry.time_slot, exclude_id=entry.id
        )
        if class_clashes:
            names = ", ".join(_subject_label(item) for item in class_clashes)
            issues.append(ValidationIssue(
                kind="conflict",
                message=f"Class {ctx.label} has multiple subjects at {where}: {names}",
            ))

        if entry.classroom_id is not None:
            classroom = self.db.get(Classroom, entry.classroom_id)
            if classroom is not None:
                issues.extend(self._room_issues(classroom, ctx, entry.day, entry.time_slot, exclude_id=entry.id))

        workload = compute_teacher_workload(self.db, entry.teacher_id, ctx)
        if workload.balance < 0:
            issues.append(ValidationIssue(
                kind="capacity_exceeded",
                message=(
                    f"Teacher {teacher.faculty_name} workload exceeded for {ctx.label}. "
                    f"Current: {workload.assigned_hours}/{workload.teaching_hours} (exceeds limit)."
                ),
            ))

        periods = compute_subject_periods(self.db, entry.subject_id, ctx)
        if periods.balance < 0:
            issues.append(ValidationIssue(
                kind="capacity_exceeded",
                message=(
                    f"Subject {subject.subject_name} periods exceeded for {ctx.label}. "
                    f"Current: {periods.allotted_periods}/{periods.required_periods} (exceeds limit)."
                ),
            ))

        return ValidationResult.from_issues(issues)

    def validate_entries(
        self,
        ctx: DivisionContext | None = None,
        classroom_id: str | None = None,
    ) -> ValidationResult:
        if classroom_id is not None:
            entries = find_entries(self.db, classroom_id=classroom_id)
        else:
            entries = find_entries(self.db, ctx=ctx)

        issues: List[ValidationIssue] = []
        warnings: List[str] = []
        for entry in entries:
            result = self.validate_existing_placement(entry)
            prefix = f"Entry {DivisionContext.of(entry).label} {entry.day} {entry.time_slot}"
            for issue in result.issues:
                issues.append(ValidationIssue(kind=issue.kind, message=f"{prefix}: {issue.message}"))
            warnings.extend(f"{prefix}: {warning}" for warning in result.warnings)

        return ValidationResult.from_issues(issues, warnings)
