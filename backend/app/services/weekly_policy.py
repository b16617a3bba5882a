from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from sqlalchemy.orm import Session

from app.models.lecture_entry import LectureEntry
from app.schemas.division import DivisionContext
from app.schemas.timetable import ValidationIssue, ValidationResult
from app.services.conflict_service import ConflictService
from app.services.entry_store import find_entries
from app.services.timetable_rules import ACTIVE_SLOTS, DAYS, MAX_LECTURES_PER_DAY, is_break_slot
from app.services.weekly_config import get_holidays


def validate_week(
    db: Session,
    ctx: DivisionContext,
    holidays: Iterable[str] | None = None,
) -> ValidationResult:
    """Day-level policy checks for one division, followed by a re-check of every entry.

    When ``holidays`` is omitted the stored holiday set of the division is used.
    """
    holiday_set = set(get_holidays(db, ctx) if holidays is None else holidays)

    entries_by_day: dict[str, list[LectureEntry]] = defaultdict(list)
    for entry in find_entries(db, ctx=ctx):
        entries_by_day[entry.day].append(entry)

    issues: list[ValidationIssue] = []
    for day in DAYS:
        day_entries = entries_by_day.get(day, [])

        if day in holiday_set:
            if day_entries:
                issues.append(ValidationIssue(
                    kind="policy_violation",
                    message=f"Holiday day {day} cannot have any timetable allocations",
                ))
            continue

        active = [entry for entry in day_entries if entry.time_slot in ACTIVE_SLOTS]
        if len(active) > MAX_LECTURES_PER_DAY:
            issues.append(ValidationIssue(
                kind="policy_violation",
                message=(
                    f"{day} has {len(active)} lectures. "
                    f"Maximum allowed is {MAX_LECTURES_PER_DAY} lectures per day."
                ),
            ))

        in_breaks = [entry for entry in day_entries if is_break_slot(entry.time_slot)]
        if in_breaks:
            issues.append(ValidationIssue(
                kind="policy_violation",
                message=f"{day} has {len(in_breaks)} entry(ies) in break slots. Break slots must remain empty.",
            ))

    entry_check = ConflictService(db).validate_entries(ctx)
    issues.extend(entry_check.issues)
    return ValidationResult.from_issues(issues, entry_check.warnings)
