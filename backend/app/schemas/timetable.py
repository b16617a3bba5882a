from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.models.lecture_entry import EntryStatus
from app.schemas.division import DivisionContext
from app.schemas.workload import SubjectPeriods, TeacherWorkload
from app.services.timetable_rules import DAYS, TIME_SLOTS

IssueKind = Literal["conflict", "capacity_exceeded", "policy_violation", "not_found"]
GenerationMode = Literal["fill", "full"]


def _validate_day(value: str) -> str:
    day = value.strip()
    if day not in DAYS:
        raise ValueError(f"Invalid day value: {day}")
    return day


def _validate_time_slot(value: str) -> str:
    time_slot = value.strip()
    if time_slot not in TIME_SLOTS:
        raise ValueError(f"Invalid time slot: {time_slot}")
    return time_slot


class ValidationIssue(BaseModel):
    kind: IssueKind
    message: str


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    # Reserved for informational messages; nothing populates it today and callers never block on it.
    warnings: list[str] = Field(default_factory=list)
    issues: list[ValidationIssue] = Field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: list[ValidationIssue], warnings: list[str] | None = None) -> "ValidationResult":
        return cls(
            is_valid=not issues,
            errors=[issue.message for issue in issues],
            warnings=list(warnings or []),
            issues=list(issues),
        )


class LectureEntryCreate(DivisionContext):
    model_config = {"frozen": False}

    day: str
    time_slot: str
    subject_id: str = Field(min_length=1, max_length=36)
    teacher_id: str = Field(min_length=1, max_length=36)
    classroom_id: str | None = Field(default=None, max_length=36)

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        return _validate_day(value)

    @field_validator("time_slot")
    @classmethod
    def validate_time_slot(cls, value: str) -> str:
        return _validate_time_slot(value)

    @field_validator("classroom_id", mode="before")
    @classmethod
    def blank_classroom_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def context(self) -> DivisionContext:
        return DivisionContext(
            program=self.program,
            class_name=self.class_name,
            semester=self.semester,
            division=self.division,
        )


class LectureEntryOut(BaseModel):
    id: str
    program: str
    class_name: str
    semester: int
    division: str
    day: str
    time_slot: str
    subject_id: str
    teacher_id: str
    classroom_id: str | None = None
    status: EntryStatus
    created_by: str
    created_at: datetime | None = None
    subject_name: str | None = None
    faculty_name: str | None = None

    model_config = {"from_attributes": True}


class EntryCreatedOut(BaseModel):
    entry: LectureEntryOut
    warnings: list[str] = Field(default_factory=list)


class EntryRollback(BaseModel):
    entry_id: str
    context: DivisionContext
    teacher_before: TeacherWorkload | None = None
    teacher_after: TeacherWorkload | None = None
    subject_before: SubjectPeriods | None = None
    subject_after: SubjectPeriods | None = None


class EntryValidateRequest(BaseModel):
    program: str | None = None
    class_name: str | None = None
    semester: int | None = Field(default=None, ge=1, le=6)
    division: str | None = None
    classroom_id: str | None = None

    def context(self) -> DivisionContext | None:
        if not (self.program and self.class_name and self.semester and self.division):
            return None
        return DivisionContext(
            program=self.program,
            class_name=self.class_name,
            semester=self.semester,
            division=self.division,
        )


class WeekSaveRequest(DivisionContext):
    model_config = {"frozen": False}

    holidays: list[str] = Field(default_factory=list, max_length=len(DAYS))

    @field_validator("holidays")
    @classmethod
    def validate_holidays(cls, value: list[str]) -> list[str]:
        cleaned: list[str] = []
        for item in value:
            day = _validate_day(item)
            if day not in cleaned:
                cleaned.append(day)
        return cleaned


class WeeklyTimetableOut(BaseModel):
    id: str
    program: str
    class_name: str
    semester: int
    division: str
    holidays: list[str]
    entry_ids: list[str]
    created_by: str

    model_config = {"from_attributes": True}


class WeekSavedOut(BaseModel):
    weekly_timetable: WeeklyTimetableOut
    warnings: list[str] = Field(default_factory=list)


class HolidayRequest(DivisionContext):
    model_config = {"frozen": False}

    day: str
    action: Literal["set", "remove"]

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        return _validate_day(value)


class HolidayChange(BaseModel):
    holidays: list[str]
    deleted_entries: int = 0
    affected_subjects: list[str] = Field(default_factory=list)
    affected_teachers: list[str] = Field(default_factory=list)


class GenerationRequest(DivisionContext):
    model_config = {"frozen": False}

    mode: GenerationMode


class GenerationSummary(BaseModel):
    teachers_reached_full_load: list[str] = Field(default_factory=list)
    subjects_fully_allocated: list[str] = Field(default_factory=list)
    unassigned_subjects: list[str] = Field(default_factory=list)


class GenerationResult(BaseModel):
    success: bool = True
    mode: GenerationMode
    generated: int = 0
    skipped: int = 0
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    summary: GenerationSummary = Field(default_factory=GenerationSummary)
