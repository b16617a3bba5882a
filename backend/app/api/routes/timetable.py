import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_actor, get_db, get_division
from app.schemas.division import DivisionContext
from app.schemas.timetable import (
    EntryCreatedOut,
    EntryRollback,
    EntryValidateRequest,
    GenerationRequest,
    GenerationResult,
    HolidayChange,
    HolidayRequest,
    LectureEntryCreate,
    LectureEntryOut,
    ValidationResult,
    WeeklyTimetableOut,
    WeekSavedOut,
    WeekSaveRequest,
)
from app.services.auto_generator import auto_generate_timetable
from app.services.conflict_service import ConflictService
from app.services.timetable_entries import (
    add_entry,
    delete_entry,
    get_saved_week,
    list_entries,
    reset_division,
    save_week,
)
from app.services.weekly_config import get_holidays, remove_holiday, set_holiday
from app.services.weekly_policy import validate_week

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/entries", response_model=EntryCreatedOut, status_code=status.HTTP_201_CREATED)
def create_entry(
    payload: LectureEntryCreate,
    actor_id: str = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> EntryCreatedOut:
    entry, verdict = add_entry(
        db,
        payload.context,
        day=payload.day,
        time_slot=payload.time_slot,
        subject_id=payload.subject_id,
        teacher_id=payload.teacher_id,
        created_by=actor_id,
        classroom_id=payload.classroom_id,
    )
    return EntryCreatedOut(entry=LectureEntryOut.model_validate(entry), warnings=verdict.warnings)


@router.get("/entries", response_model=list[LectureEntryOut])
def get_entries(
    program: str | None = Query(default=None),
    class_name: str | None = Query(default=None),
    semester: int | None = Query(default=None, ge=1, le=6),
    division: str | None = Query(default=None),
    day: str | None = Query(default=None),
    time_slot: str | None = Query(default=None),
    teacher_id: str | None = Query(default=None),
    subject_id: str | None = Query(default=None),
    classroom_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[LectureEntryOut]:
    return list_entries(
        db,
        program=program,
        class_name=class_name,
        semester=semester,
        division=division,
        day=day,
        time_slot=time_slot,
        teacher_id=teacher_id,
        subject_id=subject_id,
        classroom_id=classroom_id,
    )


@router.delete("/entries/{entry_id}", response_model=EntryRollback)
def remove_entry(
    entry_id: str,
    actor_id: str = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> EntryRollback:
    rollback = delete_entry(db, entry_id)
    logger.info("Entry %s deleted by %s", entry_id, actor_id)
    return rollback


@router.delete("/division")
def reset_division_entries(
    ctx: DivisionContext = Depends(get_division),
    actor_id: str = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> dict:
    return {"success": True, "deleted": reset_division(db, ctx)}


@router.post("/validate", response_model=ValidationResult)
def validate_entries(payload: EntryValidateRequest, db: Session = Depends(get_db)) -> ValidationResult:
    ctx = payload.context()
    if ctx is not None and payload.classroom_id is None:
        return validate_week(db, ctx)
    return ConflictService(db).validate_entries(ctx, classroom_id=payload.classroom_id)


@router.post("/save", response_model=WeekSavedOut)
def save_weekly_timetable(
    payload: WeekSaveRequest,
    actor_id: str = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> WeekSavedOut:
    ctx = DivisionContext.of(payload)
    saved, verdict = save_week(db, ctx, payload.holidays, actor_id)
    return WeekSavedOut(weekly_timetable=WeeklyTimetableOut.model_validate(saved), warnings=verdict.warnings)


@router.get("/save", response_model=WeeklyTimetableOut)
def get_weekly_timetable(
    ctx: DivisionContext = Depends(get_division),
    db: Session = Depends(get_db),
) -> WeeklyTimetableOut:
    return get_saved_week(db, ctx)


@router.get("/weekly-config", response_model=HolidayChange)
def get_weekly_config(
    ctx: DivisionContext = Depends(get_division),
    db: Session = Depends(get_db),
) -> HolidayChange:
    return HolidayChange(holidays=get_holidays(db, ctx))


@router.post("/holiday", response_model=HolidayChange)
def update_holiday(
    payload: HolidayRequest,
    actor_id: str = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> HolidayChange:
    ctx = DivisionContext.of(payload)
    if payload.action == "set":
        return set_holiday(db, ctx, payload.day)
    return remove_holiday(db, ctx, payload.day)


@router.post("/auto-generate", response_model=GenerationResult)
def auto_generate(
    payload: GenerationRequest,
    actor_id: str = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> GenerationResult:
    return auto_generate_timetable(db, DivisionContext.of(payload), payload.mode, actor_id)
