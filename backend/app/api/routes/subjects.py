from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_actor, get_db
from app.models.subject import Subject
from app.models.teacher import Teacher
from app.schemas.subject import SubjectCreate, SubjectOut, SubjectUpdate
from app.services.entry_store import count_entries

router = APIRouter()


def _ensure_teacher(db: Session, teacher_id: str | None) -> None:
    if teacher_id is not None and db.get(Teacher, teacher_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assigned teacher not found")


@router.get("/", response_model=list[SubjectOut])
def list_subjects(db: Session = Depends(get_db)) -> list[SubjectOut]:
    return list(db.execute(select(Subject).order_by(Subject.subject_code)).unique().scalars())


@router.get("/{subject_id}", response_model=SubjectOut)
def get_subject(subject_id: str, db: Session = Depends(get_db)) -> SubjectOut:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    return subject


@router.post("/", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
def create_subject(
    payload: SubjectCreate,
    actor_id: str = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> SubjectOut:
    existing = db.execute(select(Subject).where(Subject.subject_code == payload.subject_code)).unique().scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject code already exists")
    _ensure_teacher(db, payload.teacher_id)
    subject = Subject(**payload.model_dump())
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


@router.put("/{subject_id}", response_model=SubjectOut)
def update_subject(
    subject_id: str,
    payload: SubjectUpdate,
    actor_id: str = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> SubjectOut:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")

    data = payload.model_dump(exclude_unset=True)
    if "subject_code" in data:
        existing = db.execute(
            select(Subject).where(Subject.subject_code == data["subject_code"], Subject.id != subject_id)
        ).unique().scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject code already exists")
    if "teacher_id" in data:
        _ensure_teacher(db, data["teacher_id"])

    for key, value in data.items():
        setattr(subject, key, value)
    db.commit()
    db.refresh(subject)
    return subject


@router.delete("/{subject_id}")
def delete_subject(
    subject_id: str,
    actor_id: str = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> dict:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    scheduled = count_entries(db, subject_id=subject_id)
    if scheduled:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Subject still has {scheduled} scheduled lecture(s); remove them first",
        )
    db.delete(subject)
    db.commit()
    return {"success": True}
