from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.api.deps import get_current_actor, get_db
from app.models.classroom import Classroom
from app.models.lecture_entry import LectureEntry
from app.schemas.classroom import ClassroomCreate, ClassroomOut, ClassroomUpdate

router = APIRouter()


@router.get("/", response_model=list[ClassroomOut])
def list_classrooms(db: Session = Depends(get_db)) -> list[ClassroomOut]:
    query = select(Classroom).order_by(
        Classroom.program, Classroom.class_name, Classroom.semester, Classroom.division
    )
    return list(db.execute(query).scalars())


@router.get("/{classroom_id}", response_model=ClassroomOut)
def get_classroom(classroom_id: str, db: Session = Depends(get_db)) -> ClassroomOut:
    classroom = db.get(Classroom, classroom_id)
    if classroom is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Classroom not found")
    return classroom


@router.post("/", response_model=ClassroomOut, status_code=status.HTTP_201_CREATED)
def create_classroom(
    payload: ClassroomCreate,
    actor_id: str = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> ClassroomOut:
    existing = db.execute(
        select(Classroom).where(
            Classroom.program == payload.program,
            Classroom.class_name == payload.class_name,
            Classroom.semester == payload.semester,
            Classroom.division == payload.division,
        )
    ).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Classroom for this division already exists")
    classroom = Classroom(**payload.model_dump())
    db.add(classroom)
    db.commit()
    db.refresh(classroom)
    return classroom


@router.put("/{classroom_id}", response_model=ClassroomOut)
def update_classroom(
    classroom_id: str,
    payload: ClassroomUpdate,
    actor_id: str = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> ClassroomOut:
    classroom = db.get(Classroom, classroom_id)
    if classroom is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Classroom not found")
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(classroom, key, value)
    db.commit()
    db.refresh(classroom)
    return classroom


@router.delete("/{classroom_id}")
def delete_classroom(
    classroom_id: str,
    actor_id: str = Depends(get_current_actor),
    db: Session = Depends(get_db),
) -> dict:
    classroom = db.get(Classroom, classroom_id)
    if classroom is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Classroom not found")
    # Entries keep their slot; they only lose the room reference.
    db.execute(
        update(LectureEntry).where(LectureEntry.classroom_id == classroom_id).values(classroom_id=None)
    )
    db.delete(classroom)
    db.commit()
    return {"success": True}
