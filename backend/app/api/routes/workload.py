from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_division
from app.schemas.division import DivisionContext
from app.schemas.workload import WorkloadOut
from app.services.workload import compute_subject_periods, compute_teacher_workload

router = APIRouter()


@router.get("/workload", response_model=WorkloadOut)
def get_workload(
    teacher_id: str | None = Query(default=None),
    subject_id: str | None = Query(default=None),
    ctx: DivisionContext = Depends(get_division),
    db: Session = Depends(get_db),
) -> WorkloadOut:
    if not teacher_id and not subject_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide teacher_id or subject_id",
        )
    return WorkloadOut(
        teacher=compute_teacher_workload(db, teacher_id, ctx) if teacher_id else None,
        subject=compute_subject_periods(db, subject_id, ctx) if subject_id else None,
    )
