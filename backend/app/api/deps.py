from collections.abc import Generator

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.security import decode_token
from app.db.session import SessionLocal
from app.schemas.division import DivisionContext

security = HTTPBearer()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_actor(credentials: HTTPAuthorizationCredentials = Depends(security)) -> str:
    """Resolve the bearer token to the actor id recorded as ``created_by``."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(credentials.credentials)
    except JWTError as exc:
        raise credentials_exception from exc

    actor_id = payload.get("sub")
    if not actor_id:
        raise credentials_exception
    return str(actor_id)


def get_division(
    program: str = Query(...),
    class_name: str = Query(...),
    semester: str = Query(...),
    division: str = Query(...),
) -> DivisionContext:
    try:
        return DivisionContext(program=program, class_name=class_name, semester=semester, division=division)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc
