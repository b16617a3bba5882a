import os

os.environ["DATABASE_URL"] = "sqlite+pysqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.core.security import create_access_token
from app.db.base import Base
from app.main import app
from app.models.classroom import Classroom
from app.models.lecture_entry import EntryStatus, LectureEntry
from app.models.subject import Subject
from app.models.teacher import Teacher
from app.schemas.division import DivisionContext


@pytest.fixture()
def engine():
    # One shared in-memory database per test.
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers():
    return {"Authorization": f"Bearer {create_access_token('user-1')}"}


@pytest.fixture()
def division():
    return DivisionContext(program="B.Tech CSE", class_name="SY", semester=3, division="A")


@pytest.fixture()
def make_teacher(db_session):
    counter = {"value": 0}

    def _make(name="Prof Rao", teaching_hours=6, code=None):
        counter["value"] += 1
        teacher = Teacher(
            teacher_code=code or f"T{counter['value']:03d}",
            faculty_name=name,
            department="Computer Engineering",
            teaching_hours=teaching_hours,
        )
        db_session.add(teacher)
        db_session.commit()
        db_session.refresh(teacher)
        return teacher

    return _make


@pytest.fixture()
def make_subject(db_session):
    counter = {"value": 0}

    def _make(teacher=None, name="Data Structures", required_periods=4, code=None):
        counter["value"] += 1
        subject = Subject(
            subject_code=code or f"S{counter['value']:03d}",
            subject_name=name,
            required_periods=required_periods,
            teacher_id=teacher.id if teacher is not None else None,
        )
        db_session.add(subject)
        db_session.commit()
        db_session.refresh(subject)
        return subject

    return _make


@pytest.fixture()
def make_classroom(db_session):
    def _make(ctx, room_number="101"):
        classroom = Classroom(
            program=ctx.program,
            class_name=ctx.class_name,
            semester=ctx.semester,
            division=ctx.division,
            room_number=room_number,
        )
        db_session.add(classroom)
        db_session.commit()
        db_session.refresh(classroom)
        return classroom

    return _make


@pytest.fixture()
def add_lecture(db_session):
    """Insert an entry directly, bypassing validation."""

    def _add(ctx, day, time_slot, subject, teacher=None, classroom=None):
        entry = LectureEntry(
            program=ctx.program,
            class_name=ctx.class_name,
            semester=ctx.semester,
            division=ctx.division,
            day=day,
            time_slot=time_slot,
            subject_id=subject.id,
            teacher_id=(teacher.id if teacher is not None else subject.teacher_id),
            classroom_id=classroom.id if classroom is not None else None,
            status=EntryStatus.valid,
            created_by="seed",
        )
        db_session.add(entry)
        db_session.commit()
        db_session.refresh(entry)
        return entry

    return _add
