from __future__ import annotations

import logging

from sqlalchemy import Engine, inspect

from app.core.exceptions import ConfigurationError
from app.db.base import Base
from app.db.session import engine
import app.models  # noqa: F401

logger = logging.getLogger(__name__)

REQUIRED_TABLES: tuple[str, ...] = (
    "teachers",
    "subjects",
    "classrooms",
    "lecture_entries",
    "weekly_configs",
    "weekly_timetables",
)


def missing_tables(bind: Engine | None = None) -> list[str]:
    target = engine if bind is None else bind
    with target.connect() as connection:
        existing = set(inspect(connection).get_table_names())
    return [name for name in REQUIRED_TABLES if name not in existing]


def ensure_schema() -> None:
    missing = missing_tables()
    if not missing:
        return
    logger.info("Creating missing tables: %s", ", ".join(missing))
    Base.metadata.create_all(bind=engine)
    still_missing = missing_tables()
    if still_missing:
        raise ConfigurationError(f"Database schema is incomplete: {', '.join(still_missing)}")
