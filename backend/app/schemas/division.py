from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

SEMESTER_PREFIX = re.compile(r"^sem-?", re.IGNORECASE)


class DivisionContext(BaseModel):
    """Scoping key for capacity and class-slot checks: one class division in one semester."""

    model_config = {"frozen": True}

    program: str = Field(min_length=1, max_length=100)
    class_name: str = Field(min_length=1, max_length=20)
    semester: int = Field(ge=1, le=6)
    division: str = Field(min_length=1, max_length=10)

    @field_validator("program", "class_name", "division", mode="before")
    @classmethod
    def strip_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("semester", mode="before")
    @classmethod
    def parse_semester(cls, value):
        # Accepts "6", "Sem-6" and "sem6" as well as plain integers.
        if isinstance(value, str):
            cleaned = SEMESTER_PREFIX.sub("", value.strip())
            if not cleaned.isdigit():
                raise ValueError("Semester must be a number between 1 and 6")
            return int(cleaned)
        return value

    @property
    def label(self) -> str:
        return f"{self.program} {self.class_name} Sem-{self.semester} {self.division}"

    @property
    def seed_key(self) -> str:
        return f"{self.program}-{self.class_name}-{self.semester}-{self.division}"

    @classmethod
    def of(cls, record) -> "DivisionContext":
        return cls(
            program=record.program,
            class_name=record.class_name,
            semester=record.semester,
            division=record.division,
        )
