from pydantic import BaseModel, Field, field_validator


class SubjectBase(BaseModel):
    subject_code: str = Field(min_length=1, max_length=50)
    subject_name: str = Field(min_length=1, max_length=200)
    required_periods: int = Field(ge=1, le=48)
    teacher_id: str | None = Field(default=None, max_length=36)

    @field_validator("subject_code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        code = value.strip().upper()
        if not code:
            raise ValueError("Subject code cannot be blank")
        return code

    @field_validator("teacher_id", mode="before")
    @classmethod
    def blank_teacher_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SubjectCreate(SubjectBase):
    pass


class SubjectUpdate(BaseModel):
    subject_code: str | None = Field(default=None, min_length=1, max_length=50)
    subject_name: str | None = Field(default=None, min_length=1, max_length=200)
    required_periods: int | None = Field(default=None, ge=1, le=48)
    teacher_id: str | None = Field(default=None, max_length=36)

    @field_validator("subject_code", "subject_name", "required_periods")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Value cannot be null")
        return value

    @field_validator("subject_code")
    @classmethod
    def normalize_code(cls, value: str | None) -> str | None:
        if value is None:
            return value
        code = value.strip().upper()
        if not code:
            raise ValueError("Subject code cannot be blank")
        return code

    @field_validator("teacher_id", mode="before")
    @classmethod
    def blank_teacher_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SubjectOut(SubjectBase):
    id: str

    model_config = {"from_attributes": True}
