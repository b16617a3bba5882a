from pydantic import BaseModel, Field, field_validator


class TeacherBase(BaseModel):
    teacher_code: str = Field(min_length=1, max_length=50)
    faculty_name: str = Field(min_length=1, max_length=200)
    subject_name: str = Field(default="", max_length=200)
    department: str = Field(min_length=1, max_length=200)
    teaching_hours: int = Field(ge=1, le=60)
    teacher_number: str | None = Field(default=None, max_length=50)

    @field_validator("teacher_code", "faculty_name", "department")
    @classmethod
    def strip_required_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Value cannot be blank")
        return stripped


class TeacherCreate(TeacherBase):
    pass


class TeacherUpdate(BaseModel):
    teacher_code: str | None = Field(default=None, min_length=1, max_length=50)
    faculty_name: str | None = Field(default=None, min_length=1, max_length=200)
    subject_name: str | None = Field(default=None, max_length=200)
    department: str | None = Field(default=None, min_length=1, max_length=200)
    teaching_hours: int | None = Field(default=None, ge=1, le=60)
    teacher_number: str | None = Field(default=None, max_length=50)

    @field_validator("teacher_code", "faculty_name", "subject_name", "department", "teaching_hours")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Value cannot be null")
        return value


class TeacherOut(TeacherBase):
    id: str

    model_config = {"from_attributes": True}
