from pydantic import BaseModel, Field

from app.schemas.division import DivisionContext


class ClassroomBase(DivisionContext):
    model_config = {"frozen": False}

    year: str | None = Field(default=None, max_length=20)
    room_number: str | None = Field(default=None, max_length=50)


class ClassroomCreate(ClassroomBase):
    pass


class ClassroomUpdate(BaseModel):
    year: str | None = Field(default=None, max_length=20)
    room_number: str | None = Field(default=None, max_length=50)


class ClassroomOut(ClassroomBase):
    id: str

    model_config = {"from_attributes": True, "frozen": False}
