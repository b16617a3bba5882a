from pydantic import BaseModel


class TeacherWorkload(BaseModel):
    teacher_id: str
    assigned_hours: int
    remaining_hours: int
    teaching_hours: int

    @property
    def balance(self) -> int:
        """Unclamped remaining capacity; negative once the teacher is over-booked."""
        return self.teaching_hours - self.assigned_hours


class SubjectPeriods(BaseModel):
    subject_id: str
    allotted_periods: int
    remaining_periods: int
    required_periods: int

    @property
    def balance(self) -> int:
        return self.required_periods - self.allotted_periods


class WorkloadOut(BaseModel):
    teacher: TeacherWorkload | None = None
    subject: SubjectPeriods | None = None
