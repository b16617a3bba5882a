from app.models.classroom import Classroom  # noqa: F401
from app.models.lecture_entry import EntryStatus, LectureEntry  # noqa: F401
from app.models.subject import Subject  # noqa: F401
from app.models.teacher import Teacher  # noqa: F401
from app.models.weekly_config import WeeklyConfig  # noqa: F401
from app.models.weekly_timetable import WeeklyTimetable  # noqa: F401
