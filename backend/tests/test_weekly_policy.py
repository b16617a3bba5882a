import pytest

from app.schemas.division import DivisionContext
from app.services.entry_store import count_entries
from app.services.timetable_rules import ACTIVE_SLOTS
from app.services.weekly_config import get_holidays, remove_holiday, set_holiday
from app.services.weekly_policy import validate_week


@pytest.fixture()
def cs_division():
    return DivisionContext(program="CS", class_name="SY", semester=3, division="B")


def test_entry_on_holiday_is_rejected(db_session, cs_division, make_teacher, make_subject, add_lecture):
    subject = make_subject(make_teacher())
    add_lecture(cs_division, "Saturday", "09:30-10:25", subject)

    assert validate_week(db_session, cs_division, []).is_valid

    result = validate_week(db_session, cs_division, ["Saturday"])
    assert not result.is_valid
    assert result.errors == ["Holiday day Saturday cannot have any timetable allocations"]


def test_stored_holidays_apply_when_none_given(db_session, cs_division, make_teacher, make_subject, add_lecture):
    subject = make_subject(make_teacher())
    set_holiday(db_session, cs_division, "Friday")
    add_lecture(cs_division, "Friday", "14:30-15:25", subject)

    result = validate_week(db_session, cs_division)

    assert not result.is_valid
    assert "Holiday day Friday cannot have any timetable allocations" in result.errors


def test_full_day_of_active_slots_is_allowed(db_session, cs_division, make_teacher, make_subject, add_lecture):
    subject = make_subject(make_teacher(teaching_hours=6), required_periods=6)
    for time_slot in ACTIVE_SLOTS:
        add_lecture(cs_division, "Monday", time_slot, subject)

    assert validate_week(db_session, cs_division).is_valid


def test_break_slot_entry_is_a_policy_violation(db_session, cs_division, make_teacher, make_subject, add_lecture):
    subject = make_subject(make_teacher())
    add_lecture(cs_division, "Wednesday", "14:10-14:30", subject)

    result = validate_week(db_session, cs_division)

    assert result.errors == ["Wednesday has 1 entry(ies) in break slots. Break slots must remain empty."]
    assert result.issues[0].kind == "policy_violation"


def test_over_capacity_entries_are_reported(db_session, cs_division, make_teacher, make_subject, add_lecture):
    teacher = make_teacher(name="Prof Iyer", teaching_hours=2)
    subject = make_subject(teacher, required_periods=2)
    add_lecture(cs_division, "Monday", "09:30-10:25", subject)
    add_lecture(cs_division, "Thursday", "09:30-10:25", subject)
    assert validate_week(db_session, cs_division).is_valid

    teacher.teaching_hours = 1
    db_session.commit()

    result = validate_week(db_session, cs_division)
    assert not result.is_valid
    assert len(result.errors) == 2
    assert all("Prof Iyer workload exceeded" in error for error in result.errors)


def test_set_holiday_clears_the_day(db_session, cs_division, division, make_teacher, make_subject, add_lecture):
    rao = make_teacher(name="Prof Rao")
    iyer = make_teacher(name="Prof Iyer")
    structures = make_subject(rao, name="Data Structures")
    networks = make_subject(iyer, name="Computer Networks")
    add_lecture(cs_division, "Monday", "09:30-10:25", structures)
    add_lecture(cs_division, "Monday", "10:25-11:20", networks)
    add_lecture(division, "Monday", "12:20-13:15", structures)

    change = set_holiday(db_session, cs_division, "Monday")

    assert change.holidays == ["Monday"]
    assert change.deleted_entries == 2
    assert change.affected_subjects == ["Data Structures", "Computer Networks"]
    assert change.affected_teachers == ["Prof Rao", "Prof Iyer"]
    assert count_entries(db_session, ctx=cs_division) == 0
    # Other divisions keep their Monday.
    assert count_entries(db_session, ctx=division) == 1


def test_holiday_set_is_ordered_and_removable(db_session, cs_division):
    assert get_holidays(db_session, cs_division) == []

    set_holiday(db_session, cs_division, "Saturday")
    set_holiday(db_session, cs_division, "Monday")
    set_holiday(db_session, cs_division, "Saturday")
    assert get_holidays(db_session, cs_division) == ["Monday", "Saturday"]

    change = remove_holiday(db_session, cs_division, "Saturday")
    assert change.holidays == ["Monday"]
    assert remove_holiday(db_session, cs_division, "Tuesday").holidays == ["Monday"]
