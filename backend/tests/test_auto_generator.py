from collections import Counter

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import SchedulerError
from app.services import auto_generator
from app.services.auto_generator import (
    auto_generate_timetable,
    build_candidate_slots,
    consecutive_run_length,
    hash_shuffle,
    simple_hash,
)
from app.services.entry_store import find_entries
from app.services.weekly_config import set_holiday


def triples(db, ctx):
    return sorted((entry.day, entry.time_slot, entry.subject_id) for entry in find_entries(db, ctx=ctx))


@pytest.fixture()
def two_subjects(make_teacher, make_subject):
    rao = make_teacher(name="Prof Rao", teaching_hours=4)
    iyer = make_teacher(name="Prof Iyer", teaching_hours=6)
    structures = make_subject(rao, name="Data Structures", required_periods=4)
    networks = make_subject(iyer, name="Computer Networks", required_periods=4)
    return structures, networks


def test_simple_hash_matches_int32_string_hash():
    assert simple_hash("") == 0
    assert simple_hash("a") == 97
    assert simple_hash("ab") == 97 * 31 + 98
    # Long inputs overflow and wrap like a signed 32-bit integer.
    assert 0 <= simple_hash("B.Tech CSE-SY-3-A" * 10) <= 2**31


def test_hash_shuffle_is_a_seeded_permutation():
    items = list(range(20))

    shuffled = hash_shuffle(items, "CS-SY-3-B")

    assert sorted(shuffled) == items
    assert shuffled == hash_shuffle(items, "CS-SY-3-B")
    assert items == list(range(20))
    # seed 97: i=2 swaps with 0, then i=1 swaps with 0.
    assert hash_shuffle([0, 1, 2], "a") == [1, 2, 0]
    assert hash_shuffle([], "a") == []


def test_candidate_slots_skip_breaks_holidays_and_occupied():
    assert len(build_candidate_slots(set())) == 36
    slots = build_candidate_slots({"Saturday"}, {("Monday", "09:30-10:25")})
    assert len(slots) == 29
    assert all(slot.day != "Saturday" for slot in slots)
    assert all(slot.time_slot not in {"11:20-12:20", "14:10-14:30"} for slot in slots)


def test_consecutive_run_stops_at_breaks():
    assert consecutive_run_length({"09:30-10:25": "s1"}, "10:25-11:20", "s1") == 2
    assert consecutive_run_length({"10:25-11:20": "s1"}, "12:20-13:15", "s1") == 1
    assert consecutive_run_length({"09:30-10:25": "s2"}, "10:25-11:20", "s1") == 1


def test_full_generation_fills_capacity(db_session, division, two_subjects):
    structures, networks = two_subjects

    result = auto_generate_timetable(db_session, division, "full", "user-1")

    assert result.success
    assert result.generated == 8
    assert result.skipped == 28
    assert result.errors == []
    entries = find_entries(db_session, ctx=division)
    assert Counter(entry.subject_id for entry in entries) == {structures.id: 4, networks.id: 4}
    assert all(entry.created_by == "user-1" for entry in entries)
    assert sorted(result.summary.subjects_fully_allocated) == ["Computer Networks", "Data Structures"]
    assert result.summary.teachers_reached_full_load == ["Prof Rao"]


def test_generation_respects_same_day_cap(db_session, division, two_subjects):
    auto_generate_timetable(db_session, division, "full", "user-1")

    per_day = Counter((entry.day, entry.subject_id) for entry in find_entries(db_session, ctx=division))
    assert max(per_day.values()) <= 2


def test_full_generation_is_deterministic(db_session, division, two_subjects):
    auto_generate_timetable(db_session, division, "full", "user-1")
    first = triples(db_session, division)

    auto_generate_timetable(db_session, division, "full", "user-2")
    assert triples(db_session, division) == first


def test_fill_twice_places_nothing_the_second_time(db_session, division, two_subjects, add_lecture):
    structures, _ = two_subjects
    manual = add_lecture(division, "Monday", "09:30-10:25", structures)

    first = auto_generate_timetable(db_session, division, "fill", "user-1")
    assert first.generated == 7

    second = auto_generate_timetable(db_session, division, "fill", "user-1")
    assert second.generated == 0
    assert second.skipped == 36 - 8
    assert manual.id in {entry.id for entry in find_entries(db_session, ctx=division)}


def test_holidays_are_never_scheduled(db_session, division, two_subjects):
    set_holiday(db_session, division, "Saturday")

    result = auto_generate_timetable(db_session, division, "full", "user-1")

    assert result.generated + result.skipped == 30
    assert all(entry.day != "Saturday" for entry in find_entries(db_session, ctx=division))


def test_subject_without_teacher_is_reported_unassigned(db_session, division, two_subjects, make_subject):
    make_subject(None, name="Ethics", required_periods=2)

    result = auto_generate_timetable(db_session, division, "full", "user-1")

    assert result.summary.unassigned_subjects == ["Ethics"]


def test_no_eligible_subjects_raises(db_session, division, make_subject):
    make_subject(None, name="Ethics")

    with pytest.raises(SchedulerError) as exc:
        auto_generate_timetable(db_session, division, "full", "user-1")

    assert exc.value.status_code == 400
    assert exc.value.message == "No subjects with assigned teachers found"


def test_failed_commit_is_a_warning_and_next_subject_is_tried(db_session, division, two_subjects, monkeypatch):
    real_create_entry = auto_generator.create_entry
    calls = {"count": 0}

    def flaky_create_entry(db, **kwargs):
        calls["count"] += 1
        if calls["count"] == 1:
            raise IntegrityError("INSERT INTO lecture_entries", {}, Exception("UNIQUE constraint failed"))
        return real_create_entry(db, **kwargs)

    monkeypatch.setattr(auto_generator, "create_entry", flaky_create_entry)

    result = auto_generate_timetable(db_session, division, "full", "user-1")

    assert len(result.warnings) == 1
    assert result.warnings[0].startswith("Failed to allocate Data Structures at ")
    assert "UNIQUE constraint failed" in result.warnings[0]
    assert result.generated == 8
    assert result.skipped == 28
