import pytest

from app.core.exceptions import PlacementRejectedError
from app.schemas.timetable import ValidationResult
from app.services.conflict_service import ConflictService
from app.services.entry_store import count_entries
from app.services.timetable_entries import add_entry, list_entries


def test_list_by_classroom_keeps_teacher_and_subject_filters(
    db_session, division, make_teacher, make_subject, make_classroom, add_lecture
):
    rao = make_teacher(name="Prof Rao")
    iyer = make_teacher(name="Prof Iyer")
    structures = make_subject(rao, name="Data Structures")
    networks = make_subject(iyer, name="Computer Networks")
    room = make_classroom(division)
    add_lecture(division, "Monday", "09:30-10:25", structures, classroom=room)
    add_lecture(division, "Monday", "10:25-11:20", networks, classroom=room)

    assert len(list_entries(db_session, classroom_id=room.id)) == 2

    by_teacher = list_entries(db_session, classroom_id=room.id, teacher_id=rao.id)
    assert [entry.subject_id for entry in by_teacher] == [structures.id]

    by_subject = list_entries(db_session, classroom_id=room.id, subject_id=networks.id)
    assert [entry.teacher_id for entry in by_subject] == [iyer.id]


def test_slot_taken_after_validation_is_rejected(db_session, division, make_teacher, make_subject, add_lecture, monkeypatch):
    structures = make_subject(make_teacher(name="Prof Rao"), name="Data Structures")
    networks = make_subject(make_teacher(name="Prof Iyer"), name="Computer Networks")
    add_lecture(division, "Monday", "09:30-10:25", structures)

    # Validation passes as if the competing insert had not landed yet.
    monkeypatch.setattr(
        ConflictService,
        "validate_candidate_placement",
        lambda self, *args, **kwargs: ValidationResult.from_issues([]),
    )

    with pytest.raises(PlacementRejectedError) as exc:
        add_entry(
            db_session,
            division,
            day="Monday",
            time_slot="09:30-10:25",
            subject_id=networks.id,
            teacher_id=networks.teacher_id,
            created_by="user-1",
        )

    assert exc.value.status_code == 409
    assert exc.value.errors == ["Slot Monday 09:30-10:25 was taken by a concurrent placement"]
    assert count_entries(db_session, ctx=division) == 1
