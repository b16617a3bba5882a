def teacher_payload(**overrides):
    payload = {
        "teacher_code": "T100",
        "faculty_name": "Prof Rao",
        "department": "Computer Engineering",
        "teaching_hours": 6,
    }
    payload.update(overrides)
    return payload


def test_teacher_crud(client, auth_headers):
    assert client.post("/api/teachers/", json=teacher_payload()).status_code in {401, 403}

    created = client.post("/api/teachers/", json=teacher_payload(), headers=auth_headers)
    assert created.status_code == 201
    teacher_id = created.json()["id"]

    duplicate = client.post("/api/teachers/", json=teacher_payload(), headers=auth_headers)
    assert duplicate.status_code == 409

    updated = client.put(f"/api/teachers/{teacher_id}", json={"teaching_hours": 8}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.json()["teaching_hours"] == 8

    assert client.put(
        f"/api/teachers/{teacher_id}", json={"teaching_hours": 0}, headers=auth_headers
    ).status_code == 422

    listed = client.get("/api/teachers/")
    assert [item["teacher_code"] for item in listed.json()] == ["T100"]

    assert client.delete(f"/api/teachers/{teacher_id}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/teachers/{teacher_id}").status_code == 404


def test_subject_requires_existing_teacher(client, auth_headers):
    response = client.post(
        "/api/subjects/",
        json={"subject_code": "CS201", "subject_name": "Data Structures", "required_periods": 4, "teacher_id": "ghost"},
        headers=auth_headers,
    )
    assert response.status_code == 404


def test_deleting_teacher_unassigns_subjects(client, auth_headers):
    teacher_id = client.post("/api/teachers/", json=teacher_payload(), headers=auth_headers).json()["id"]
    subject = client.post(
        "/api/subjects/",
        json={"subject_code": "CS201", "subject_name": "Data Structures", "required_periods": 4, "teacher_id": teacher_id},
        headers=auth_headers,
    ).json()

    assert client.delete(f"/api/teachers/{teacher_id}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/subjects/{subject['id']}").json()["teacher_id"] is None


def test_teacher_with_lectures_cannot_be_deleted(client, auth_headers):
    teacher_id = client.post("/api/teachers/", json=teacher_payload(), headers=auth_headers).json()["id"]
    subject = client.post(
        "/api/subjects/",
        json={"subject_code": "CS201", "subject_name": "Data Structures", "required_periods": 4, "teacher_id": teacher_id},
        headers=auth_headers,
    ).json()
    entry = client.post(
        "/api/timetable/entries",
        json={
            "program": "B.Tech CSE",
            "class_name": "SY",
            "semester": 3,
            "division": "A",
            "day": "Monday",
            "time_slot": "09:30-10:25",
            "subject_id": subject["id"],
            "teacher_id": teacher_id,
        },
        headers=auth_headers,
    )
    assert entry.status_code == 201

    assert client.delete(f"/api/teachers/{teacher_id}", headers=auth_headers).status_code == 409
    assert client.delete(f"/api/subjects/{subject['id']}", headers=auth_headers).status_code == 409


def test_classroom_is_unique_per_division(client, auth_headers):
    payload = {"program": "B.Tech CSE", "class_name": "SY", "semester": "Sem-3", "division": "A", "room_number": "A-204"}

    created = client.post("/api/classrooms/", json=payload, headers=auth_headers)
    assert created.status_code == 201
    assert created.json()["semester"] == 3

    assert client.post("/api/classrooms/", json=payload, headers=auth_headers).status_code == 409

    classroom_id = created.json()["id"]
    moved = client.put(f"/api/classrooms/{classroom_id}", json={"room_number": "B-101"}, headers=auth_headers)
    assert moved.json()["room_number"] == "B-101"
    assert client.delete(f"/api/classrooms/{classroom_id}", headers=auth_headers).status_code == 200


def test_updates_reject_null_for_required_fields(client, auth_headers):
    teacher_id = client.post("/api/teachers/", json=teacher_payload(), headers=auth_headers).json()["id"]
    subject = client.post(
        "/api/subjects/",
        json={"subject_code": "CS201", "subject_name": "Data Structures", "required_periods": 4, "teacher_id": teacher_id},
        headers=auth_headers,
    ).json()

    for field in ("teaching_hours", "faculty_name", "teacher_code", "department"):
        response = client.put(f"/api/teachers/{teacher_id}", json={field: None}, headers=auth_headers)
        assert response.status_code == 422, field

    for field in ("required_periods", "subject_code", "subject_name"):
        response = client.put(f"/api/subjects/{subject['id']}", json={field: None}, headers=auth_headers)
        assert response.status_code == 422, field

    cleared = client.put(f"/api/teachers/{teacher_id}", json={"teacher_number": None}, headers=auth_headers)
    assert cleared.status_code == 200

    unassigned = client.put(f"/api/subjects/{subject['id']}", json={"teacher_id": None}, headers=auth_headers)
    assert unassigned.status_code == 200
    assert unassigned.json()["teacher_id"] is None
    assert client.get(f"/api/teachers/{teacher_id}").json()["teaching_hours"] == 6
