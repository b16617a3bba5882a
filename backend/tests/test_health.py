def test_health_endpoints(client):
    assert client.get("/api/health").json() == {"status": "ok"}

    live = client.get("/api/health/live")
    assert live.status_code == 200
    assert live.json()["status"] == "ok"

    ready = client.get("/api/health/ready")
    assert ready.status_code == 200
    payload = ready.json()
    assert payload["database"]["ok"] is True
    assert payload["database"]["missing_tables"] == []


def test_request_size_limit(client, auth_headers):
    oversized = {"teacher_code": "T1", "faculty_name": "x" * 2_000_000, "department": "CE", "teaching_hours": 4}

    response = client.post("/api/teachers/", json=oversized, headers=auth_headers)

    assert response.status_code == 413
