# /classroom-backend/tests/test_classes_router.py

import pytest
from fastapi.testclient import TestClient

from app.db.database import get_db
from app.main import app

TEACHER = {"X-User-Id": "teacher_1"}
STUDENT = {"X-User-Id": "stu_A"}


@pytest.fixture
def client(session):
    """A TestClient whose requests all run against the test session."""
    def _override_get_db():
        yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def class_with_student(client):
    """A class with one attendance column and stu_A approved into it."""
    created = client.post("/api/classes", json={"name": "Geography"}, headers=TEACHER).json()
    column = client.post(f"/api/classes/{created['id']}/columns", json={"name": "Day 1", "kind": "attendance"}, headers=TEACHER).json()
    client.post("/api/classes/join", json={"code": created["code"].lower(), "rollNumber": "R-1"}, headers=STUDENT)
    client.put(f"/api/classes/{created['id']}/approve", json={"studentId": "stu_A"}, headers=TEACHER)
    return created["id"], column["column"]["id"]


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200


def test_requests_without_identity_are_rejected(client):
    response = client.get("/api/classes")
    assert response.status_code == 401


def test_full_join_and_grading_flow(client, class_with_student):
    class_id, column_id = class_with_student

    matrix = client.get(f"/api/classes/{class_id}/matrix", headers=TEACHER).json()
    assert [(r["student_id"], r["value"]) for r in matrix["records"]] == [("stu_A", "Absent")]

    response = client.put(f"/api/classes/{class_id}/cells", json={"studentId": "stu_A", "columnId": column_id, "value": "Present"}, headers=TEACHER)
    assert response.status_code == 200
    assert response.json()["value"] == "Present"

    notifications = client.get("/api/notifications", headers=STUDENT).json()
    assert notifications[0]["type"] == "attendance"
    assert notifications[0]["status"] == "Present"

    read = client.put(f"/api/notifications/{notifications[0]['id']}/read", headers=STUDENT)
    assert read.status_code == 200 and read.json()["read"] is True


def test_marks_column_backfills_and_keeps_numbers(client, class_with_student):
    class_id, _ = class_with_student

    response = client.post(f"/api/classes/{class_id}/columns", json={"name": "Quiz", "kind": "marks", "visibility": "private"}, headers=TEACHER)
    assert response.status_code == 201
    body = response.json()
    assert [(r["student_id"], r["value"]) for r in body["records"]] == [("stu_A", 0)]

    updated = client.put(f"/api/classes/{class_id}/cells", json={"studentId": "stu_A", "columnId": body["column"]["id"], "value": 7.5}, headers=TEACHER)
    assert updated.json()["value"] == 7.5


def test_boolean_is_not_accepted_as_a_mark(client, class_with_student):
    class_id, _ = class_with_student
    quiz = client.post(f"/api/classes/{class_id}/columns", json={"name": "Quiz", "kind": "marks"}, headers=TEACHER).json()["column"]

    response = client.put(f"/api/classes/{class_id}/cells", json={"studentId": "stu_A", "columnId": quiz["id"], "value": True}, headers=TEACHER)

    assert response.status_code == 422
    matrix = client.get(f"/api/classes/{class_id}/matrix", headers=TEACHER).json()
    assert [r["value"] for r in matrix["records"] if r["column_id"] == quiz["id"]] == [0]


def test_business_errors_map_to_http_statuses(client, class_with_student):
    class_id, column_id = class_with_student
    code = client.get(f"/api/classes/{class_id}", headers=TEACHER).json()["code"]

    # Already enrolled.
    assert client.post("/api/classes/join", json={"code": code}, headers=STUDENT).status_code == 400
    # No such class.
    assert client.post("/api/classes/join", json={"code": "ZZZZZ9"}, headers=STUDENT).status_code == 404
    # Not the owning teacher.
    assert client.post(f"/api/classes/{class_id}/columns", json={"name": "X"}, headers=STUDENT).status_code == 401
    # No pending request.
    assert client.put(f"/api/classes/{class_id}/approve", json={"studentId": "stu_Z"}, headers=TEACHER).status_code == 404
    # Value does not fit the column kind.
    bad_value = client.put(f"/api/classes/{class_id}/cells", json={"studentId": "stu_A", "columnId": column_id, "value": 12}, headers=TEACHER)
    assert bad_value.status_code == 422


def test_idempotent_cleanups_succeed_twice(client, class_with_student):
    class_id, column_id = class_with_student

    for _ in range(2):
        assert client.put(f"/api/classes/{class_id}/decline", json={"studentId": "stu_Q"}, headers=TEACHER).status_code == 200
        assert client.delete(f"/api/classes/{class_id}/columns/{column_id}", headers=TEACHER).status_code == 200
        assert client.put(f"/api/classes/{class_id}/remove", json={"studentId": "stu_A"}, headers=TEACHER).status_code == 200

    matrix = client.get(f"/api/classes/{class_id}/matrix", headers=TEACHER).json()
    assert matrix["records"] == [] and matrix["columns"] == [] and matrix["students"] == []


def test_export_returns_csv_attachment(client, class_with_student):
    class_id, _ = class_with_student

    response = client.get(f"/api/classes/{class_id}/export", headers=TEACHER)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "matrix_geography.csv" in response.headers["content-disposition"]
    assert response.text.splitlines()[0] == "Roll Number,Student ID,Day 1"
