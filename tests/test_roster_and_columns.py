# /classroom-backend/tests/test_roster_and_columns.py

"""
Unit tests for the Roster and Column managers. They work on in-memory Class
aggregates, so no database is involved.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.db.models.class_models import Class, MatrixColumn
from app.services.class_helpers import columns, roster
from app.services.exceptions import AlreadyEnrolledError, RequestAlreadyPendingError, RequestNotFoundError


@pytest.fixture
def db_class():
    return Class(id="cls_test", name="Chemistry", code="ABC123", teacher_id="teacher_1")


# --- Roster Manager ---

def test_request_then_approve_moves_student_into_roster(db_class):
    roster.request_join(db_class, "stu_A", "R-01")
    membership = roster.approve(db_class, "stu_A")

    assert membership.student_id == "stu_A"
    assert membership.roll_number == "R-01"
    assert [m.student_id for m in db_class.students] == ["stu_A"]
    assert db_class.join_requests == []


def test_request_join_rejects_duplicates_and_members(db_class):
    roster.request_join(db_class, "stu_A")
    with pytest.raises(RequestAlreadyPendingError):
        roster.request_join(db_class, "stu_A")

    roster.approve(db_class, "stu_A")
    with pytest.raises(AlreadyEnrolledError):
        roster.request_join(db_class, "stu_A")


def test_approve_without_request_fails(db_class):
    with pytest.raises(RequestNotFoundError):
        roster.approve(db_class, "stu_ghost")


def test_decline_is_idempotent(db_class):
    roster.request_join(db_class, "stu_A")

    assert roster.decline(db_class, "stu_A") is True
    assert roster.decline(db_class, "stu_A") is False
    assert db_class.join_requests == []


def test_remove_reports_whether_a_membership_existed(db_class):
    roster.enroll_direct(db_class, "stu_A")

    assert roster.remove(db_class, "stu_A") is True
    assert roster.remove(db_class, "stu_A") is False


def test_enroll_direct_rejects_members_and_settles_pending_request(db_class):
    roster.request_join(db_class, "stu_B", "R-07")
    membership = roster.enroll_direct(db_class, "stu_B")

    assert membership.roll_number == "R-07"
    assert db_class.join_requests == []
    with pytest.raises(AlreadyEnrolledError):
        roster.enroll_direct(db_class, "stu_B")


def test_left_student_can_request_again(db_class):
    roster.request_join(db_class, "stu_A")
    roster.approve(db_class, "stu_A")
    roster.remove(db_class, "stu_A")

    join_request = roster.request_join(db_class, "stu_A")
    assert join_request.student_id == "stu_A"


# --- Column Manager ---

def test_add_column_assigns_identity_and_timestamp(db_class):
    column = columns.add_column(db_class, "Week 1", "attendance", "public")

    assert column.id.startswith("col_")
    assert column.created_at is not None
    assert columns.find_column(db_class, column.id) is column


def test_delete_column_is_idempotent(db_class):
    column = columns.add_column(db_class, "Quiz", "marks", "private")

    assert columns.delete_column(db_class, column.id) is True
    assert columns.delete_column(db_class, column.id) is False
    assert db_class.columns == []


def test_columns_sort_by_kind_rank_then_creation_time():
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def col(cid, kind, minutes):
        return MatrixColumn(id=cid, name=cid, kind=kind, visibility="public", created_at=base + timedelta(minutes=minutes))

    unordered = [
        col("custom", "grade-letter", 0),
        col("remark", "remarks", 1),
        col("quiz2", "marks", 5),
        col("day2", "attendance", 9),
        col("quiz1", "marks", 2),
        col("day1", "attendance", 8),
    ]
    ordered = [c.id for c in columns.sorted_columns(unordered)]
    assert ordered == ["day1", "day2", "quiz1", "quiz2", "remark", "custom"]


def test_sort_treats_naive_timestamps_as_utc():
    aware = MatrixColumn(id="a", name="a", kind="marks", visibility="public",
                         created_at=datetime(2026, 1, 1, 10, 0, tzinfo=timezone.utc))
    naive = MatrixColumn(id="b", name="b", kind="marks", visibility="public",
                         created_at=datetime(2026, 1, 1, 9, 0))
    assert [c.id for c in columns.sorted_columns([aware, naive])] == ["b", "a"]
