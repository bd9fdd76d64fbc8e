# /classroom-backend/tests/test_record_repository.py

import threading
from unittest.mock import MagicMock

import pytest

from app.db.models.record_models import ClassRecord
from app.services.database_helpers.record_repository_sql import RecordRepositorySQL


def test_create_default_uses_kind_default_and_never_overwrites(db_service):
    assert db_service.create_default_record("cls_1", "stu_A", "col_att", "attendance") is True
    db_service.upsert_record("cls_1", "stu_A", "col_att", "Present")

    # A second backfill of the same key is a silent no-op.
    assert db_service.create_default_record("cls_1", "stu_A", "col_att", "attendance") is False

    records = db_service.find_records("cls_1")
    assert len(records) == 1
    assert records[0].value == "Present"


def test_create_default_for_each_kind(db_service):
    db_service.create_default_record("cls_1", "stu_A", "col_att", "attendance")
    db_service.create_default_record("cls_1", "stu_A", "col_mark", "marks")
    db_service.create_default_record("cls_1", "stu_A", "col_rem", "remarks")
    db_service.create_default_record("cls_1", "stu_A", "col_other", "grade-letter")

    values = {r.column_id: r.value for r in db_service.find_records("cls_1")}
    assert values == {"col_att": "Absent", "col_mark": 0, "col_rem": "-", "col_other": None}


def test_upsert_creates_then_overwrites(db_service):
    first = db_service.upsert_record("cls_1", "stu_A", "col_mark", 7)
    second = db_service.upsert_record("cls_1", "stu_A", "col_mark", 9.5)

    assert first.id == second.id
    assert second.value == 9.5
    assert len(db_service.find_records("cls_1")) == 1


def test_cascade_deletes_are_scoped_to_one_class(db_service):
    for class_id in ("cls_1", "cls_2"):
        for student_id in ("stu_A", "stu_B"):
            for column_id in ("col_x", "col_y"):
                db_service.create_default_record(class_id, student_id, column_id, "marks")

    assert db_service.delete_records_by_student("cls_1", "stu_A") == 2
    assert db_service.delete_records_by_column("cls_1", "col_x") == 1

    remaining = {(r.student_id, r.column_id) for r in db_service.find_records("cls_1")}
    assert remaining == {("stu_B", "col_y")}
    assert len(db_service.find_records("cls_2")) == 4


def test_find_narrows_by_student_and_columns(db_service):
    for student_id in ("stu_A", "stu_B"):
        for column_id in ("col_x", "col_y"):
            db_service.create_default_record("cls_1", student_id, column_id, "remarks")

    narrowed = db_service.find_records("cls_1", student_id="stu_B", column_ids=["col_y"])
    assert [(r.student_id, r.column_id) for r in narrowed] == [("stu_B", "col_y")]


def test_concurrent_create_default_converges_to_one_record(file_session_factory):
    """
    GIVEN: two independent sessions racing to backfill the same key.
    WHEN:  both call create_default at once.
    THEN:  exactly one insert wins, the other is a no-op, and no error surfaces.
    """
    barrier = threading.Barrier(2)
    outcomes, errors = [], []

    def backfill():
        session = file_session_factory()
        try:
            repo = RecordRepositorySQL(session)
            barrier.wait()
            outcomes.append(repo.create_default("cls_1", "stu_A", "col_att", "attendance"))
        except Exception as e:  # surfaced through `errors`
            errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=backfill) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert sorted(outcomes) == [False, True]

    session = file_session_factory()
    try:
        rows = session.query(ClassRecord).filter_by(class_id="cls_1").all()
        assert len(rows) == 1
        assert rows[0].value == "Absent"
    finally:
        session.close()


def test_unsupported_dialect_is_reported_as_a_configuration_error():
    session = MagicMock()
    session.get_bind.return_value.dialect.name = "mysql"

    with pytest.raises(RuntimeError, match="mysql"):
        RecordRepositorySQL(session).create_default("cls_1", "stu_A", "col_att", "attendance")
    session.execute.assert_not_called()
