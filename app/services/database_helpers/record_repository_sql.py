# /classroom-backend/app/services/database_helpers/record_repository_sql.py

"""
This module is the Record Store: the durable mapping from
(class_id, student_id, column_id) to a cell value.

The composite unique constraint on `class_records` does the heavy lifting.
Backfill uses a conditional insert that leaves an existing row untouched, and
cell edits use an insert-or-overwrite, so neither path ever needs to read
before it writes.
"""

import uuid
from typing import Iterable, List, Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.db.models.class_models import utcnow
from app.db.models.record_models import ClassRecord
from app.models.record_model import CellValue, default_for

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

_RECORD_KEY = ["class_id", "student_id", "column_id"]


def _new_record_id() -> str:
    return f"rec_{uuid.uuid4().hex[:16]}"


class RecordRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        try:
            insert = _INSERT_BY_DIALECT[dialect]
        except KeyError:
            raise RuntimeError(
                f"Unsupported database dialect '{dialect}' for the record store; "
                f"expected one of {sorted(_INSERT_BY_DIALECT)}."
            ) from None
        return insert(ClassRecord)

    def _values(self, class_id: str, student_id: str, column_id: str, value: CellValue) -> dict:
        now = utcnow()
        return {
            "id": _new_record_id(),
            "class_id": class_id,
            "student_id": student_id,
            "column_id": column_id,
            "value": value,
            "created_at": now,
            "updated_at": now,
        }

    def get_record(self, class_id: str, student_id: str, column_id: str) -> Optional[ClassRecord]:
        return (
            self.db.query(ClassRecord)
            .filter_by(class_id=class_id, student_id=student_id, column_id=column_id)
            .populate_existing()
            .first()
        )

    def upsert(self, class_id: str, student_id: str, column_id: str, value: CellValue) -> ClassRecord:
        """
        Creates the record if it is absent, otherwise overwrites its value.
        The stored value always reflects the latest call.
        """
        stmt = self._insert().values(**self._values(class_id, student_id, column_id, value))
        stmt = stmt.on_conflict_do_update(
            index_elements=_RECORD_KEY,
            set_={"value": stmt.excluded.value, "updated_at": stmt.excluded.updated_at},
        )
        self.db.execute(stmt)
        self.db.commit()
        return self.get_record(class_id, student_id, column_id)

    def create_default(self, class_id: str, student_id: str, column_id: str, kind: str, commit: bool = True) -> bool:
        """
        Inserts the kind-appropriate default value unless a record already
        exists for the key. Returns True if a row was created; an existing
        record (including one written by a concurrent backfill) is left as is.

        With `commit=False` the insert joins the caller's open transaction.
        """
        stmt = (
            self._insert()
            .values(**self._values(class_id, student_id, column_id, default_for(kind)))
            .on_conflict_do_nothing(index_elements=_RECORD_KEY)
        )
        result = self.db.execute(stmt)
        if commit:
            self.db.commit()
        return result.rowcount == 1

    def delete_by_class_and_student(self, class_id: str, student_id: str, commit: bool = True) -> int:
        deleted = (
            self.db.query(ClassRecord)
            .filter(ClassRecord.class_id == class_id, ClassRecord.student_id == student_id)
            .delete(synchronize_session=False)
        )
        if commit:
            self.db.commit()
        return deleted

    def delete_by_class_and_column(self, class_id: str, column_id: str, commit: bool = True) -> int:
        deleted = (
            self.db.query(ClassRecord)
            .filter(ClassRecord.class_id == class_id, ClassRecord.column_id == column_id)
            .delete(synchronize_session=False)
        )
        if commit:
            self.db.commit()
        return deleted

    def find(
        self,
        class_id: str,
        student_id: Optional[str] = None,
        column_ids: Optional[Iterable[str]] = None,
    ) -> List[ClassRecord]:
        """All records of a class, optionally narrowed to one student and/or a set of columns."""
        query = self.db.query(ClassRecord).filter(ClassRecord.class_id == class_id)
        if student_id is not None:
            query = query.filter(ClassRecord.student_id == student_id)
        if column_ids is not None:
            query = query.filter(ClassRecord.column_id.in_(list(column_ids)))
        return query.order_by(ClassRecord.student_id, ClassRecord.column_id).populate_existing().all()
