# /classroom-backend/app/services/class_helpers/columns.py

"""
Column Manager: the ordered set of matrix columns of a class, plus the display
order viewers sort them by.
"""

import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from app.db.models.class_models import Class, MatrixColumn, utcnow
from ...models.column_model import ColumnKind

# attendance < marks < remarks < anything else
_KIND_RANK = {kind.value: rank for rank, kind in enumerate(ColumnKind)}
_UNKNOWN_KIND_RANK = len(_KIND_RANK)


def _as_aware(ts: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they were written as UTC.
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts


def column_sort_key(column: MatrixColumn) -> Tuple[int, datetime, str]:
    return (
        _KIND_RANK.get(column.kind, _UNKNOWN_KIND_RANK),
        _as_aware(column.created_at),
        column.id,
    )


def sorted_columns(columns: Iterable[MatrixColumn]) -> List[MatrixColumn]:
    return sorted(columns, key=column_sort_key)


def find_column(db_class: Class, column_id: str) -> Optional[MatrixColumn]:
    return next((c for c in db_class.columns if c.id == column_id), None)


def add_column(db_class: Class, name: str, kind: str, visibility: str) -> MatrixColumn:
    """
    Appends a column with a fresh identity and creation timestamp. The caller
    backfills records for the students currently enrolled.
    """
    column = MatrixColumn(
        id=f"col_{uuid.uuid4().hex[:12]}",
        name=name,
        kind=kind,
        visibility=visibility,
        created_at=utcnow(),
    )
    db_class.columns.append(column)
    return column


def delete_column(db_class: Class, column_id: str) -> bool:
    """Removes a column if present. Deleting an absent column is a no-op."""
    column = find_column(db_class, column_id)
    if column is None:
        return False
    db_class.columns.remove(column)
    return True
