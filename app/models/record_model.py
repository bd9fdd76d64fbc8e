# /classroom-backend/app/models/record_model.py

"""
Value typing for matrix cells.

A cell value is a tagged variant whose tag is the kind of the owning column:
an attendance status, a numeric mark, or free text. `default_for` and
`coerce_cell_value` are the only places that know the mapping.
"""

import math
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field, ConfigDict, StrictFloat, StrictInt, StrictStr

from .column_model import ColumnKind, MatrixColumn
from .roster_model import Membership

# --- Enumerations ---
class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    EXCUSED = "Excused"

# What a cell may hold once decoded from storage.
CellValue = Optional[Union[int, float, str]]
# What a client may send; strict so that `true` is not read as 1.
CellInput = Optional[Union[StrictInt, StrictFloat, StrictStr]]

_DEFAULT_VALUES = {
    ColumnKind.ATTENDANCE: AttendanceStatus.ABSENT.value,
    ColumnKind.MARKS: 0,
    ColumnKind.REMARKS: "-",
}

# Single-letter shorthands accepted from spreadsheet-style input.
_ATTENDANCE_SHORTHANDS = {status.value[0]: status for status in AttendanceStatus}


def default_for(kind: str) -> CellValue:
    """Returns the backfill value for a column kind; `None` for unknown kinds."""
    try:
        return _DEFAULT_VALUES[ColumnKind(kind)]
    except ValueError:
        return None


def _coerce_attendance(value) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Attendance must be one of {[s.value for s in AttendanceStatus]}, got {value!r}.")
    candidate = value.strip()
    for status in AttendanceStatus:
        if candidate.lower() == status.value.lower():
            return status.value
    shorthand = _ATTENDANCE_SHORTHANDS.get(candidate.upper())
    if shorthand is not None:
        return shorthand.value
    raise ValueError(f"Attendance must be one of {[s.value for s in AttendanceStatus]}, got {value!r}.")


def _coerce_marks(value) -> Union[int, float]:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Marks must be a number, got {value!r}.")
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                raise ValueError(f"Marks must be a number, got {text!r}.") from None
    if not isinstance(value, (int, float)):
        raise ValueError(f"Marks must be a number, got {value!r}.")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("Marks must be a finite number.")
    return value


def _coerce_remarks(value) -> str:
    if value is None:
        raise ValueError("Remarks cannot be empty.")
    if isinstance(value, bool):
        raise ValueError(f"Remarks must be text, got {value!r}.")
    return value if isinstance(value, str) else str(value)


def coerce_cell_value(kind: str, value) -> CellValue:
    """
    Validates `value` against the column kind and returns its canonical form.
    Raises ValueError when the value does not fit the kind. Columns of an
    unknown kind accept any value unchanged.
    """
    try:
        column_kind = ColumnKind(kind)
    except ValueError:
        return value
    if column_kind is ColumnKind.ATTENDANCE:
        return _coerce_attendance(value)
    if column_kind is ColumnKind.MARKS:
        return _coerce_marks(value)
    return _coerce_remarks(value)


# --- API Contract Models ---

class CellUpdate(BaseModel):
    studentId: str = Field(..., description="The student whose cell is being written.")
    columnId: str = Field(..., description="The column being written.")
    value: CellInput = Field(..., description="Attendance status, numeric mark or remark text.")

class ClassRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    class_id: str
    student_id: str
    column_id: str
    value: CellValue = None
    updated_at: datetime

class MatrixView(BaseModel):
    """The student x column grid of one class, as seen by the requesting user."""
    class_id: str
    columns: List[MatrixColumn]
    students: List[Membership]
    records: List[ClassRecord]

class ColumnBackfill(BaseModel):
    """A newly added column together with the records backfilled for it."""
    column: MatrixColumn
    records: List[ClassRecord]

class RosterUpdate(BaseModel):
    """A newly enrolled student together with the records backfilled for them."""
    student: Membership
    records: List[ClassRecord]

class RepairSummary(BaseModel):
    class_id: str
    recordsCreated: int
