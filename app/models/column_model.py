# /classroom-backend/app/models/column_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from enum import Enum

# --- Enumerations ---
class ColumnKind(str, Enum):
    ATTENDANCE = "attendance"
    MARKS = "marks"
    REMARKS = "remarks"

class ColumnVisibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"

# --- Model Definitions ---

class ColumnCreate(BaseModel):
    """The payload a teacher sends to add a column to a class matrix."""
    name: str = Field(..., min_length=1, description="The header shown above the column.")
    kind: ColumnKind = Field(default=ColumnKind.ATTENDANCE)
    visibility: ColumnVisibility = Field(
        default=ColumnVisibility.PUBLIC,
        description="Public columns are visible to students and trigger notifications on update."
    )

class MatrixColumn(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    class_id: str
    name: str
    # Plain strings so that rows written with an unknown kind still serialize.
    kind: str
    visibility: str
    created_at: datetime
