# /classroom-backend/app/models/class_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from enum import Enum
from typing import List

from .column_model import MatrixColumn
from .roster_model import Membership, PendingJoinRequest

# --- Enumerations ---
class Weekday(str, Enum):
    MON = "Mon"; TUE = "Tue"; WED = "Wed"; THU = "Thu"
    FRI = "Fri"; SAT = "Sat"; SUN = "Sun"

# --- Model Definitions ---

class ScheduleSlot(BaseModel):
    day: Weekday
    startTime: str = Field(..., description="Start of the slot, e.g. '09:00'.")
    endTime: str = Field(..., description="End of the slot, e.g. '10:30'.")

class ClassCreate(BaseModel):
    name: str = Field(..., min_length=1, description="The display name of the class.")
    schedule: List[ScheduleSlot] = Field(default_factory=list)

class Class(BaseModel):
    """
    The representation of a Class resource as returned by the API. The join
    code is assigned by the server and never changes.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    code: str
    teacher_id: str
    is_archived: bool = False
    schedule: List[ScheduleSlot] = Field(default_factory=list)
    created_at: datetime

class ClassSummary(BaseModel):
    id: str
    name: str
    code: str
    is_archived: bool
    role: str = Field(..., description="'teacher' for owned classes, 'student' for enrolled ones.")
    studentCount: int

class ClassDetails(Class):
    columns: List[MatrixColumn]
    students: List[Membership]
    # Only populated for the owning teacher.
    join_requests: List[PendingJoinRequest] = Field(default_factory=list)
