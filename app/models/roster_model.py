# /classroom-backend/app/models/roster_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import datetime
from typing import Optional

# --- Request Payloads ---

class JoinClassRequest(BaseModel):
    """The payload a student sends to ask to join a class by its code."""
    code: str = Field(..., min_length=6, max_length=6, description="The 6-character class join code.")
    rollNumber: Optional[str] = Field(default=None, description="The student's roll number in this class.")

    @field_validator('code')
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()

class StudentAction(BaseModel):
    """Identifies the student an approve/decline/remove action applies to."""
    studentId: str = Field(..., min_length=1)

class DirectEnrollment(StudentAction):
    rollNumber: Optional[str] = Field(default=None)

# --- Response Models ---

class Membership(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    student_id: str
    roll_number: Optional[str] = None
    joined_at: datetime

class PendingJoinRequest(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    student_id: str
    roll_number: Optional[str] = None
    requested_at: datetime

class JoinRequestReceipt(BaseModel):
    class_id: str
    class_name: str
    student_id: str
    roll_number: Optional[str] = None
    status: str = "pending"

class ActionAck(BaseModel):
    message: str
