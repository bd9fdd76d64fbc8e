# /classroom-backend/app/models/notification_model.py

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from enum import Enum
from typing import Optional

class NotificationType(str, Enum):
    ATTENDANCE = "attendance"
    MARKS = "marks"
    INFO = "info"

class Notification(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    message: str
    type: NotificationType
    status: Optional[str] = None
    link: Optional[str] = None
    read: bool
    created_at: datetime
