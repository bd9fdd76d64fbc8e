# /classroom-backend/app/db/models/notification_models.py

from sqlalchemy import Column, String, Boolean, DateTime

from ..base_class import Base
from .class_models import utcnow


class Notification(Base):
    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    message = Column(String, nullable=False)
    type = Column(String, nullable=False, default="info")  # 'attendance', 'marks' or 'info'
    # Structured attendance status so consumers never parse it out of `message`.
    status = Column(String, nullable=True)
    link = Column(String, nullable=True)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
