# /classroom-backend/app/services/database_helpers/notification_repository_sql.py

from typing import List, Dict, Optional
from sqlalchemy.orm import Session
from app.db.models.notification_models import Notification

class NotificationRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def add_notification(self, record: Dict) -> Notification:
        new_notification = Notification(**record)
        self.db.add(new_notification)
        self.db.commit()
        self.db.refresh(new_notification)
        return new_notification

    def get_notification_by_id(self, notification_id: str) -> Optional[Notification]:
        return self.db.query(Notification).filter(Notification.id == notification_id).first()

    def get_notifications_by_user_id(self, user_id: str) -> List[Notification]:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .all()
        )

    def mark_as_read(self, notification: Notification) -> Notification:
        notification.read = True
        self.db.commit()
        self.db.refresh(notification)
        return notification
