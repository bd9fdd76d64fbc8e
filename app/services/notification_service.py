# /classroom-backend/app/services/notification_service.py

"""
Notification sink and inbox.

`notify` is fire-and-forget for its callers: the operation that triggered it
has already been committed, so a failure to store the notification is rolled
back, logged and swallowed rather than reported.
"""

import logging
import uuid
from typing import List, Optional

from .database_service import DatabaseService
from .exceptions import NotAuthorizedError, NotificationNotFoundError
from ..models.notification_model import Notification, NotificationType

logger = logging.getLogger(__name__)


def class_link(class_id: str) -> str:
    return f"/class/{class_id}"


def notify(
    db: DatabaseService,
    user_id: str,
    message: str,
    type_tag: NotificationType = NotificationType.INFO,
    link: Optional[str] = None,
    status: Optional[str] = None,
) -> bool:
    """Stores one notification for `user_id`. Returns False if delivery failed."""
    record = {
        "id": f"ntf_{uuid.uuid4().hex[:16]}",
        "user_id": user_id,
        "message": message,
        "type": NotificationType(type_tag).value,
        "status": status,
        "link": link,
    }
    try:
        db.add_notification(record)
    except Exception:
        db.rollback()
        logger.exception("Failed to deliver notification to user %s: %r", user_id, message)
        return False
    return True


def list_notifications(db: DatabaseService, user_id: str) -> List[Notification]:
    """The user's notifications, newest first."""
    return [Notification.model_validate(n) for n in db.get_notifications_by_user_id(user_id)]


def mark_as_read(db: DatabaseService, notification_id: str, user_id: str) -> Notification:
    notification = db.get_notification_by_id(notification_id)
    if notification is None:
        raise NotificationNotFoundError(notification_id)
    if notification.user_id != user_id:
        raise NotAuthorizedError(f"Notification {notification_id} does not belong to user {user_id}.")
    return Notification.model_validate(db.mark_notification_as_read(notification))
