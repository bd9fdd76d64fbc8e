# /classroom-backend/app/routers/notifications_router.py

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from ..core.deps import get_current_user_id
from ..models import notification_model
from ..services import notification_service
from ..services.database_service import DatabaseService, get_db_service
from ..services.exceptions import NotAuthorizedError, NotFoundError

router = APIRouter()

@router.get("", response_model=List[notification_model.Notification], summary="Get My Notifications")
def get_notifications(user_id: str = Depends(get_current_user_id), db: DatabaseService = Depends(get_db_service)):
    """
    Endpoint to retrieve the current user's notifications, newest first.
    """
    return notification_service.list_notifications(db=db, user_id=user_id)


@router.put("/{notification_id}/read", response_model=notification_model.Notification, summary="Mark a Notification as Read")
def mark_notification_as_read(notification_id: str, user_id: str = Depends(get_current_user_id), db: DatabaseService = Depends(get_db_service)):
    try:
        return notification_service.mark_as_read(db=db, notification_id=notification_id, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except NotAuthorizedError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
