# remindme/routers/notification.py
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from remindme.dependencies import get_notification_service
from remindme.schemas import NotificationOut
from remindme.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=List[NotificationOut])
def get_posted_notifications(notifications: NotificationService = Depends(get_notification_service)):
    """Get notifications that are posted and not yet dismissed"""
    return notifications.list_posted()


@router.delete("/{notification_id}")
async def cancel_notification(
    notification_id: int,
    notifications: NotificationService = Depends(get_notification_service)
):
    """Dismiss a posted notification"""
    notification = notifications.get_notification(notification_id)
    if not notification:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found"
        )

    await notifications.cancel(notification_id)
    return {"message": "Notification cancelled successfully"}


@router.delete("/")
async def cancel_all_notifications(notifications: NotificationService = Depends(get_notification_service)):
    """Dismiss every posted notification"""
    count = await notifications.cancel_all()
    return {"message": "All notifications cancelled successfully", "dismissed": count}
