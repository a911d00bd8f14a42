from fastapi import APIRouter, Depends, Request, status
from typing import List

from rentmzansi.api.dependencies import ServiceProvider
from rentmzansi.core.exceptions import NotificationNotFoundException
from rentmzansi.core.rate_limiting import RateLimits, limiter
from rentmzansi.schemas.common import Message
from rentmzansi.schemas.notification import Notification, NotificationCheckRequest, UnreadCount
from rentmzansi.services.notification_service import NotificationService

router = APIRouter()

get_notification_service = ServiceProvider(NotificationService)


@router.get("", response_model=List[Notification])
def get_notifications(
    service: NotificationService = Depends(get_notification_service)
):
    """
    Get the notification inbox, newest first
    """
    return service.get_notifications()


@router.get("/unread-count", response_model=UnreadCount)
def get_unread_count(
    service: NotificationService = Depends(get_notification_service)
):
    return UnreadCount(
        unread=service.get_unread_count(),
        total=len(service.get_notifications())
    )


@router.post("/check", response_model=List[Notification])
@limiter.limit(RateLimits.NOTIFICATION_CHECK)
def check_listings(
    request: Request,
    check: NotificationCheckRequest,
    service: NotificationService = Depends(get_notification_service)
):
    """
    Diff the current listing set against saved searches, favorites and area
    subscriptions, store the resulting notifications and return them

    **Checks:**
    - New listings matching a saved search (each listing notified once)
    - Price drops on favorited listings
    - New listings in areas the user subscribed to
    """
    return service.process_listings(check.listings, check.favorite_ids, check.user_id)


@router.post("/read-all", response_model=Message)
def mark_all_read(
    service: NotificationService = Depends(get_notification_service)
):
    changed = service.mark_all_read()
    return Message(message=f"Marked {changed} notifications as read")


@router.post("/{notification_id}/read", response_model=Message)
def mark_notification_read(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service)
):
    if not service.mark_notification_read(notification_id):
        raise NotificationNotFoundException(notification_id)
    return Message(message="Notification marked as read")


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service)
):
    if not service.delete_notification(notification_id):
        raise NotificationNotFoundException(notification_id)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_notifications(
    service: NotificationService = Depends(get_notification_service)
):
    """
    Clear all notifications
    """
    service.clear_notifications()
