"""
Notification Router

Notification center, push subscriptions and push dispatch.
"""
from fastapi import APIRouter, Depends, HTTPException

from resuelve.auth import AuthUser, require_user, verify_service_key
from resuelve.errors import PushDispatchError
from resuelve.logging import get_logger
from resuelve.services.notifications import NotificationService

from .deps import get_notification_service
from .models import (
    CreateNotificationRequest,
    PushSubscriptionRequest,
    PushUnsubscribeRequest,
    SendPushRequest,
)

logger = get_logger(__name__)

router = APIRouter(tags=["notifications"])


@router.get("/notifications")
async def list_notifications(
    user: AuthUser = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    """Latest 20 notifications with unread count."""
    return await notifications.list_for_user(user.id)


@router.post("/notifications/read-all")
async def mark_all_read(
    user: AuthUser = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    await notifications.mark_all_read(user.id)
    return {"success": True}


@router.post("/notifications/{notification_id}/read")
async def mark_read(
    notification_id: str,
    user: AuthUser = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    await notifications.mark_read(user.id, notification_id)
    return {"success": True}


@router.post("/notifications", status_code=201, dependencies=[Depends(verify_service_key)])
async def create_notification(
    request: CreateNotificationRequest,
    notifications: NotificationService = Depends(get_notification_service),
):
    """Back-office notification for a user (KYC result, store review), streamed live."""
    return await notifications.notify(
        user_id=request.user_id,
        title=request.title,
        message=request.message,
        type=request.type,
        link=request.link,
    )


# ==================== WEB PUSH ====================

@router.post("/push/subscriptions")
async def subscribe(
    request: PushSubscriptionRequest,
    user: AuthUser = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    await notifications.subscribe(user.id, request.endpoint, request.p256dh, request.auth)
    return {"success": True}


@router.delete("/push/subscriptions")
async def unsubscribe(
    request: PushUnsubscribeRequest,
    user: AuthUser = Depends(require_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    await notifications.unsubscribe(user.id, request.endpoint)
    return {"success": True}


@router.post("/send-push", dependencies=[Depends(verify_service_key)])
async def send_push(
    request: SendPushRequest,
    notifications: NotificationService = Depends(get_notification_service),
):
    try:
        return await notifications.send_push(
            title=request.title,
            message=request.message,
            user_id=request.user_id,
            email=request.email,
            url=request.url,
        )
    except PushDispatchError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
