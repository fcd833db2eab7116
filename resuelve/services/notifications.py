"""
Notification Service

In-app notifications (Supabase `notifications` table, streamed to the
buyer) and Web Push delivery to every browser subscription of a user.
"""
import asyncio
import json
import os
from typing import Optional

from pywebpush import WebPushException, webpush

from resuelve.errors import (
    ERROR_PUSH_MISSING_CONTENT,
    ERROR_PUSH_NO_SUBSCRIPTIONS,
    ERROR_PUSH_TARGET_REQUIRED,
    ERROR_PUSH_USER_NOT_FOUND,
    PushDispatchError,
)
from resuelve.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from resuelve.realtime import emit_notification_created
from resuelve.services.database import Database
from resuelve.services.models import PushSubscription

logger = get_logger(__name__)

VAPID_PRIVATE_KEY = os.environ.get("VAPID_PRIVATE_KEY", "")
VAPID_SUBJECT = os.environ.get("VAPID_SUBJECT", "mailto:soporte@resuelvemaestre.com")

# Push services answer these for subscriptions that no longer exist
GONE_STATUS_CODES = (404, 410)


class NotificationService:
    """Notification center and push dispatch."""

    def __init__(
        self,
        db: Database,
        vapid_private_key: Optional[str] = None,
        vapid_subject: Optional[str] = None,
    ):
        self.db = db
        self.vapid_private_key = vapid_private_key or VAPID_PRIVATE_KEY
        self.vapid_subject = vapid_subject or VAPID_SUBJECT

    # ==================== IN-APP ====================

    async def list_for_user(self, user_id: str) -> dict:
        notifications = await self.db.get_notifications(user_id)
        return {
            "notifications": [n.model_dump(mode="json") for n in notifications],
            "unread_count": sum(1 for n in notifications if not n.is_read),
        }

    async def notify(
        self,
        user_id: str,
        title: str,
        message: str,
        type: str = "info",
        link: Optional[str] = None,
    ) -> dict:
        """Store a notification and stream it to the user's open sessions."""
        notification = await self.db.create_notification(user_id, title, message, type, link)
        data = notification.model_dump(mode="json")
        await emit_notification_created(user_id, data)
        return data

    async def mark_read(self, user_id: str, notification_id: str) -> None:
        await self.db.mark_notification_read(user_id, notification_id)

    async def mark_all_read(self, user_id: str) -> None:
        await self.db.mark_all_notifications_read(user_id)

    # ==================== WEB PUSH ====================

    async def subscribe(self, user_id: str, endpoint: str, p256dh: str, auth: str) -> None:
        await self.db.save_push_subscription(user_id, endpoint, p256dh, auth)

    async def unsubscribe(self, user_id: str, endpoint: str) -> None:
        """Remove the caller's own subscription for this endpoint."""
        await self.db.delete_push_subscription_by_endpoint(user_id, endpoint)

    async def send_push(
        self,
        title: str,
        message: str,
        user_id: Optional[str] = None,
        email: Optional[str] = None,
        url: Optional[str] = None,
    ) -> dict:
        """
        Push a notification to every subscription of a user.

        The target is user_id, or the profile matching email.

        Raises:
            PushDispatchError: missing content (400), no target (400),
                unknown e-mail (404) or no subscriptions (404)
        """
        if not title or not message:
            raise PushDispatchError(400, ERROR_PUSH_MISSING_CONTENT)

        target_user_id = user_id
        if not target_user_id and email:
            target_user_id = await self.db.find_user_id_by_email(email)
            if not target_user_id:
                logger.info(f"Push target not found: {sanitize_string_for_logging(email)}")
                raise PushDispatchError(404, ERROR_PUSH_USER_NOT_FOUND)

        if not target_user_id:
            raise PushDispatchError(400, ERROR_PUSH_TARGET_REQUIRED)

        subscriptions = await self.db.get_push_subscriptions(target_user_id)
        if not subscriptions:
            raise PushDispatchError(404, ERROR_PUSH_NO_SUBSCRIPTIONS)

        payload = json.dumps({"title": title, "body": message, "url": url or "/"})
        results = await asyncio.gather(*[self._send_one(sub, payload) for sub in subscriptions])
        sent = sum(1 for r in results if r["success"])

        logger.info(
            f"Push to {sanitize_id_for_logging(target_user_id)}: {sent}/{len(subscriptions)} delivered"
        )
        return {
            "success": True,
            "sent": sent,
            "total": len(subscriptions),
            "results": list(results),
        }

    async def _send_one(self, subscription: PushSubscription, payload: str) -> dict:
        try:
            # pywebpush is synchronous (requests)
            await asyncio.to_thread(
                webpush,
                subscription_info=subscription.to_webpush_info(),
                data=payload,
                vapid_private_key=self.vapid_private_key,
                vapid_claims={"sub": self.vapid_subject},
            )
            return {"success": True, "id": subscription.id}
        except WebPushException as e:
            status_code = getattr(e.response, "status_code", None)
            logger.warning(f"Push to subscription {subscription.id} failed ({status_code}): {e}")
            if status_code in GONE_STATUS_CODES:
                await self.db.delete_push_subscription(subscription.id)
            return {"success": False, "id": subscription.id, "error": str(e)}
        except Exception as e:
            # Network or key errors for one subscription must not abort the batch
            logger.error(f"Push to subscription {subscription.id} errored: {e}", exc_info=True)
            return {"success": False, "id": subscription.id, "error": str(e)}
