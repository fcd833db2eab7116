"""Notification Repository - in-app notifications and push subscriptions."""
from typing import List, Optional

from resuelve.services.models import Notification, PushSubscription

from .base import BaseRepository

NOTIFICATIONS_PAGE_SIZE = 20


class NotificationRepository(BaseRepository):
    """notifications, push_subscriptions and the profiles e-mail lookup."""

    async def get_latest(self, user_id: str, limit: int = NOTIFICATIONS_PAGE_SIZE) -> List[Notification]:
        result = (
            await self.client.table("notifications")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [Notification(**n) for n in result.data or []]

    async def create(
        self,
        user_id: str,
        title: str,
        message: str,
        type: str = "info",
        link: Optional[str] = None,
    ) -> Notification:
        data = {"user_id": user_id, "title": title, "message": message, "type": type}
        if link:
            data["link"] = link
        result = await self.client.table("notifications").insert(data).execute()
        return Notification(**result.data[0])

    async def mark_read(self, user_id: str, notification_id: str) -> None:
        await (
            self.client.table("notifications")
            .update({"is_read": True})
            .eq("id", notification_id)
            .eq("user_id", user_id)
            .execute()
        )

    async def mark_all_read(self, user_id: str) -> None:
        await (
            self.client.table("notifications")
            .update({"is_read": True})
            .eq("user_id", user_id)
            .eq("is_read", False)
            .execute()
        )

    # ==================== PUSH SUBSCRIPTIONS ====================

    async def get_subscriptions(self, user_id: str) -> List[PushSubscription]:
        result = await self.client.table("push_subscriptions").select("*").eq("user_id", user_id).execute()
        return [PushSubscription(**s) for s in result.data or []]

    async def save_subscription(self, user_id: str, endpoint: str, p256dh: str, auth: str) -> None:
        data = {"user_id": user_id, "endpoint": endpoint, "p256dh": p256dh, "auth": auth}
        await self.client.table("push_subscriptions").upsert(data, on_conflict="endpoint").execute()

    async def delete_subscription(self, subscription_id: str) -> None:
        await self.client.table("push_subscriptions").delete().eq("id", subscription_id).execute()

    async def delete_subscription_by_endpoint(self, user_id: str, endpoint: str) -> None:
        """Delete only when the endpoint belongs to user_id (service role bypasses RLS)."""
        await (
            self.client.table("push_subscriptions")
            .delete()
            .eq("endpoint", endpoint)
            .eq("user_id", user_id)
            .execute()
        )

    async def find_user_id_by_email(self, email: str) -> Optional[str]:
        result = await self.client.table("profiles").select("id").eq("email", email).limit(1).execute()
        return result.data[0]["id"] if result.data else None
