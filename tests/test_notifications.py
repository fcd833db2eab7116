"""Tests for in-app notifications, web push dispatch and realtime events"""
import json
from unittest.mock import AsyncMock, Mock, patch

import pytest
from pywebpush import WebPushException

from resuelve.errors import PushDispatchError
from resuelve.realtime import emit_order_created
from resuelve.services.models import Notification, PushSubscription
from resuelve.services.notifications import NotificationService


def _subscription(sub_id, user_id="u1"):
    return PushSubscription(
        id=sub_id,
        user_id=user_id,
        endpoint=f"https://push.example/{sub_id}",
        p256dh="key",
        auth="secret",
    )


@pytest.fixture
def notification_db():
    db = Mock()
    db.get_notifications = AsyncMock(return_value=[])
    db.create_notification = AsyncMock()
    db.mark_notification_read = AsyncMock()
    db.mark_all_notifications_read = AsyncMock()
    db.get_push_subscriptions = AsyncMock(return_value=[_subscription("s1")])
    db.save_push_subscription = AsyncMock()
    db.delete_push_subscription = AsyncMock()
    db.delete_push_subscription_by_endpoint = AsyncMock()
    db.find_user_id_by_email = AsyncMock(return_value=None)
    return db


@pytest.fixture
def service(notification_db):
    return NotificationService(notification_db, vapid_private_key="vapid", vapid_subject="mailto:test@example.com")


# ==================== IN-APP ====================

@pytest.mark.asyncio
async def test_list_counts_unread(service, notification_db):
    notification_db.get_notifications = AsyncMock(
        return_value=[
            Notification(id="n1", user_id="u1", title="Pedido", message="Listo", is_read=False),
            Notification(id="n2", user_id="u1", title="Pedido", message="Enviado", is_read=True),
        ]
    )

    result = await service.list_for_user("u1")

    assert result["unread_count"] == 1
    assert len(result["notifications"]) == 2


@pytest.mark.asyncio
async def test_notify_emits_realtime_event(service, notification_db):
    notification_db.create_notification = AsyncMock(
        return_value=Notification(id="n1", user_id="u1", title="Pedido", message="Confirmado", type="success")
    )

    with patch("resuelve.services.notifications.emit_notification_created", new=AsyncMock()) as mock_emit:
        data = await service.notify("u1", "Pedido", "Confirmado", type="success")

    assert data["type"] == "success"
    mock_emit.assert_awaited_once()
    assert mock_emit.call_args.args[0] == "u1"


@pytest.mark.asyncio
async def test_mark_read(service, notification_db):
    await service.mark_read("u1", "n1")
    await service.mark_all_read("u1")

    notification_db.mark_notification_read.assert_awaited_once_with("u1", "n1")
    notification_db.mark_all_notifications_read.assert_awaited_once_with("u1")


# ==================== WEB PUSH ====================

@pytest.mark.asyncio
@pytest.mark.parametrize("title, message", [("", "Hola"), ("Hola", "")])
async def test_send_push_requires_content(service, title, message):
    with pytest.raises(PushDispatchError) as exc_info:
        await service.send_push(title, message, user_id="u1")
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_send_push_requires_target(service):
    with pytest.raises(PushDispatchError) as exc_info:
        await service.send_push("Hola", "Mundo")
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_send_push_unknown_email(service, notification_db):
    with pytest.raises(PushDispatchError) as exc_info:
        await service.send_push("Hola", "Mundo", email="nadie@example.com")

    assert exc_info.value.status_code == 404
    notification_db.find_user_id_by_email.assert_awaited_once_with("nadie@example.com")


@pytest.mark.asyncio
async def test_send_push_without_subscriptions(service, notification_db):
    notification_db.get_push_subscriptions = AsyncMock(return_value=[])

    with pytest.raises(PushDispatchError) as exc_info:
        await service.send_push("Hola", "Mundo", user_id="u1")
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_send_push_by_email(service, notification_db):
    notification_db.find_user_id_by_email = AsyncMock(return_value="u1")

    with patch("resuelve.services.notifications.webpush") as mock_webpush:
        result = await service.send_push("Pedido", "Tu pedido va en camino", email="ana@example.com", url="/orders")

    notification_db.get_push_subscriptions.assert_awaited_once_with("u1")
    assert result == {"success": True, "sent": 1, "total": 1, "results": [{"success": True, "id": "s1"}]}

    kwargs = mock_webpush.call_args.kwargs
    assert kwargs["subscription_info"] == {
        "endpoint": "https://push.example/s1",
        "keys": {"p256dh": "key", "auth": "secret"},
    }
    assert json.loads(kwargs["data"]) == {"title": "Pedido", "body": "Tu pedido va en camino", "url": "/orders"}
    assert kwargs["vapid_claims"] == {"sub": "mailto:test@example.com"}


@pytest.mark.asyncio
async def test_expired_subscription_removed(service, notification_db):
    notification_db.get_push_subscriptions = AsyncMock(return_value=[_subscription("s1"), _subscription("s2")])
    gone = WebPushException("Push failed: 410 Gone", response=Mock(status_code=410))

    def fake_webpush(subscription_info, **kwargs):
        if subscription_info["endpoint"].endswith("s2"):
            raise gone

    with patch("resuelve.services.notifications.webpush", side_effect=fake_webpush):
        result = await service.send_push("Hola", "Mundo", user_id="u1")

    assert result["sent"] == 1
    assert result["total"] == 2
    assert result["results"][1] == {"success": False, "id": "s2", "error": str(gone)}
    notification_db.delete_push_subscription.assert_awaited_once_with("s2")


@pytest.mark.asyncio
async def test_transient_push_failure_keeps_subscription(service, notification_db):
    error = WebPushException("Push failed: 500", response=Mock(status_code=500))

    with patch("resuelve.services.notifications.webpush", side_effect=error):
        result = await service.send_push("Hola", "Mundo", user_id="u1")

    assert result["sent"] == 0
    notification_db.delete_push_subscription.assert_not_awaited()


@pytest.mark.asyncio
async def test_subscribe_and_unsubscribe(service, notification_db):
    await service.subscribe("u1", "https://push.example/s1", "key", "secret")
    await service.unsubscribe("u1", "https://push.example/s1")

    notification_db.save_push_subscription.assert_awaited_once_with("u1", "https://push.example/s1", "key", "secret")
    notification_db.delete_push_subscription_by_endpoint.assert_awaited_once_with(
        "u1", "https://push.example/s1"
    )


@pytest.mark.asyncio
async def test_unexpected_push_error_does_not_abort_batch(service, notification_db):
    notification_db.get_push_subscriptions = AsyncMock(return_value=[_subscription("s1"), _subscription("s2")])

    def fake_webpush(subscription_info, **kwargs):
        if subscription_info["endpoint"].endswith("s2"):
            raise ConnectionError("push service unreachable")

    with patch("resuelve.services.notifications.webpush", side_effect=fake_webpush):
        result = await service.send_push("Hola", "Mundo", user_id="u1")

    assert result["success"] is True
    assert result["sent"] == 1
    assert result["total"] == 2
    assert result["results"][1] == {"success": False, "id": "s2", "error": "push service unreachable"}
    notification_db.delete_push_subscription.assert_not_awaited()


@pytest.mark.asyncio
async def test_unsubscribe_only_deletes_own_endpoint(mock_database, mock_supabase_client):
    table = mock_supabase_client.table.return_value

    await mock_database.delete_push_subscription_by_endpoint("u1", "https://push.example/s1")

    mock_supabase_client.table.assert_called_with("push_subscriptions")
    table.delete.assert_called_once()
    table.eq.assert_any_call("endpoint", "https://push.example/s1")
    table.eq.assert_any_call("user_id", "u1")


# ==================== REALTIME ====================

@pytest.mark.asyncio
async def test_order_created_written_to_store_stream():
    redis = Mock()
    redis.xadd = AsyncMock()

    with patch("resuelve.realtime.get_redis", return_value=redis):
        await emit_order_created("store-1", "order-1", 13.0, 520.0)

    stream, entry_id, fields = redis.xadd.call_args.args
    assert stream == "stream:realtime:orders:store-1"
    assert entry_id == "*"
    assert json.loads(fields["data"]) == {
        "event": "order.created",
        "order_id": "order-1",
        "store_id": "store-1",
        "total_usd": 13.0,
        "total_bs": 520.0,
    }


@pytest.mark.asyncio
async def test_realtime_failure_is_swallowed():
    with patch("resuelve.realtime.get_redis", side_effect=ValueError("UPSTASH_REDIS_REST_URL not set")):
        await emit_order_created("store-1", "order-1", 13.0, 520.0)
