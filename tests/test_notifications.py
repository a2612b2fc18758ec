"""Status-change notifications are stored for the owner and never block a transition."""
from __future__ import annotations

import asyncio
import uuid

from sustainable_cities.modules.notifications import service as notification_service
from sustainable_cities.modules.notifications.broadcaster import NotificationBroadcaster, QUEUE_SIZE

API = "/api/v1"

REPORT = {"title": "Graffiti", "description": "Fresh tags on the underpass", "location": "Underpass B"}


def test_owner_is_notified_of_transitions(client, accounts) -> None:
    report = client.post(f"{API}/reports", json=REPORT, headers=accounts["citizen"].headers).json()
    client.post(f"{API}/reports/{report['id']}/reject", json={"comment": "Not city property"}, headers=accounts["admin"].headers)

    notifications = client.get(f"{API}/notifications/", headers=accounts["citizen"].headers).json()
    assert len(notifications) == 1
    assert notifications[0]["resource_id"] == report["id"]
    assert "Not city property" in notifications[0]["message"]
    assert client.get(f"{API}/notifications/", headers=accounts["admin"].headers).json() == []

    read = client.post(f"{API}/notifications/{notifications[0]['id']}/read", headers=accounts["citizen"].headers)
    assert read.status_code == 200
    assert read.json()["is_read"] is True
    unread = client.get(f"{API}/notifications/", params={"unread_only": True}, headers=accounts["citizen"].headers)
    assert unread.json() == []


def test_notifications_are_private(client, accounts) -> None:
    report = client.post(f"{API}/reports", json=REPORT, headers=accounts["citizen"].headers).json()
    client.post(f"{API}/reports/{report['id']}/approve", headers=accounts["admin"].headers)
    notification = client.get(f"{API}/notifications/", headers=accounts["citizen"].headers).json()[0]

    response = client.post(f"{API}/notifications/{notification['id']}/read", headers=accounts["neighbour"].headers)
    assert response.status_code == 404


def test_failed_notification_does_not_undo_transition(client, accounts, monkeypatch) -> None:
    async def broken(*args, **kwargs):
        raise RuntimeError("notification store unavailable")

    monkeypatch.setattr(notification_service, "create_notification", broken)

    report = client.post(f"{API}/reports", json=REPORT, headers=accounts["citizen"].headers).json()
    response = client.post(f"{API}/reports/{report['id']}/approve", headers=accounts["admin"].headers)
    assert response.status_code == 200
    assert response.json()["status"] == "Approved"

    monkeypatch.undo()
    current = client.get(f"{API}/reports/{report['id']}", headers=accounts["admin"].headers).json()
    assert current["status"] == "Approved"


def test_broadcaster_fans_out_and_drops_on_full_queue() -> None:
    broadcaster = NotificationBroadcaster()
    user_id = uuid.uuid4()

    async def scenario():
        first = broadcaster.connect(user_id)
        second = broadcaster.connect(user_id)
        delivered = await broadcaster.broadcast(user_id, {"title": "hello"})
        for _ in range(QUEUE_SIZE):
            await broadcaster.broadcast(user_id, {"title": "spam"})
        broadcaster.disconnect(user_id, second)
        return first, second, delivered

    first, second, delivered = asyncio.run(scenario())
    assert delivered == 2
    assert first.qsize() == QUEUE_SIZE
    assert broadcaster.connection_count(user_id) == 1
    assert asyncio.run(broadcaster.broadcast(uuid.uuid4(), {"title": "nobody"})) == 0


def test_failed_notification_does_not_break_moderation(client, accounts, monkeypatch) -> None:
    async def broken(*args, **kwargs):
        raise RuntimeError("notification store unavailable")

    monkeypatch.setattr(notification_service, "create_notification", broken)

    thread = client.post(
        f"{API}/forum/threads", json={"title": "Bike lanes", "body": "More please"}, headers=accounts["citizen"].headers
    ).json()
    response = client.post(
        f"{API}/forum/threads/{thread['id']}/reject", json={"comment": "Duplicate"}, headers=accounts["admin"].headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "Rejected"
    assert response.json()["comment"] == "Duplicate"
    assert client.get(f"{API}/notifications/", headers=accounts["citizen"].headers).json() == []
