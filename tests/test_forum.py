"""Forum threads: moderation, visibility and comment counting."""
from __future__ import annotations

import asyncio
from uuid import UUID

from sqlalchemy import update

from sustainable_cities.core.db import SessionLocal
from sustainable_cities.modules.forum.models import ForumThread

API = "/api/v1"


def _thread(client, account, **overrides) -> dict:
    payload = {"title": "Community garden on Elm St?", "body": "Who wants to help?", "tags": ["Garden", " green ", "garden"]}
    payload.update(overrides)
    response = client.post(f"{API}/forum/threads", json=payload, headers=account.headers)
    assert response.status_code == 201, response.text
    return response.json()


def _set_comment_count(thread_id: str, value: int) -> None:
    async def _update():
        async with SessionLocal() as session:
            await session.execute(
                update(ForumThread).where(ForumThread.id == UUID(thread_id)).values(comment_count=value)
            )
            await session.commit()

    asyncio.run(_update())


def test_citizen_thread_waits_for_moderation(client, accounts) -> None:
    thread = _thread(client, accounts["citizen"])
    assert thread["status"] == "Pending"
    assert thread["tags"] == ["garden", "green"]
    assert thread["comment_count"] == 0

    hidden = client.get(f"{API}/forum/threads/{thread['id']}", headers=accounts["neighbour"].headers)
    assert hidden.status_code == 404
    assert client.get(f"{API}/forum/threads", headers=accounts["neighbour"].headers).json() == []

    own = client.get(f"{API}/forum/threads", params={"mine": True}, headers=accounts["citizen"].headers).json()
    assert [item["id"] for item in own] == [thread["id"]]


def test_admin_thread_is_published_immediately(client, accounts) -> None:
    thread = _thread(client, accounts["admin"])
    assert thread["status"] == "Approved"
    listed = client.get(f"{API}/forum/threads", headers=accounts["neighbour"].headers).json()
    assert [item["id"] for item in listed] == [thread["id"]]


def test_approve_makes_thread_public(client, accounts) -> None:
    thread_id = _thread(client, accounts["citizen"])["id"]

    hidden = client.post(f"{API}/forum/threads/{thread_id}/approve", headers=accounts["worker_a"].headers)
    assert hidden.status_code == 404

    # The author can see the pending thread but may not publish it
    forbidden = client.post(f"{API}/forum/threads/{thread_id}/approve", headers=accounts["citizen"].headers)
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"]["code"] == "forbidden"

    approved = client.post(f"{API}/forum/threads/{thread_id}/approve", headers=accounts["admin"].headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "Approved"
    assert client.get(f"{API}/forum/threads/{thread_id}", headers=accounts["neighbour"].headers).status_code == 200

    again = client.post(f"{API}/forum/threads/{thread_id}/approve", headers=accounts["admin"].headers)
    assert again.status_code == 409


def test_reject_without_reason_changes_nothing(client, accounts) -> None:
    thread_id = _thread(client, accounts["citizen"])["id"]

    response = client.post(f"{API}/forum/threads/{thread_id}/reject", json={}, headers=accounts["admin"].headers)
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "validation_error"
    current = client.get(f"{API}/forum/threads/{thread_id}", headers=accounts["admin"].headers).json()
    assert current["status"] == "Pending"

    response = client.post(
        f"{API}/forum/threads/{thread_id}/reject", json={"comment": "Off topic"}, headers=accounts["admin"].headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "Rejected"
    assert response.json()["comment"] == "Off topic"

    # The author still sees the rejected thread, nobody else does
    assert client.get(f"{API}/forum/threads/{thread_id}", headers=accounts["citizen"].headers).status_code == 200
    assert client.get(f"{API}/forum/threads/{thread_id}", headers=accounts["neighbour"].headers).status_code == 404


def test_comments_only_on_approved_threads(client, accounts) -> None:
    thread_id = _thread(client, accounts["citizen"])["id"]
    response = client.post(
        f"{API}/forum/threads/{thread_id}/comments", json={"content": "Count me in"}, headers=accounts["citizen"].headers
    )
    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "invalid_state"


def test_comment_count_follows_comments(client, accounts) -> None:
    thread_id = _thread(client, accounts["admin"])["id"]

    created = []
    for account in ("citizen", "neighbour"):
        response = client.post(
            f"{API}/forum/threads/{thread_id}/comments",
            json={"content": "  I can bring tools  "},
            headers=accounts[account].headers,
        )
        assert response.status_code == 201
        created.append(response.json())
    assert created[0]["content"] == "I can bring tools"

    thread = client.get(f"{API}/forum/threads/{thread_id}", headers=accounts["citizen"].headers).json()
    assert thread["comment_count"] == 2
    comments = client.get(f"{API}/forum/threads/{thread_id}/comments", headers=accounts["worker_a"].headers).json()
    assert {comment["id"] for comment in comments} == {comment["id"] for comment in created}

    # Only the author or an admin may delete
    response = client.delete(f"{API}/forum/comments/{created[0]['id']}", headers=accounts["neighbour"].headers)
    assert response.status_code == 403
    assert client.delete(f"{API}/forum/comments/{created[0]['id']}", headers=accounts["citizen"].headers).status_code == 204
    assert client.delete(f"{API}/forum/comments/{created[1]['id']}", headers=accounts["admin"].headers).status_code == 204

    thread = client.get(f"{API}/forum/threads/{thread_id}", headers=accounts["citizen"].headers).json()
    assert thread["comment_count"] == 0
    assert client.delete(f"{API}/forum/comments/{created[0]['id']}", headers=accounts["admin"].headers).status_code == 404


def test_comment_count_never_goes_negative(client, accounts) -> None:
    thread_id = _thread(client, accounts["admin"])["id"]
    comment = client.post(
        f"{API}/forum/threads/{thread_id}/comments", json={"content": "First!"}, headers=accounts["citizen"].headers
    ).json()
    _set_comment_count(thread_id, 0)

    assert client.delete(f"{API}/forum/comments/{comment['id']}", headers=accounts["citizen"].headers).status_code == 204
    thread = client.get(f"{API}/forum/threads/{thread_id}", headers=accounts["citizen"].headers).json()
    assert thread["comment_count"] == 0
