"""Admin console: stats, account management and access control."""
from __future__ import annotations

API = "/api/v1"


def test_non_admins_are_refused(client, accounts) -> None:
    for name in ("citizen", "worker_a"):
        response = client.get(f"{API}/admin/stats", headers=accounts[name].headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Requires role: admin"


def test_stats_count_every_bucket(client, accounts) -> None:
    client.post(
        f"{API}/reports",
        json={"title": "Broken bench", "description": "Snapped in half", "location": "Riverside"},
        headers=accounts["citizen"].headers,
    )
    client.post(f"{API}/forum/threads", json={"title": "Hi", "body": "Hello"}, headers=accounts["citizen"].headers)

    stats = client.get(f"{API}/admin/stats", headers=accounts["admin"].headers).json()
    assert stats["total_users"] == 5
    assert stats["users_by_role"] == {"citizen": 2, "worker": 2, "admin": 1}
    assert stats["reports_by_status"]["Pending"] == 1
    assert stats["reports_by_status"]["Completed"] == 0
    assert stats["pending_reports"] == 1
    assert stats["pending_threads"] == 1
    assert stats["threads_by_status"] == {"Pending": 1, "Approved": 0, "Rejected": 0}


def test_list_users_by_role(client, accounts) -> None:
    workers = client.get(f"{API}/admin/users", params={"role": "worker"}, headers=accounts["admin"].headers).json()
    assert {user["email"] for user in workers} == {accounts["worker_a"].email, accounts["worker_b"].email}


def test_create_user_with_any_role(client, accounts) -> None:
    payload = {"name": "Second Admin", "email": "admin2@example.com", "password": "secret123", "role": "admin"}
    response = client.post(f"{API}/admin/users", json=payload, headers=accounts["admin"].headers)
    assert response.status_code == 201
    assert response.json()["role"] == "admin"

    duplicate = client.post(f"{API}/admin/users", json=payload, headers=accounts["admin"].headers)
    assert duplicate.status_code == 400


def test_role_change_returns_stored_role(client, accounts) -> None:
    user_id = accounts["neighbour"].id
    response = client.patch(f"{API}/admin/users/{user_id}/role", json={"role": "worker"}, headers=accounts["admin"].headers)
    assert response.status_code == 200
    assert response.json()["role"] == "worker"

    me = client.get(f"{API}/auth/me", headers=accounts["neighbour"].headers).json()
    assert me["role"] == "worker"

    logs = client.get(f"{API}/admin/audit-logs", params={"target_id": str(user_id)}, headers=accounts["admin"].headers).json()
    assert logs[0]["action"] == "admin.user.role"
    assert logs[0]["metadata_json"] == {"old_role": "citizen", "new_role": "worker"}


def test_admin_cannot_demote_or_ban_self(client, accounts) -> None:
    admin = accounts["admin"]
    response = client.patch(f"{API}/admin/users/{admin.id}/role", json={"role": "citizen"}, headers=admin.headers)
    assert response.status_code == 403
    response = client.patch(f"{API}/admin/users/{admin.id}/status", json={"is_active": False}, headers=admin.headers)
    assert response.status_code == 403


def test_banned_user_is_locked_out(client, accounts) -> None:
    user_id = accounts["citizen"].id
    response = client.patch(f"{API}/admin/users/{user_id}/status", json={"is_active": False}, headers=accounts["admin"].headers)
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    assert client.get(f"{API}/auth/me", headers=accounts["citizen"].headers).status_code == 400
    login = client.post(f"{API}/auth/login", data={"username": accounts["citizen"].email, "password": "password123"})
    assert login.status_code == 400


def test_unknown_user(client, accounts) -> None:
    missing = "00000000-0000-0000-0000-000000000000"
    response = client.patch(f"{API}/admin/users/{missing}/role", json={"role": "worker"}, headers=accounts["admin"].headers)
    assert response.status_code == 404
