"""Registration, login and token handling."""
from __future__ import annotations

API = "/api/v1"


def _register(client, email="new.citizen@example.com"):
    return client.post(f"{API}/auth/register", json={"name": "New Citizen", "email": email, "password": "secret123"})


def test_register_creates_a_citizen(client) -> None:
    response = _register(client)
    assert response.status_code == 201
    assert response.json()["role"] == "citizen"
    assert "hashed_password" not in response.json()

    assert _register(client).status_code == 400
    assert _register(client, "NEW.Citizen@example.com").status_code == 400


def test_register_validates_input(client) -> None:
    response = client.post(f"{API}/auth/register", json={"name": "", "email": "not-an-email", "password": "1"})
    assert response.status_code == 422


def test_login_and_me(client) -> None:
    _register(client)
    login = client.post(f"{API}/auth/login", data={"username": "new.citizen@example.com", "password": "secret123"})
    assert login.status_code == 200
    token = login.json()
    assert token["token_type"] == "bearer"
    assert token["role"] == "citizen"
    assert token["expires_in"] == 3600

    headers = {"Authorization": f"Bearer {token['access_token']}"}
    me = client.get(f"{API}/auth/me", headers=headers)
    assert me.json()["email"] == "new.citizen@example.com"

    updated = client.put(f"{API}/auth/me", json={"name": "Renamed"}, headers=headers)
    assert updated.json()["name"] == "Renamed"

    refreshed = client.post(f"{API}/auth/refresh", headers=headers)
    assert refreshed.status_code == 200
    assert refreshed.json()["access_token"]


def test_wrong_password(client) -> None:
    _register(client)
    login = client.post(f"{API}/auth/login", data={"username": "new.citizen@example.com", "password": "wrong"})
    assert login.status_code == 400


def test_token_in_query_string(client, accounts) -> None:
    token = accounts["citizen"].headers["Authorization"].split(" ", 1)[1]
    response = client.get(f"{API}/auth/me", params={"token": token})
    assert response.status_code == 200


def test_garbage_token(client) -> None:
    response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
