"""Shared fixtures: a throwaway SQLite database and one account per role."""
from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from typing import Dict, Iterator
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_sustainable_cities.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["RATE_LIMIT_PER_MINUTE"] = "0"
os.environ["AUTO_CREATE_TABLES"] = "false"

from sustainable_cities.core.db import SessionLocal, drop_models, init_models  # noqa: E402
from sustainable_cities.core.security import create_access_token, get_password_hash  # noqa: E402
from sustainable_cities.main import app  # noqa: E402
from sustainable_cities.modules.auth.models import User, UserRole  # noqa: E402

API = "/api/v1"
PASSWORD = "password123"


@dataclass
class Account:
    id: UUID
    email: str
    role: UserRole
    headers: Dict[str, str]


async def _reset_schema() -> None:
    await drop_models()
    await init_models()


@pytest.fixture(autouse=True)
def _database() -> Iterator[None]:
    asyncio.run(_reset_schema())
    yield


def create_account(name: str, email: str, role: UserRole) -> Account:
    async def _create() -> UUID:
        async with SessionLocal() as session:
            user = User(name=name, email=email, hashed_password=get_password_hash(PASSWORD), role=role)
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user.id

    user_id = asyncio.run(_create())
    token = create_access_token(user_id)
    return Account(id=user_id, email=email, role=role, headers={"Authorization": f"Bearer {token}"})


@pytest.fixture
def accounts() -> Dict[str, Account]:
    return {
        "citizen": create_account("Casey Citizen", "citizen@example.com", UserRole.CITIZEN),
        "neighbour": create_account("Nico Neighbour", "neighbour@example.com", UserRole.CITIZEN),
        "worker_a": create_account("Ada Worker", "worker.a@example.com", UserRole.WORKER),
        "worker_b": create_account("Ben Worker", "worker.b@example.com", UserRole.WORKER),
        "admin": create_account("Alex Admin", "admin@example.com", UserRole.ADMIN),
    }


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
