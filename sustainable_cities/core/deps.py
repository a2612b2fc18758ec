from typing import Callable
from uuid import UUID

from fastapi import Depends, HTTPException, status, Query
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sustainable_cities.core.config import settings
from sustainable_cities.core.db import get_db
from sustainable_cities.modules.auth.models import User, UserRole
from sustainable_cities.modules.auth.schemas import TokenData

# auto_error=False so the token can also come from the query string (SSE clients)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False)


def _decode_subject(token: str) -> str | None:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    return payload.get("sub")


async def _load_user(db: AsyncSession, user_id: str) -> User | None:
    try:
        token_data = TokenData(id=UUID(user_id))
    except ValueError:
        return None
    result = await db.execute(select(User).where(User.id == token_data.id))
    return result.scalars().first()


async def get_current_user(
    token_query: str | None = Query(None, alias="token"),
    token_header: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    token = token_header or token_query

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    user_id = _decode_subject(token)
    if user_id is None:
        raise credentials_exception

    user = await _load_user(db, user_id)
    if user is None:
        raise credentials_exception
    return user

async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    if not current_user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user

async def get_current_user_optional(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> User | None:
    if not token:
        return None

    user_id = _decode_subject(token)
    if user_id is None:
        return None

    user = await _load_user(db, user_id)
    if user is None or not user.is_active:
        return None
    return user


def require_roles(*roles: UserRole) -> Callable:
    """Dependency factory: the active user must hold one of ``roles``."""
    async def checker(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in roles:
            allowed = ", ".join(role.value for role in roles)
            raise HTTPException(status_code=403, detail=f"Requires role: {allowed}")
        return current_user

    return checker


require_admin = require_roles(UserRole.ADMIN)
