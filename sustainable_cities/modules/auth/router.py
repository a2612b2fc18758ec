import logging
from typing import Any
from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from sustainable_cities.core.config import settings
from sustainable_cities.core.db import get_db
from sustainable_cities.core import access, security
from sustainable_cities.core import deps
from sustainable_cities.modules.auth import schemas, models
from sustainable_cities.modules.admin import service as admin_service
from sustainable_cities.modules.invites import service as invite_service
from sustainable_cities.modules.lifecycle.outcome import unwrap

logger = logging.getLogger(__name__)

router = APIRouter()

def _token_for(user: models.User) -> dict:
    return {
        "access_token": security.create_access_token(subject=user.id),
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        "role": user.role,
    }

@router.post("/register", response_model=schemas.UserRead, status_code=201)
async def register_user(
    user_in: schemas.UserCreate,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Citizen self-registration. Workers sign up with an invite, admins are created by admins.
    """
    if await admin_service.get_user_by_email(db, user_in.email):
        raise HTTPException(
            status_code=400,
            detail="The user with this email already exists in the system",
        )

    user = models.User(
        email=user_in.email,
        hashed_password=security.get_password_hash(user_in.password),
        name=user_in.name,
        role=models.UserRole.CITIZEN
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info(f"Citizen account {user.id} registered")
    return user

@router.post("/worker-signup", response_model=schemas.UserRead, status_code=201)
async def worker_signup(
    signup_in: schemas.WorkerSignup,
    db: AsyncSession = Depends(get_db)
) -> Any:
    return unwrap(await invite_service.signup_worker(db, signup_in))

@router.post("/login", response_model=schemas.Token)
async def login_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
) -> Any:
    user = await admin_service.get_user_by_email(db, form_data.username)

    if not user or not security.verify_password(form_data.password, user.hashed_password):
        raise HTTPException(status_code=400, detail="Incorrect email or password")

    if not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")

    await admin_service.create_audit_log(db, action="auth.login", user_id=user.id)
    return _token_for(user)

@router.post("/refresh", response_model=schemas.Token)
async def refresh_access_token(
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    """
    Issue a fresh token while the current one is still valid.
    """
    return _token_for(current_user)

@router.get("/me", response_model=schemas.UserRead)
async def read_users_me(
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    return current_user

@router.put("/me", response_model=schemas.UserRead)
async def update_user_me(
    user_in: schemas.UserUpdate,
    current_user: models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    if user_in.name is not None:
        current_user.name = user_in.name

    db.add(current_user)
    await db.commit()
    await db.refresh(current_user)
    return current_user

@router.get("/route-access", response_model=schemas.RouteAccessRead)
async def route_access(
    path: str,
    current_user: models.User | None = Depends(deps.get_current_user_optional),
) -> Any:
    """
    Where may the caller navigate? Signed-out callers are sent to login.
    """
    decision = access.evaluate(path, current_user.role if current_user else None)
    return {"path": path, "allowed": decision.allowed, "redirect_to": decision.redirect_to}
