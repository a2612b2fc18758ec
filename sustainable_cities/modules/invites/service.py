"""
Worker invitation codes.

An invite is unused until a worker signs up with it, then it is bound to
that account and inert forever. Signup validates the code, creates the
account and consumes the invite inside one transaction.
"""
import logging
import secrets
import string
from datetime import datetime, timedelta, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from sustainable_cities.core import security
from sustainable_cities.core.config import settings
from sustainable_cities.modules.invites import models, schemas
from sustainable_cities.modules.auth import models as auth_models
from sustainable_cities.modules.auth import schemas as auth_schemas
from sustainable_cities.modules.admin import service as admin_service
from sustainable_cities.modules.lifecycle.outcome import ErrorKind, Outcome
from uuid import UUID
from typing import Optional

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits

def generate_code(length: Optional[int] = None) -> str:
    length = length or settings.INVITE_CODE_LENGTH
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))

def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

async def create_invite(
    db: AsyncSession,
    invite_in: schemas.InviteCreate,
    admin_id: UUID,
    now: Optional[datetime] = None
) -> models.WorkerInvite:
    now = now or datetime.now(timezone.utc)
    days = invite_in.expires_in_days or settings.INVITE_DEFAULT_EXPIRY_DAYS

    code = generate_code()
    while (await db.execute(select(models.WorkerInvite.id).where(models.WorkerInvite.code == code))).first():
        code = generate_code()

    invite = models.WorkerInvite(
        code=code,
        email=invite_in.email,
        created_by=admin_id,
        expires_at=now + timedelta(days=days),
        is_used=False
    )
    db.add(invite)
    await db.flush()
    await admin_service.create_audit_log(
        db,
        action="invite.create",
        user_id=admin_id,
        target_type="invite",
        target_id=str(invite.id),
        metadata={"email": invite_in.email, "expires_in_days": days},
        commit=False
    )
    await db.commit()
    await db.refresh(invite)
    return invite

async def list_invites(db: AsyncSession):
    result = await db.execute(select(models.WorkerInvite).order_by(models.WorkerInvite.created_at.desc()))
    return result.scalars().all()

async def delete_invite(db: AsyncSession, invite_id: UUID, admin_id: UUID) -> Outcome[None]:
    invite = await db.get(models.WorkerInvite, invite_id)
    if invite is None:
        return Outcome.failure(ErrorKind.NOT_FOUND, "Invite not found")
    if invite.is_used:
        return Outcome.failure(ErrorKind.INVALID_STATE, "Used invites are kept as a record of the signup")

    await db.execute(delete(models.WorkerInvite).where(models.WorkerInvite.id == invite_id))
    await admin_service.create_audit_log(
        db,
        action="invite.delete",
        user_id=admin_id,
        target_type="invite",
        target_id=str(invite_id),
        commit=False
    )
    await db.commit()
    return Outcome.success(None)

async def validate_invite(
    db: AsyncSession,
    code: str,
    email: str,
    now: Optional[datetime] = None
) -> Outcome[models.WorkerInvite]:
    """
    Checks run in a fixed order: unknown or used code, then expiry,
    then the email restriction.
    """
    now = now or datetime.now(timezone.utc)
    result = await db.execute(
        select(models.WorkerInvite).where(
            models.WorkerInvite.code == code.strip(),
            models.WorkerInvite.is_used.is_(False)
        )
    )
    invite = result.scalars().first()
    if invite is None:
        return Outcome.failure(ErrorKind.INVALID_CODE, "Invalid or already used invite code")

    if _as_utc(invite.expires_at) <= now:
        return Outcome.failure(ErrorKind.EXPIRED, "This invite code has expired")

    if invite.email and invite.email != email.strip():
        return Outcome.failure(ErrorKind.EMAIL_MISMATCH, "This invite code is not valid for your email address")

    return Outcome.success(invite)

async def consume_invite(db: AsyncSession, invite_id: UUID, used_by: UUID, commit: bool = True) -> Outcome[None]:
    """Mark the invite used, only if it still is unused."""
    result = await db.execute(
        update(models.WorkerInvite)
        .where(models.WorkerInvite.id == invite_id, models.WorkerInvite.is_used.is_(False))
        .values(is_used=True, used_by=used_by)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        return Outcome.failure(ErrorKind.ALREADY_USED, "This invite code has already been used")
    if commit:
        await db.commit()
    return Outcome.success(None)

async def signup_worker(
    db: AsyncSession,
    signup: auth_schemas.WorkerSignup,
    now: Optional[datetime] = None
) -> Outcome[auth_models.User]:
    checked = await validate_invite(db, signup.invite_code, signup.email, now)
    if not checked.ok:
        logger.info(f"Worker signup for {signup.email} refused ({checked.error.value})")
        return Outcome.failure(checked.error, checked.message)
    invite_id = checked.value.id

    existing = await admin_service.get_user_by_email(db, signup.email)
    if existing:
        return Outcome.failure(ErrorKind.VALIDATION_ERROR, "The user with this email already exists in the system")

    user = auth_models.User(
        name=signup.name,
        email=signup.email,
        hashed_password=security.get_password_hash(signup.password),
        role=auth_models.UserRole.WORKER
    )
    db.add(user)
    await db.flush()

    # Same transaction as the account: either both land or neither does
    consumed = await consume_invite(db, invite_id, user.id, commit=False)
    if not consumed.ok:
        await db.rollback()
        logger.info(f"Invite {invite_id} was consumed concurrently, signup for {signup.email} rolled back")
        return Outcome.failure(consumed.error, consumed.message)

    await admin_service.create_audit_log(
        db,
        action="invite.consume",
        user_id=user.id,
        target_type="invite",
        target_id=str(invite_id),
        commit=False
    )
    await db.commit()
    await db.refresh(user)
    logger.info(f"Worker account {user.id} created with invite {invite_id}")
    return Outcome.success(user)
