import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sustainable_cities.core import security
from sustainable_cities.modules.auth import models as auth_models
from sustainable_cities.modules.reports import models as report_models
from sustainable_cities.modules.forum import models as forum_models
from sustainable_cities.modules.admin.models import AuditLog
from sustainable_cities.modules.admin import schemas
from sustainable_cities.modules.lifecycle.outcome import ErrorKind, Outcome
from uuid import UUID
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)

async def create_audit_log(
    db: AsyncSession,
    action: str,
    user_id: Optional[UUID] = None,
    target_type: Optional[str] = None,
    target_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    commit: bool = True
) -> AuditLog:
    """
    Record an audit entry. Pass ``commit=False`` to make it part of the
    caller's unit of work, so it lands or rolls back with the change itself.
    """
    log = AuditLog(
        user_id=user_id,
        action=action,
        target_type=target_type,
        target_id=str(target_id) if target_id else None,
        metadata_json=metadata
    )
    db.add(log)
    if commit:
        await db.commit()
    return log

async def _count_by(db: AsyncSession, column, id_column) -> Dict[str, int]:
    result = await db.execute(select(column, func.count(id_column)).group_by(column))
    return {row[0].value: row[1] for row in result.all()}

async def get_stats(db: AsyncSession) -> dict:
    users_by_role = await _count_by(db, auth_models.User.role, auth_models.User.id)
    reports_by_status = await _count_by(db, report_models.Report.status, report_models.Report.id)
    threads_by_status = await _count_by(db, forum_models.ForumThread.status, forum_models.ForumThread.id)

    # Zero-fill so dashboards always get every bucket
    for role in auth_models.UserRole:
        users_by_role.setdefault(role.value, 0)
    for status in report_models.ReportStatus:
        reports_by_status.setdefault(status.value, 0)
    for status in forum_models.ThreadStatus:
        threads_by_status.setdefault(status.value, 0)

    return {
        "total_users": sum(users_by_role.values()),
        "users_by_role": users_by_role,
        "reports_by_status": reports_by_status,
        "threads_by_status": threads_by_status,
        "pending_reports": reports_by_status[report_models.ReportStatus.PENDING.value],
        "pending_threads": threads_by_status[forum_models.ThreadStatus.PENDING.value],
    }

async def get_all_users(db: AsyncSession, role: Optional[auth_models.UserRole] = None):
    stmt = select(auth_models.User)
    if role is not None:
        stmt = stmt.where(auth_models.User.role == role)
    result = await db.execute(stmt.order_by(auth_models.User.created_at.desc()))
    return result.scalars().all()

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[auth_models.User]:
    result = await db.execute(select(auth_models.User).where(func.lower(auth_models.User.email) == email.lower()))
    return result.scalars().first()

async def create_user(
    db: AsyncSession,
    user_in: schemas.UserCreateAdmin,
    current_admin_id: UUID
) -> Outcome[auth_models.User]:
    if await get_user_by_email(db, user_in.email):
        return Outcome.failure(ErrorKind.VALIDATION_ERROR, "User with this email already exists")

    user = auth_models.User(
        name=user_in.name,
        email=user_in.email,
        hashed_password=security.get_password_hash(user_in.password),
        role=user_in.role,
    )
    db.add(user)
    await db.flush()

    await create_audit_log(
        db,
        action="admin.user.create",
        user_id=current_admin_id,
        target_type="user",
        target_id=str(user.id),
        metadata={"role": user.role.value},
        commit=False
    )
    await db.commit()
    await db.refresh(user)
    logger.info(f"Admin {current_admin_id} created {user.role.value} account {user.id}")
    return Outcome.success(user)

async def _get_user(db: AsyncSession, user_id: UUID) -> Optional[auth_models.User]:
    result = await db.execute(select(auth_models.User).where(auth_models.User.id == user_id))
    return result.scalars().first()

async def update_user_role(
    db: AsyncSession,
    user_id: UUID,
    role: auth_models.UserRole,
    current_admin_id: UUID
) -> Outcome[auth_models.User]:
    user = await _get_user(db, user_id)
    if not user:
        return Outcome.failure(ErrorKind.NOT_FOUND, "User not found")
    if user.id == current_admin_id and role != auth_models.UserRole.ADMIN:
        return Outcome.failure(ErrorKind.FORBIDDEN, "Admins cannot demote themselves")

    old_role = user.role
    if old_role != role:
        user.role = role
        await create_audit_log(
            db,
            action="admin.user.role",
            user_id=current_admin_id,
            target_type="user",
            target_id=str(user.id),
            metadata={"old_role": old_role.value, "new_role": role.value},
            commit=False
        )
        await db.commit()

    # Re-read so the caller sees what the store holds
    await db.refresh(user)
    return Outcome.success(user)

async def update_user_status(
    db: AsyncSession,
    user_id: UUID,
    is_active: bool,
    current_admin_id: UUID
) -> Outcome[auth_models.User]:
    user = await _get_user(db, user_id)
    if not user:
        return Outcome.failure(ErrorKind.NOT_FOUND, "User not found")
    if user.id == current_admin_id and not is_active:
        return Outcome.failure(ErrorKind.FORBIDDEN, "Admins cannot deactivate themselves")

    old_status = user.is_active
    user.is_active = is_active
    await create_audit_log(
        db,
        action="admin.user.unban" if is_active else "admin.user.ban",
        user_id=current_admin_id,
        target_type="user",
        target_id=str(user.id),
        metadata={"old_status": old_status, "new_status": is_active},
        commit=False
    )
    await db.commit()
    await db.refresh(user)
    return Outcome.success(user)

async def get_audit_logs(db: AsyncSession, limit: int = 50, target_id: Optional[str] = None):
    stmt = select(AuditLog)
    if target_id:
        stmt = stmt.where(AuditLog.target_id == target_id)
    result = await db.execute(stmt.order_by(AuditLog.created_at.desc()).limit(limit))
    return result.scalars().all()
