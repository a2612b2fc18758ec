from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sustainable_cities.core.db import get_db
from sustainable_cities.core import deps
from sustainable_cities.modules.auth import models as auth_models
from sustainable_cities.modules.auth import schemas as auth_schemas
from sustainable_cities.modules.admin import schemas, service
from sustainable_cities.modules.lifecycle.outcome import unwrap

router = APIRouter()

@router.get("/stats", response_model=schemas.AdminStats)
async def get_admin_stats(
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Report, thread and account counts for the admin dashboard.
    """
    return await service.get_stats(db)

@router.get("/users", response_model=List[auth_schemas.UserRead])
async def get_all_users(
    role: Optional[auth_models.UserRole] = None,
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.get_all_users(db, role)

@router.post("/users", response_model=auth_schemas.UserRead, status_code=201)
async def create_user(
    user_in: schemas.UserCreateAdmin,
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Create an account with any role, no invite needed.
    """
    return unwrap(await service.create_user(db, user_in, current_user.id))

@router.patch("/users/{user_id}/role", response_model=auth_schemas.UserRead)
async def update_user_role(
    user_id: UUID,
    role_in: schemas.UserRoleUpdate,
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return unwrap(await service.update_user_role(db, user_id, role_in.role, current_user.id))

@router.patch("/users/{user_id}/status", response_model=auth_schemas.UserRead)
async def update_user_status(
    user_id: UUID,
    status_in: schemas.UserStatusUpdate,
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Ban/Unban a user.
    """
    return unwrap(await service.update_user_status(db, user_id, status_in.is_active, current_user.id))

@router.get("/audit-logs", response_model=List[schemas.AuditLogRead])
async def get_audit_logs(
    limit: int = Query(50, ge=1, le=500),
    target_id: Optional[str] = None,
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.get_audit_logs(db, limit, target_id)
