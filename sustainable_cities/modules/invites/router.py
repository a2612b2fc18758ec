from typing import Any, List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sustainable_cities.core.db import get_db
from sustainable_cities.core import deps
from sustainable_cities.modules.auth import models as auth_models
from sustainable_cities.modules.invites import schemas, service
from sustainable_cities.modules.lifecycle.outcome import unwrap

# Mounted under /admin/invites
router = APIRouter()
# Mounted under /invites, no session required
public_router = APIRouter()

@router.get("", response_model=List[schemas.InviteRead])
async def list_invites(
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_invites(db)

@router.post("", response_model=schemas.InviteRead, status_code=201)
async def create_invite(
    invite_in: schemas.InviteCreate,
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.create_invite(db, invite_in, current_user.id)

@router.delete("/{id}", status_code=204)
async def delete_invite(
    id: UUID,
    current_user: auth_models.User = Depends(deps.require_admin),
    db: AsyncSession = Depends(get_db)
) -> None:
    unwrap(await service.delete_invite(db, id, current_user.id))

@public_router.post("/validate", response_model=schemas.InviteCheckResult)
async def check_invite(
    check_in: schemas.InviteCheck,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Lets the signup form tell the user early whether the code will be accepted.
    """
    invite = unwrap(await service.validate_invite(db, check_in.code, check_in.email))
    return {
        "valid": True,
        "restricted_to_email": invite.email is not None,
        "expires_at": invite.expires_at,
    }
