from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sustainable_cities.core.db import get_db
from sustainable_cities.core import deps
from sustainable_cities.modules.auth import models as auth_models
from sustainable_cities.modules.lifecycle.engine import Action
from sustainable_cities.modules.lifecycle.outcome import unwrap
from sustainable_cities.modules.reports import models, schemas, service

router = APIRouter()

@router.post("", response_model=schemas.ReportRead, status_code=201)
async def submit_report(
    report_in: schemas.ReportCreate,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.create_report(db, current_user.id, report_in)

@router.get("", response_model=List[schemas.ReportRead])
async def list_reports(
    status: Optional[models.ReportStatus] = None,
    assigned_to_me: bool = False,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Reports visible to the caller: citizens see their own, workers the
    open pool plus their assignments, admins everything.
    """
    return await service.list_reports(db, current_user, status, assigned_to_me)

@router.get("/{id}", response_model=schemas.ReportRead)
async def get_report(
    id: UUID,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return unwrap(await service.get_report(db, id, current_user))

@router.post("/{id}/approve", response_model=schemas.ReportRead)
async def approve_report(
    id: UUID,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return unwrap(await service.apply_transition(db, id, Action.APPROVE, current_user))

@router.post("/{id}/reject", response_model=schemas.ReportRead)
async def reject_report(
    id: UUID,
    reject_in: schemas.ReportReject,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return unwrap(await service.apply_transition(db, id, Action.REJECT, current_user, reject_in.model_dump()))

@router.post("/{id}/start", response_model=schemas.ReportRead)
async def start_work(
    id: UUID,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Claim an approved report. The first worker wins; later claims get 409.
    """
    return unwrap(await service.apply_transition(db, id, Action.START_WORK, current_user))

@router.post("/{id}/resolve", response_model=schemas.ReportRead)
async def resolve_report(
    id: UUID,
    resolve_in: schemas.ReportResolve,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return unwrap(await service.apply_transition(db, id, Action.RESOLVE, current_user, resolve_in.model_dump()))

@router.post("/{id}/complete", response_model=schemas.ReportRead)
async def complete_report(
    id: UUID,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return unwrap(await service.apply_transition(db, id, Action.COMPLETE, current_user))

@router.delete("/{id}", status_code=204)
async def delete_report(
    id: UUID,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> None:
    unwrap(await service.delete_report(db, id, current_user))
