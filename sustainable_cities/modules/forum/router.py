from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sustainable_cities.core.db import get_db
from sustainable_cities.core import deps
from sustainable_cities.modules.auth import models as auth_models
from sustainable_cities.modules.forum import models, schemas, service
from sustainable_cities.modules.lifecycle.engine import Action
from sustainable_cities.modules.lifecycle.outcome import unwrap

router = APIRouter()

@router.post("/threads", response_model=schemas.ThreadRead, status_code=201)
async def create_thread(
    thread_in: schemas.ThreadCreate,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    Start a thread. Admin threads are published immediately, others wait for moderation.
    """
    return await service.create_thread(db, current_user, thread_in)

@router.get("/threads", response_model=List[schemas.ThreadRead])
async def list_threads(
    status: Optional[models.ThreadStatus] = None,
    mine: bool = False,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await service.list_threads(db, current_user, status, mine)

@router.get("/threads/{id}", response_model=schemas.ThreadRead)
async def get_thread(
    id: UUID,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return unwrap(await service.get_thread(db, id, current_user))

@router.post("/threads/{id}/approve", response_model=schemas.ThreadRead)
async def approve_thread(
    id: UUID,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return unwrap(await service.moderate_thread(db, id, Action.APPROVE, current_user))

@router.post("/threads/{id}/reject", response_model=schemas.ThreadRead)
async def reject_thread(
    id: UUID,
    reject_in: schemas.ThreadReject,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return unwrap(await service.moderate_thread(db, id, Action.REJECT, current_user, reject_in.model_dump()))

@router.get("/threads/{id}/comments", response_model=List[schemas.CommentRead])
async def list_comments(
    id: UUID,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return unwrap(await service.list_comments(db, id, current_user))

@router.post("/threads/{id}/comments", response_model=schemas.CommentRead, status_code=201)
async def add_comment(
    id: UUID,
    comment_in: schemas.CommentCreate,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return unwrap(await service.add_comment(db, id, current_user, comment_in))

@router.delete("/comments/{id}", status_code=204)
async def delete_comment(
    id: UUID,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> None:
    unwrap(await service.delete_comment(db, id, current_user))
