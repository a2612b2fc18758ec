import asyncio
import json
from typing import Any, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from sustainable_cities.core.db import get_db
from sustainable_cities.core import deps
from sustainable_cities.modules.auth import models as auth_models
from sustainable_cities.modules.notifications import schemas, service
from sustainable_cities.modules.notifications.broadcaster import broadcaster

router = APIRouter()

KEEP_ALIVE_SECONDS = 15.0

@router.get("/", response_model=List[schemas.NotificationRead])
async def list_notifications(
    unread_only: bool = False,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    List current user's notifications, newest first.
    """
    return await service.list_my_notifications(db, current_user.id, unread_only)

@router.post("/{id}/read", response_model=schemas.NotificationRead)
async def mark_read(
    id: UUID,
    current_user: auth_models.User = Depends(deps.get_current_active_user),
    db: AsyncSession = Depends(get_db)
) -> Any:
    notification = await service.mark_as_read(db, id, current_user.id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification

@router.get("/stream")
async def stream_notifications(
    current_user: auth_models.User = Depends(deps.get_current_active_user)
):
    """
    SSE endpoint for real-time status-change messages.
    """
    user_id = current_user.id

    async def event_generator():
        queue = broadcaster.connect(user_id)
        try:
            while True:
                try:
                    message = await asyncio.wait_for(queue.get(), timeout=KEEP_ALIVE_SECONDS)
                    yield f"data: {json.dumps(message)}\n\n"
                except asyncio.TimeoutError:
                    yield ": keep-alive\n\n"
        finally:
            broadcaster.disconnect(user_id, queue)

    return StreamingResponse(event_generator(), media_type="text/event-stream")
