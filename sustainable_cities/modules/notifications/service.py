import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sustainable_cities.core.db import SessionLocal
from sustainable_cities.modules.notifications import models
from sustainable_cities.modules.notifications.broadcaster import broadcaster
from uuid import UUID
from typing import Optional

logger = logging.getLogger(__name__)

async def create_notification(
    db: AsyncSession,
    user_id: UUID,
    title: str,
    message: str,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None
) -> models.Notification:
    notification = models.Notification(
        user_id=user_id,
        title=title,
        message=message,
        resource_type=resource_type,
        resource_id=resource_id,
        is_read=False
    )
    db.add(notification)
    await db.commit()
    await db.refresh(notification)

    # Real-time push; the stored row is the source of truth
    try:
        payload = {
            "id": str(notification.id),
            "title": notification.title,
            "message": notification.message,
            "resource_type": notification.resource_type,
            "resource_id": notification.resource_id,
            "created_at": notification.created_at.isoformat() if notification.created_at else None
        }
        await broadcaster.broadcast(user_id, payload)
    except Exception:
        logger.warning(f"Broadcast to {user_id} failed", exc_info=True)

    return notification

async def notify_safely(
    user_id: UUID,
    title: str,
    message: str,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None
) -> Optional[models.Notification]:
    """
    Best-effort delivery used after a committed state change.
    Runs in its own session so a failure never touches the caller's
    records; failures are logged and swallowed.
    """
    async with SessionLocal() as session:
        try:
            return await create_notification(session, user_id, title, message, resource_type, resource_id)
        except Exception:
            logger.error(f"Notification for {resource_type} {resource_id} to {user_id} failed", exc_info=True)
            await session.rollback()
            return None

async def list_my_notifications(db: AsyncSession, user_id: UUID, unread_only: bool = False):
    stmt = select(models.Notification).where(models.Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(models.Notification.is_read.is_(False))
    result = await db.execute(stmt.order_by(models.Notification.created_at.desc()))
    return result.scalars().all()

async def mark_as_read(db: AsyncSession, notification_id: UUID, user_id: UUID):
    result = await db.execute(
        select(models.Notification)
        .where(models.Notification.id == notification_id, models.Notification.user_id == user_id)
    )
    notification = result.scalars().first()
    if notification:
        notification.is_read = True
        await db.commit()
        await db.refresh(notification)
    return notification
