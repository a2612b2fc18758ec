import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from sustainable_cities.modules.forum import models, schemas
from sustainable_cities.modules.auth import models as auth_models
from sustainable_cities.modules.admin import service as admin_service
from sustainable_cities.modules.notifications import service as notification_service
from sustainable_cities.modules.lifecycle import engine, scope
from sustainable_cities.modules.lifecycle.outcome import ErrorKind, Outcome
from sustainable_cities.modules.lifecycle.store import write_decision
from uuid import UUID
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

NOT_FOUND = "Thread not found"

async def create_thread(
    db: AsyncSession,
    creator: auth_models.User,
    thread_in: schemas.ThreadCreate
) -> models.ForumThread:
    thread = models.ForumThread(
        title=thread_in.title,
        body=thread_in.body,
        tags=thread_in.tags,
        status=engine.initial_thread_status(creator.role),
        created_by=creator.id,
        comment_count=0
    )
    db.add(thread)
    await db.commit()
    await db.refresh(thread)
    logger.info(f"Thread {thread.id} created by {creator.id} as {thread.status.value}")
    return thread

async def list_threads(
    db: AsyncSession,
    actor: auth_models.User,
    status: Optional[models.ThreadStatus] = None,
    mine: bool = False
):
    stmt = select(models.ForumThread).where(scope.thread_scope(actor))
    if status is not None:
        stmt = stmt.where(models.ForumThread.status == status)
    if mine:
        stmt = stmt.where(models.ForumThread.created_by == actor.id)
    result = await db.execute(stmt.order_by(models.ForumThread.created_at.desc()))
    return result.scalars().all()

async def get_thread(db: AsyncSession, thread_id: UUID, actor: auth_models.User) -> Outcome[models.ForumThread]:
    result = await db.execute(
        select(models.ForumThread).where(models.ForumThread.id == thread_id, scope.thread_scope(actor))
    )
    thread = result.scalars().first()
    if thread is None:
        return Outcome.failure(ErrorKind.NOT_FOUND, NOT_FOUND)
    return Outcome.success(thread)

async def moderate_thread(
    db: AsyncSession,
    thread_id: UUID,
    action: engine.Action,
    actor: auth_models.User,
    payload: Optional[Mapping[str, Any]] = None
) -> Outcome[models.ForumThread]:
    thread = await db.get(models.ForumThread, thread_id)
    if thread is None or not scope.can_read_thread(actor, thread):
        return Outcome.failure(ErrorKind.NOT_FOUND, NOT_FOUND)

    decided = engine.decide(engine.RecordKind.THREAD, thread, action, actor, payload)
    if not decided.ok:
        return Outcome.failure(decided.error, decided.message)
    decision = decided.value

    if not await write_decision(db, models.ForumThread, thread_id, decision):
        await db.rollback()
        return Outcome.failure(ErrorKind.CONFLICT, "Thread was moderated by someone else, reload and retry")

    await admin_service.create_audit_log(
        db,
        action=f"thread.{action.value}",
        user_id=actor.id,
        target_type="thread",
        target_id=str(thread_id),
        metadata={"reason": decision.changes.get("comment")},
        commit=False
    )
    await db.commit()
    await db.refresh(thread)
    logger.info(f"Thread {thread_id}: {decision.from_status.value} -> {decision.to_status.value} by {actor.id}")

    if decision.to_status == models.ThreadStatus.APPROVED:
        message = f"Your thread '{thread.title}' is now visible to everyone."
    else:
        message = f"Your thread '{thread.title}' was not published. Reason: {thread.comment}"
    await notification_service.notify_safely(
        user_id=thread.created_by,
        title=f"Thread {decision.to_status.value}",
        message=message,
        resource_type="thread",
        resource_id=str(thread.id)
    )
    return Outcome.success(thread)

async def list_comments(db: AsyncSession, thread_id: UUID, actor: auth_models.User) -> Outcome[list]:
    found = await get_thread(db, thread_id, actor)
    if not found.ok:
        return found
    result = await db.execute(
        select(models.ForumComment)
        .where(models.ForumComment.thread_id == thread_id)
        .order_by(models.ForumComment.created_at.asc())
    )
    return Outcome.success(result.scalars().all())

async def add_comment(
    db: AsyncSession,
    thread_id: UUID,
    actor: auth_models.User,
    comment_in: schemas.CommentCreate
) -> Outcome[models.ForumComment]:
    found = await get_thread(db, thread_id, actor)
    if not found.ok:
        return found
    if found.value.status != models.ThreadStatus.APPROVED:
        return Outcome.failure(ErrorKind.INVALID_STATE, "Only approved threads accept comments")

    content = comment_in.content.strip()
    if not content:
        return Outcome.failure(ErrorKind.VALIDATION_ERROR, "content is required")

    comment = models.ForumComment(thread_id=thread_id, content=content, created_by=actor.id)
    db.add(comment)
    # Counter is bumped by the database, never read-modify-written here
    await db.execute(
        update(models.ForumThread)
        .where(models.ForumThread.id == thread_id)
        .values(comment_count=models.ForumThread.comment_count + 1)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    await db.refresh(comment)
    return Outcome.success(comment)

async def delete_comment(db: AsyncSession, comment_id: UUID, actor: auth_models.User) -> Outcome[None]:
    comment = await db.get(models.ForumComment, comment_id)
    if comment is None:
        return Outcome.failure(ErrorKind.NOT_FOUND, "Comment not found")
    if comment.created_by != actor.id and actor.role != auth_models.UserRole.ADMIN:
        return Outcome.failure(ErrorKind.FORBIDDEN, "Only the author or an admin can delete this comment")

    thread_id = comment.thread_id
    author_id = comment.created_by
    result = await db.execute(delete(models.ForumComment).where(models.ForumComment.id == comment_id))
    if result.rowcount == 0:
        # Deleted concurrently; the other delete already decremented
        await db.rollback()
        return Outcome.success(None)

    # Floor at zero: a thread already at 0 stays there
    await db.execute(
        update(models.ForumThread)
        .where(models.ForumThread.id == thread_id, models.ForumThread.comment_count > 0)
        .values(comment_count=models.ForumThread.comment_count - 1)
        .execution_options(synchronize_session=False)
    )
    if actor.id != author_id:
        await admin_service.create_audit_log(
            db,
            action="comment.delete",
            user_id=actor.id,
            target_type="thread",
            target_id=str(thread_id),
            metadata={"comment_id": str(comment_id)},
            commit=False
        )
    await db.commit()
    return Outcome.success(None)
