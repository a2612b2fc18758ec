import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sustainable_cities.modules.reports import models, schemas
from sustainable_cities.modules.auth import models as auth_models
from sustainable_cities.modules.admin import service as admin_service
from sustainable_cities.modules.notifications import service as notification_service
from sustainable_cities.modules.lifecycle import engine, scope
from sustainable_cities.modules.lifecycle.outcome import ErrorKind, Outcome
from sustainable_cities.modules.lifecycle.store import write_decision
from uuid import UUID
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

NOT_FOUND = "Report not found"

STATUS_MESSAGES = {
    models.ReportStatus.APPROVED: "has been approved and is waiting for a worker",
    models.ReportStatus.REJECTED: "has been rejected",
    models.ReportStatus.IN_PROGRESS: "is being worked on",
    models.ReportStatus.RESOLVED: "has been resolved",
    models.ReportStatus.COMPLETED: "has been verified and closed",
}

async def create_report(
    db: AsyncSession,
    creator_id: UUID,
    report_in: schemas.ReportCreate
) -> models.Report:
    report = models.Report(
        title=report_in.title,
        description=report_in.description,
        location=report_in.location,
        latitude=report_in.latitude,
        longitude=report_in.longitude,
        type=report_in.type,
        status=models.ReportStatus.PENDING,
        created_by=creator_id
    )
    db.add(report)
    await db.commit()
    await db.refresh(report)
    logger.info(f"Report {report.id} submitted by {creator_id}")
    return report

async def list_reports(
    db: AsyncSession,
    actor: auth_models.User,
    status: Optional[models.ReportStatus] = None,
    assigned_to_me: bool = False
):
    stmt = select(models.Report).where(scope.report_scope(actor))
    if status is not None:
        stmt = stmt.where(models.Report.status == status)
    if assigned_to_me:
        stmt = stmt.where(models.Report.assigned_to == actor.id)
    result = await db.execute(stmt.order_by(models.Report.created_at.desc()))
    return result.scalars().all()

async def get_report(db: AsyncSession, report_id: UUID, actor: auth_models.User) -> Outcome[models.Report]:
    result = await db.execute(
        select(models.Report).where(models.Report.id == report_id, scope.report_scope(actor))
    )
    report = result.scalars().first()
    if report is None:
        return Outcome.failure(ErrorKind.NOT_FOUND, NOT_FOUND)
    return Outcome.success(report)

def _claim_visible(actor: Any, report: models.Report, action: engine.Action) -> bool:
    # A worker racing for a report that left the pool must learn it lost the claim
    return (
        action == engine.Action.START_WORK
        and actor.role == auth_models.UserRole.WORKER
        and report.status == models.ReportStatus.IN_PROGRESS
        and report.assigned_to is not None
    )

async def apply_transition(
    db: AsyncSession,
    report_id: UUID,
    action: engine.Action,
    actor: auth_models.User,
    payload: Optional[Mapping[str, Any]] = None
) -> Outcome[models.Report]:
    report = await db.get(models.Report, report_id)
    if report is None or not (scope.can_read_report(actor, report) or _claim_visible(actor, report, action)):
        return Outcome.failure(ErrorKind.NOT_FOUND, NOT_FOUND)

    decided = engine.decide(engine.RecordKind.REPORT, report, action, actor, payload)
    if not decided.ok:
        logger.info(f"Report {report_id}: {action.value} by {actor.id} refused ({decided.error.value})")
        return Outcome.failure(decided.error, decided.message)
    decision = decided.value

    if not await write_decision(db, models.Report, report_id, decision):
        await db.rollback()
        logger.info(f"Report {report_id}: {action.value} by {actor.id} lost a concurrent update")
        if decision.require_unassigned:
            return Outcome.failure(ErrorKind.CONFLICT, "Report has already been claimed by another worker")
        return Outcome.failure(ErrorKind.CONFLICT, "Report was changed by someone else, reload and retry")

    await admin_service.create_audit_log(
        db,
        action=f"report.{action.value}",
        user_id=actor.id,
        target_type="report",
        target_id=str(report_id),
        metadata={"from": decision.from_status.value, "to": decision.to_status.value},
        commit=False
    )
    await db.commit()
    await db.refresh(report)
    logger.info(f"Report {report_id}: {decision.from_status.value} -> {decision.to_status.value} by {actor.id}")

    message = f"Your report '{report.title}' {STATUS_MESSAGES[decision.to_status]}."
    if report.comment and decision.to_status == models.ReportStatus.REJECTED:
        message = f"{message} Reason: {report.comment}"
    await notification_service.notify_safely(
        user_id=report.created_by,
        title=f"Report {decision.to_status.value}",
        message=message,
        resource_type="report",
        resource_id=str(report.id)
    )
    return Outcome.success(report)

async def delete_report(db: AsyncSession, report_id: UUID, actor: auth_models.User) -> Outcome[None]:
    if actor.role != auth_models.UserRole.ADMIN:
        return Outcome.failure(ErrorKind.FORBIDDEN, "Only admins can delete reports")

    result = await db.execute(delete(models.Report).where(models.Report.id == report_id))
    if result.rowcount == 0:
        await db.rollback()
        return Outcome.failure(ErrorKind.NOT_FOUND, NOT_FOUND)

    await admin_service.create_audit_log(
        db,
        action="report.delete",
        user_id=actor.id,
        target_type="report",
        target_id=str(report_id),
        commit=False
    )
    await db.commit()
    return Outcome.success(None)
