"""
Read scoping: which reports and threads a user may see.

Each scope exists twice, as a SQL filter for list/get queries and as a
predicate over an already loaded record. Both must agree, so a record
hidden from a list can't be fetched by id either.
"""
from typing import Any

from sqlalchemy import or_, true

from sustainable_cities.modules.auth.models import UserRole
from sustainable_cities.modules.forum.models import ForumThread, ThreadStatus
from sustainable_cities.modules.reports.models import Report, ReportStatus


def report_scope(user: Any):
    if user.role == UserRole.ADMIN:
        return true()
    if user.role == UserRole.WORKER:
        return or_(Report.assigned_to == user.id, Report.status == ReportStatus.APPROVED)
    return Report.created_by == user.id


def can_read_report(user: Any, report: Any) -> bool:
    if user.role == UserRole.ADMIN:
        return True
    if user.role == UserRole.WORKER:
        return report.assigned_to == user.id or report.status == ReportStatus.APPROVED
    return report.created_by == user.id


def thread_scope(user: Any):
    if user.role == UserRole.ADMIN:
        return true()
    return or_(ForumThread.status == ThreadStatus.APPROVED, ForumThread.created_by == user.id)


def can_read_thread(user: Any, thread: Any) -> bool:
    if user.role == UserRole.ADMIN:
        return True
    return thread.status == ThreadStatus.APPROVED or thread.created_by == user.id
