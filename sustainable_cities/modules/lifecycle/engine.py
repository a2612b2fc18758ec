"""
Lifecycle and authorization rules for reports and forum threads.

Reports:  Pending -> Approved -> In Progress -> Resolved -> Completed,
          or Pending -> Rejected.
Threads:  Pending -> Approved, or Pending -> Rejected.

``decide`` is pure: it looks at the current record, the acting user and
the request payload and returns the status change and field updates the
store has to apply atomically. It never touches the database.
"""
import enum
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from sustainable_cities.modules.auth.models import UserRole
from sustainable_cities.modules.forum.models import ThreadStatus
from sustainable_cities.modules.lifecycle.outcome import ErrorKind, Outcome
from sustainable_cities.modules.reports.models import ReportStatus


class RecordKind(str, enum.Enum):
    REPORT = "report"
    THREAD = "thread"


class Action(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"
    START_WORK = "start_work"
    RESOLVE = "resolve"
    COMPLETE = "complete"


ADMIN_ONLY = frozenset({UserRole.ADMIN})
WORKER_ONLY = frozenset({UserRole.WORKER})


@dataclass(frozen=True)
class TransitionRule:
    to: enum.Enum
    roles: FrozenSet[UserRole]
    # Payload fields that must be present and non-blank
    required: Tuple[str, ...] = ()
    assignee_only: bool = False
    claims: bool = False


REPORT_TRANSITIONS: Dict[Tuple[ReportStatus, Action], TransitionRule] = {
    (ReportStatus.PENDING, Action.APPROVE): TransitionRule(ReportStatus.APPROVED, ADMIN_ONLY),
    (ReportStatus.PENDING, Action.REJECT): TransitionRule(ReportStatus.REJECTED, ADMIN_ONLY, required=("comment",)),
    (ReportStatus.APPROVED, Action.START_WORK): TransitionRule(ReportStatus.IN_PROGRESS, WORKER_ONLY, claims=True),
    (ReportStatus.IN_PROGRESS, Action.RESOLVE): TransitionRule(
        ReportStatus.RESOLVED, WORKER_ONLY, required=("resolution_details",), assignee_only=True
    ),
    (ReportStatus.RESOLVED, Action.COMPLETE): TransitionRule(ReportStatus.COMPLETED, ADMIN_ONLY),
}

THREAD_TRANSITIONS: Dict[Tuple[ThreadStatus, Action], TransitionRule] = {
    (ThreadStatus.PENDING, Action.APPROVE): TransitionRule(ThreadStatus.APPROVED, ADMIN_ONLY),
    (ThreadStatus.PENDING, Action.REJECT): TransitionRule(ThreadStatus.REJECTED, ADMIN_ONLY, required=("comment",)),
}

TRANSITIONS = {
    RecordKind.REPORT: REPORT_TRANSITIONS,
    RecordKind.THREAD: THREAD_TRANSITIONS,
}

TERMINAL_STATES = {
    RecordKind.REPORT: frozenset({ReportStatus.REJECTED, ReportStatus.COMPLETED}),
    RecordKind.THREAD: frozenset({ThreadStatus.APPROVED, ThreadStatus.REJECTED}),
}


@dataclass(frozen=True)
class Decision:
    kind: RecordKind
    action: Action
    from_status: enum.Enum
    to_status: enum.Enum
    changes: Dict[str, Any] = field(default_factory=dict)
    # The write must only succeed while nobody holds the record
    require_unassigned: bool = False


def _text(payload: Mapping[str, Any], name: str) -> Optional[str]:
    value = payload.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def allowed_actions(kind: RecordKind, status: enum.Enum, role: UserRole) -> Tuple[Action, ...]:
    """Actions ``role`` may attempt on a record in ``status``, for UI hints."""
    return tuple(
        action for (from_status, action), rule in TRANSITIONS[kind].items()
        if from_status == status and role in rule.roles
    )


def initial_thread_status(role: UserRole) -> ThreadStatus:
    # Admin posts skip moderation
    if role == UserRole.ADMIN:
        return ThreadStatus.APPROVED
    return ThreadStatus.PENDING


def decide(
    kind: RecordKind,
    record: Any,
    action: Action,
    actor: Any,
    payload: Optional[Mapping[str, Any]] = None,
) -> Outcome[Decision]:
    payload = payload or {}
    status = record.status
    assigned_to = getattr(record, "assigned_to", None)

    if status in TERMINAL_STATES[kind]:
        return Outcome.failure(ErrorKind.INVALID_STATE, f"{kind.value} is {status.value} and accepts no further changes")

    if action == Action.START_WORK and assigned_to is not None and assigned_to != actor.id:
        return Outcome.failure(ErrorKind.CONFLICT, "Report has already been claimed by another worker")

    rule = TRANSITIONS[kind].get((status, action))
    if rule is None:
        return Outcome.failure(ErrorKind.INVALID_STATE, f"Cannot {action.value} a {kind.value} that is {status.value}")

    if actor.role not in rule.roles:
        return Outcome.failure(ErrorKind.FORBIDDEN, f"Role {actor.role.value} may not {action.value} a {kind.value}")

    if rule.assignee_only and assigned_to != actor.id:
        return Outcome.failure(ErrorKind.FORBIDDEN, "Only the assigned worker can do this")

    changes: Dict[str, Any] = {"status": rule.to}
    for name in rule.required:
        value = _text(payload, name)
        if value is None:
            return Outcome.failure(ErrorKind.VALIDATION_ERROR, f"{name} is required")
        changes[name] = value

    if rule.claims:
        changes["assigned_to"] = actor.id
    if action == Action.RESOLVE:
        changes["resolution_images"] = list(payload.get("resolution_images") or [])

    return Outcome.success(
        Decision(
            kind=kind,
            action=action,
            from_status=status,
            to_status=rule.to,
            changes=changes,
            require_unassigned=rule.claims,
        )
    )
