"""
Route authorization table for the web client.

Every page prefix maps to the roles allowed to open it and to where
everyone else is sent. The client asks once per navigation
(``GET /auth/route-access``) instead of repeating role checks in layouts,
pages and middleware.
"""
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple
from urllib.parse import quote

from sustainable_cities.modules.auth.models import UserRole

LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"

ANY_ROLE: FrozenSet[UserRole] = frozenset(UserRole)


@dataclass(frozen=True)
class RouteRule:
    prefix: str
    roles: FrozenSet[UserRole]
    # Where an authenticated user without the role goes
    redirect_to: str = HOME_PATH


@dataclass(frozen=True)
class RouteDecision:
    allowed: bool
    redirect_to: Optional[str] = None


# Longest prefix wins; paths not listed are public.
ROUTE_RULES: Tuple[RouteRule, ...] = (
    RouteRule("/admin", frozenset({UserRole.ADMIN})),
    RouteRule("/worker", frozenset({UserRole.WORKER})),
    RouteRule("/dashboard", ANY_ROLE),
    RouteRule("/cities", ANY_ROLE),
    RouteRule("/reports", ANY_ROLE),
    RouteRule("/my-reports", ANY_ROLE),
    RouteRule("/profile", ANY_ROLE),
    RouteRule("/forum/new", ANY_ROLE),
)


def _matches(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def match_rule(path: str) -> Optional[RouteRule]:
    candidates = [rule for rule in ROUTE_RULES if _matches(path, rule.prefix)]
    if not candidates:
        return None
    return max(candidates, key=lambda rule: len(rule.prefix))


def evaluate(path: str, role: Optional[UserRole]) -> RouteDecision:
    """Decide whether a caller with ``role`` (None when signed out) may open ``path``."""
    rule = match_rule(path)
    if rule is None:
        return RouteDecision(allowed=True)
    if role is None:
        return RouteDecision(allowed=False, redirect_to=f"{LOGIN_PATH}?redirect={quote(path)}")
    if role in rule.roles:
        return RouteDecision(allowed=True)
    return RouteDecision(allowed=False, redirect_to=rule.redirect_to)
