"""Declarative page-route access table.

Each rule maps a path prefix to the capability a caller needs. The first rule
whose prefix matches wins, so the catch-all ``/`` rule goes last.
"""

from dataclasses import dataclass
from enum import Enum


class Capability(str, Enum):
    """What a caller needs to reach a route."""

    NONE = "none"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"
    GUEST_ONLY = "guest_only"  # login/signup pages: signed-in users are sent home


@dataclass(frozen=True)
class RouteRule:
    prefix: str
    capability: Capability

    def matches(self, path: str) -> bool:
        if self.prefix == "/":
            return True
        return path == self.prefix or path.startswith(self.prefix.rstrip("/") + "/")


@dataclass(frozen=True)
class RouteDecision:
    allowed: bool
    redirect_to: str | None = None


LOGIN_PATH = "/login"
HOME_PATH = "/"
ADMIN_HOME_PATH = "/admin"

ROUTE_TABLE: tuple[RouteRule, ...] = (
    RouteRule("/api", Capability.NONE),
    RouteRule("/healthz", Capability.NONE),
    RouteRule("/docs", Capability.NONE),
    RouteRule("/redoc", Capability.NONE),
    RouteRule("/openapi.json", Capability.NONE),
    RouteRule("/static", Capability.NONE),
    RouteRule("/favicon.ico", Capability.NONE),
    RouteRule(LOGIN_PATH, Capability.GUEST_ONLY),
    RouteRule("/signup", Capability.GUEST_ONLY),
    RouteRule(ADMIN_HOME_PATH, Capability.ADMIN),
    RouteRule("/tasks", Capability.AUTHENTICATED),
    RouteRule(HOME_PATH, Capability.AUTHENTICATED),
)

ALLOW = RouteDecision(allowed=True)


def capability_for(path: str, table: tuple[RouteRule, ...] = ROUTE_TABLE) -> Capability:
    """Look up the capability required for ``path``; unmatched paths need none."""
    for rule in table:
        if rule.matches(path):
            return rule.capability
    return Capability.NONE


def decide_route_access(
    path: str,
    *,
    is_authenticated: bool,
    is_admin: bool = False,
    hops: int = 0,
    max_hops: int = 2,
    table: tuple[RouteRule, ...] = ROUTE_TABLE,
) -> RouteDecision:
    """
    Decide whether a page request proceeds or is redirected.

    Args:
        path: Request path.
        is_authenticated: Whether the caller's session resolved.
        is_admin: Whether the resolved caller holds the admin role.
        hops: Redirects already taken in this chain.
        max_hops: Once reached, every request is allowed through.
        table: Route table to consult.

    Returns:
        RouteDecision; ``redirect_to`` is set when not allowed.
    """
    if hops >= max_hops:
        return ALLOW

    capability = capability_for(path, table)

    if capability is Capability.NONE:
        return ALLOW
    if capability is Capability.GUEST_ONLY:
        if is_authenticated:
            return RouteDecision(allowed=False, redirect_to=ADMIN_HOME_PATH if is_admin else HOME_PATH)
        return ALLOW
    if not is_authenticated:
        return RouteDecision(allowed=False, redirect_to=LOGIN_PATH)
    if capability is Capability.ADMIN and not is_admin:
        return RouteDecision(allowed=False, redirect_to=HOME_PATH)
    return ALLOW
