"""Unit tests for the route access table."""

import pytest

from tasktracker.core.auth.route_access import (
    Capability,
    RouteRule,
    capability_for,
    decide_route_access,
)


@pytest.mark.parametrize(
    ("path", "capability"),
    [
        ("/api/v1/tasks", Capability.NONE),
        ("/healthz", Capability.NONE),
        ("/docs", Capability.NONE),
        ("/login", Capability.GUEST_ONLY),
        ("/signup", Capability.GUEST_ONLY),
        ("/admin", Capability.ADMIN),
        ("/admin/users", Capability.ADMIN),
        ("/tasks/123", Capability.AUTHENTICATED),
        ("/", Capability.AUTHENTICATED),
        ("/settings", Capability.AUTHENTICATED),
    ],
)
def test_capability_for(path, capability):
    """Test looking up the capability for a path."""
    assert capability_for(path) is capability


def test_prefix_does_not_match_longer_segment():
    """Test that /admin does not cover /administrator."""
    rule = RouteRule("/admin", Capability.ADMIN)

    assert rule.matches("/admin") is True
    assert rule.matches("/admin/x") is True
    assert rule.matches("/administrator") is False


def test_first_matching_rule_wins():
    """Test that table order decides."""
    table = (
        RouteRule("/reports/public", Capability.NONE),
        RouteRule("/reports", Capability.ADMIN),
    )

    assert capability_for("/reports/public/1", table) is Capability.NONE
    assert capability_for("/reports/1", table) is Capability.ADMIN
    assert capability_for("/elsewhere", table) is Capability.NONE


def test_anonymous_redirected_to_login():
    """Test that protected pages send anonymous callers to login."""
    decision = decide_route_access("/tasks", is_authenticated=False)

    assert decision.allowed is False
    assert decision.redirect_to == "/login"

    decision = decide_route_access("/admin", is_authenticated=False)
    assert decision.redirect_to == "/login"


def test_non_admin_redirected_home_from_admin():
    """Test that a signed-in user without admin role is sent home."""
    decision = decide_route_access("/admin", is_authenticated=True, is_admin=False)

    assert decision.allowed is False
    assert decision.redirect_to == "/"


def test_admin_allowed_on_admin_pages():
    """Test that admins reach admin pages."""
    assert decide_route_access("/admin", is_authenticated=True, is_admin=True).allowed is True


def test_signed_in_user_leaves_login_page():
    """Test that guest-only pages redirect signed-in callers."""
    user = decide_route_access("/login", is_authenticated=True)
    admin = decide_route_access("/signup", is_authenticated=True, is_admin=True)

    assert user.redirect_to == "/"
    assert admin.redirect_to == "/admin"


def test_guest_reaches_login_page():
    """Test that anonymous callers can open login."""
    assert decide_route_access("/login", is_authenticated=False).allowed is True


def test_hop_bound_always_allows():
    """Test that the redirect chain stops at the hop bound."""
    assert decide_route_access("/admin", is_authenticated=False, hops=1, max_hops=2).allowed is False
    assert decide_route_access("/admin", is_authenticated=False, hops=2, max_hops=2).allowed is True
    assert decide_route_access("/login", is_authenticated=True, hops=5, max_hops=2).allowed is True


def test_api_paths_always_allowed():
    """Test that API paths are never redirected."""
    assert decide_route_access("/api/v1/admin/users", is_authenticated=False).allowed is True
