"""Wire representation of the session token cookie.

Both builders are pure: they read settings and return a value, the HTTP layer
decides when to attach it.
"""

from dataclasses import dataclass, field
from typing import Any

from starlette.responses import Response

from tasktracker.core.config import Settings, get_settings


@dataclass(frozen=True)
class SessionCookie:
    """Name, value and attributes of a session cookie."""

    name: str
    value: str
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def is_blank(self) -> bool:
        return self.value == ""

    def apply(self, response: Response) -> None:
        """Attach this cookie to a response as a Set-Cookie header."""
        response.set_cookie(key=self.name, value=self.value, **self.attributes)


def _base_attributes(settings: Settings) -> dict[str, Any]:
    return {
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": settings.COOKIE_SAMESITE,
        "path": "/",
        "domain": settings.COOKIE_DOMAIN or None,
    }


def create_session_cookie(session_id: str, settings: Settings | None = None) -> SessionCookie:
    """Build the cookie that carries ``session_id`` for the session lifetime."""
    settings = settings or get_settings()
    attributes = _base_attributes(settings)
    attributes["max_age"] = settings.SESSION_EXPIRE_DAYS * 24 * 60 * 60
    return SessionCookie(
        name=settings.SESSION_COOKIE_NAME,
        value=session_id,
        attributes=attributes,
    )


def create_blank_session_cookie(settings: Settings | None = None) -> SessionCookie:
    """Build the cookie that tells the client to drop its session token."""
    settings = settings or get_settings()
    attributes = _base_attributes(settings)
    attributes["max_age"] = 0
    return SessionCookie(
        name=settings.SESSION_COOKIE_NAME,
        value="",
        attributes=attributes,
    )
