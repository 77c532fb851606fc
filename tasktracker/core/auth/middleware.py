"""Page-route gate applying the route access table once per request."""

import logging
from collections.abc import Callable

from fastapi import status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from tasktracker.core.auth.cookies import SessionCookie
from tasktracker.core.auth.dependencies import read_session_token
from tasktracker.core.auth.route_access import (
    Capability,
    capability_for,
    decide_route_access,
)
from tasktracker.core.auth.session_manager import ANONYMOUS, SessionManager
from tasktracker.core.config import get_settings
from tasktracker.core.db.session import SessionLocal
from tasktracker.core.exceptions import SessionStoreError

logger = logging.getLogger(__name__)

REDIRECT_COUNT_PARAM = "redirect_count"


def _parse_hops(raw: str | None) -> int:
    try:
        return max(int(raw or 0), 0)
    except ValueError:
        return 0


class RouteAccessMiddleware(BaseHTTPMiddleware):
    """Redirects page requests the caller may not see.

    API paths are exempt (capability NONE); procedures there are gated by
    the dependency guards instead.
    """

    def __init__(
        self,
        app,
        session_factory: Callable[[], Session] = SessionLocal,
        max_hops: int | None = None,
    ) -> None:
        super().__init__(app)
        self.session_factory = session_factory
        self.max_hops = max_hops if max_hops is not None else get_settings().MAX_REDIRECT_HOPS

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if capability_for(path) is Capability.NONE:
            return await call_next(request)

        token = read_session_token(request)
        result = ANONYMOUS
        cookie: SessionCookie | None = None
        if token:
            db = self.session_factory()
            try:
                manager = SessionManager(db)
                result = manager.validate_session(token)
                if result.session is not None and result.session.fresh:
                    cookie = manager.create_session_cookie(result.session.id)
                elif result.session is None:
                    cookie = manager.create_blank_session_cookie()
            except SessionStoreError:
                logger.error("Route gate could not reach the session store", exc_info=True)
                return JSONResponse(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    content={
                        "error": {
                            "code": "INTERNAL_SERVER_ERROR",
                            "message": "Internal server error",
                            "details": None,
                        },
                        "data": None,
                    },
                )
            finally:
                db.close()

        hops = _parse_hops(request.query_params.get(REDIRECT_COUNT_PARAM))
        decision = decide_route_access(
            path,
            is_authenticated=result.is_authenticated,
            is_admin=bool(result.user and result.user.is_admin),
            hops=hops,
            max_hops=self.max_hops,
        )

        if decision.allowed:
            response = await call_next(request)
        else:
            response = RedirectResponse(
                url=f"{decision.redirect_to}?{REDIRECT_COUNT_PARAM}={hops + 1}",
                status_code=status.HTTP_307_TEMPORARY_REDIRECT,
            )

        if cookie is not None:
            cookie.apply(response)
        return response
