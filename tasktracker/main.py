import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from tasktracker.api.v1 import api_router
from tasktracker.core.auth.dependencies import pending_session_cookie
from tasktracker.core.auth.middleware import RouteAccessMiddleware
from tasktracker.core.config import get_settings
from tasktracker.core.db.session import SessionLocal
from tasktracker.core.exceptions import APIException, SessionStoreError

settings = get_settings()
logger = logging.getLogger("tasktracker")

app = FastAPI(
    title="Task Tracker API",
    version="0.1.0",
    description="Multi-user task tracker with cookie sessions and role-based access",
    docs_url="/docs",
    openapi_url="/openapi.json",
)

# Route gate runs inside CORS so preflight requests never reach it
app.add_middleware(RouteAccessMiddleware, session_factory=SessionLocal)

if settings.CORS_ORIGINS:
    origins = [origin.strip() for origin in settings.CORS_ORIGINS.split(",")]
else:
    origins = ["http://localhost:5173", "http://localhost:3000"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def internal_error_response() -> JSONResponse:
    """Generic 500 body; store or stack details never reach the client."""
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


def with_session_cookie(request: Request, response: JSONResponse) -> JSONResponse:
    """Carry a rotated or blank session cookie onto an error response."""
    cookie = pending_session_cookie(request)
    if cookie is not None:
        cookie.apply(response)
    return response


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handle APIException and return standard error format."""
    # exc.detail already contains {"error": {...}}, add data: null for API contract compliance
    response_content = exc.detail.copy()
    response_content["data"] = None
    response = JSONResponse(
        status_code=exc.status_code,
        content=response_content,
        headers=exc.headers,
    )
    return with_session_cookie(request, response)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert framework validation errors to the standard 400 error format."""
    details: dict[str, list[str]] = {}
    for error in exc.errors():
        # ["body", "email"] -> "email"; model-level errors keep their location name
        field_path = error.get("loc") or ("request",)
        field_name = str(field_path[-1] if len(field_path) > 1 else field_path[0])
        details.setdefault(field_name, []).append(error["msg"])

    response = JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Validation failed",
                "details": details,
            },
            "data": None,
        },
    )
    return with_session_cookie(request, response)


@app.exception_handler(SessionStoreError)
async def session_store_exception_handler(request: Request, exc: SessionStoreError) -> JSONResponse:
    logger.error("Session store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return with_session_cookie(request, internal_error_response())


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database failure on %s %s", request.method, request.url.path, exc_info=exc)
    return with_session_cookie(request, internal_error_response())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return with_session_cookie(request, internal_error_response())


@app.get("/healthz", tags=["system"])
def healthz():
    """Health check endpoint."""
    return {
        "status": "ok",
        "env": settings.ENV,
        "debug": settings.DEBUG,
    }


app.include_router(api_router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tasktracker.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
