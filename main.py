"""
Main application entry point for the ContactDesk API.

This module builds the FastAPI application: it configures logging, opens
the database handle, sets up CORS, registers the error handlers that
render every failure as ``{"error": ...}`` and includes the routers for
authentication, users, contacts, addresses and tasks.

Modules:
- FastAPI: Web framework
- CORSMiddleware: Middleware for handling CORS
- contactdesk.database: Database handle
- contactdesk.errors: Error taxonomy
- contactdesk.auth / users / contacts / addresses / tasks: Routers
- contactdesk.core: Application settings
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from contactdesk import addresses, contacts, tasks
from contactdesk.auth import router as auth_router
from contactdesk.core import Settings, get_settings
from contactdesk.database import Database
from contactdesk.errors import (
    ContactDeskError,
    InternalError,
    Unauthorized,
    ValidationError,
)
from contactdesk.log import configure_logging
from contactdesk.users import router as users_router


def _field_errors(exc: RequestValidationError) -> list[dict]:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": field, "message": message})
    return errors


async def contactdesk_error_handler(request: Request, exc: ContactDeskError):
    """Render a domain error as ``{"error": message}``."""
    content: dict = {"error": exc.message}
    headers = None
    if isinstance(exc, ValidationError) and exc.errors:
        content["errors"] = exc.errors
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Render schema violations as a 400 listing every offending field."""
    error = ValidationError(errors=_field_errors(exc))
    return await contactdesk_error_handler(request, error)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def internal_error_handler(request: Request, exc: Exception):
    """Log an unexpected failure and hide its details from the client."""
    logger.opt(exception=exc).error(
        "Unhandled error on {} {}", request.method, request.url.path
    )
    return await contactdesk_error_handler(request, InternalError())


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build a ContactDesk application.

    Args:
        settings (Settings | None): Configuration to use; the cached
            environment settings when omitted.

    Returns:
        FastAPI: Application with its own :class:`Database` on ``app.state``.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    database = Database(settings.DATABASE_URL)
    # Create tables (no migration tooling)
    database.create_all()

    app = FastAPI(title="ContactDesk API")
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ContactDeskError, contactdesk_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(contacts.router)
    app.include_router(addresses.router)
    app.include_router(tasks.router)

    @app.get("/")
    def root():
        """
        Root endpoint for the API.

        Returns a simple JSON message directing users to the Swagger UI.
        """
        return {"msg": "ContactDesk API. Visit /docs for Swagger UI"}

    logger.info("ContactDesk API ready ({} environment)", settings.ENVIRONMENT)
    return app


app = create_app()
