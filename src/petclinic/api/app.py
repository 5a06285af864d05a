"""
FastAPI application factory for the petclinic REST API.

``create_app`` wires settings, the database session manager, CORS, the
exception handlers and the resource routers into one application.
"""

import json
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from .. import __version__
from ..database import SessionManager, check_connection, create_engine, seed_demo_data
from ..exceptions import (
    AuthenticationException,
    ConnectionException,
    DatabaseException,
    PetClinicException,
    ValidationException,
    create_error_response,
    format_validation_errors,
    log_exception_context,
)
from ..models import Base
from ..utils.config import AppSettings
from .routers import ROUTERS

logger = logging.getLogger(__name__)

# Request locations FastAPI prefixes to validation error paths
_REQUEST_LOCATIONS = ("body", "path", "query", "header")


def _violation_headers(violations: Dict[str, str]) -> Dict[str, str]:
    return {"errors": json.dumps(violations, sort_keys=True)}


async def petclinic_exception_handler(
    request: Request, exc: PetClinicException
) -> JSONResponse:
    """Map the exception hierarchy onto status codes and JSON bodies."""
    if isinstance(exc, ValidationException):
        return JSONResponse(
            content=exc.payload,
            status_code=exc.status_code,
            headers=_violation_headers(exc.violations),
        )

    headers = None
    if isinstance(exc, AuthenticationException):
        headers = {"WWW-Authenticate": 'Basic realm="petclinic"'}

    if exc.status_code >= 500:
        log_exception_context(
            exc, {"method": request.method, "path": request.url.path}, logger
        )
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")

    return JSONResponse(
        content=create_error_response(exc),
        status_code=exc.status_code,
        headers=headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Undecodable bodies and malformed path or query values answer 400."""
    errors: List[Dict[str, Any]] = []
    for error in exc.errors():
        loc = tuple(error.get("loc", ()))
        if loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        errors.append({**error, "loc": loc})

    violations = {
        field: "; ".join(messages)
        for field, messages in format_validation_errors(errors).items()
    }
    logger.warning(f"{request.method} {request.url.path} rejected: {violations}")
    return JSONResponse(
        content=None,
        status_code=status.HTTP_400_BAD_REQUEST,
        headers=_violation_headers(violations),
    )


async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Store failures answer a generic 500."""
    error = DatabaseException("Database operation failed", error_code="DATABASE_ERROR")
    log_exception_context(
        exc, {"method": request.method, "path": request.url.path}, logger
    )
    return JSONResponse(
        content=create_error_response(error),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log_exception_context(
        exc, {"method": request.method, "path": request.url.path}, logger
    )
    return JSONResponse(
        content={
            "success": False,
            "error": {
                "type": "InternalServerError",
                "code": "INTERNAL_ERROR",
                "message": "Internal server error",
            },
        },
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def create_app(
    settings: Optional[AppSettings] = None,
    session_manager: Optional[SessionManager] = None,
) -> FastAPI:
    """
    Build the petclinic application.

    Args:
        settings: Runtime settings, read from the environment when omitted
        session_manager: Pre-built session manager; when omitted the lifespan
            creates one from ``settings`` and disposes of it on shutdown

    Returns:
        Configured FastAPI application
    """
    settings = settings or AppSettings.from_environment()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        owns_manager = app.state.session_manager is None
        if owns_manager:
            engine = create_engine(
                settings.database_url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                echo=settings.db_echo,
            )
            if not await check_connection(engine):
                await engine.dispose()
                raise ConnectionException(database_url=settings.database_url)
            app.state.session_manager = SessionManager(engine)

        manager: SessionManager = app.state.session_manager
        logger.info(
            f"Starting {settings.app_name} {__version__} "
            f"(security {'enabled' if settings.security_enabled else 'disabled'})"
        )

        if settings.create_schema:
            await manager.initialize_database(Base.metadata)
        if settings.seed_data:
            await manager.execute_in_transaction(seed_demo_data)

        try:
            yield
        finally:
            if owns_manager:
                await manager.close_all_sessions()
                app.state.session_manager = None
            logger.info(f"{settings.app_name} shut down")

    app = FastAPI(
        title="Petclinic REST API",
        description="CRUD endpoints for pet types, specialties, vets, owners, pets and visits.",
        version=__version__,
        docs_url=settings.docs_url or None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_manager = session_manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["errors", "content-type"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration_ms = round((time.time() - start_time) * 1000, 2)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} ({duration_ms} ms)"
        )
        return response

    app.add_exception_handler(PetClinicException, petclinic_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    for router in ROUTERS:
        app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root() -> RedirectResponse:
        """Send visitors to the interactive API documentation."""
        return RedirectResponse(
            url=settings.docs_url or app.openapi_url,
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        )

    @app.get("/health", tags=["health"])
    async def health(request: Request) -> JSONResponse:
        manager: Optional[SessionManager] = request.app.state.session_manager
        if manager is None:
            return JSONResponse(
                {"status": "unhealthy", "checks": {}},
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        result = await manager.health_check()
        code = (
            status.HTTP_200_OK
            if result["status"] == "healthy"
            else status.HTTP_503_SERVICE_UNAVAILABLE
        )
        return JSONResponse(result, status_code=code)

    return app
