"""
FastAPI application for wordwise.

Provides REST API for:
- Vocabulary catalog access
- Learner review queue, attempts and progress
- Teacher dashboard statistics
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from wordwise.api.routers import student_router, teacher_router, words_router
from wordwise.bootstrap import Services, build_services
from wordwise.config import get_settings
from wordwise.core.errors import NotFoundError, StorageError, ValidationError


_REQUEST_PARTS = ("body", "query", "path", "header")


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def handle_validation(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"message": exc.message, "field": exc.field})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in _REQUEST_PARTS) or None
        return JSONResponse(
            status_code=400,
            content={"message": first.get("msg", "Invalid request"), "field": field},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"message": str(exc), "field": None})

    @app.exception_handler(StorageError)
    async def handle_storage(request: Request, exc: StorageError) -> JSONResponse:
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=503,
            content={"message": "Storage unavailable, nothing was saved", "field": None},
        )


def create_app(services: Services | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        services: Pre-built services (tests inject in-memory ones). When None,
            SQL-backed services are built from settings at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = services is None
        if owned:
            logger.info("Starting wordwise service...")
            app.state.services = build_services(get_settings())
        yield
        if owned:
            logger.info("Shutting down wordwise service...")
            app.state.services.close()

    app = FastAPI(
        title="wordwise",
        description="Spaced-repetition scheduling for vocabulary practice",
        version="1.0.0",
        lifespan=lifespan,
    )
    if services is not None:
        app.state.services = services

    _register_error_handlers(app)

    app.include_router(words_router.router, prefix="/api/words", tags=["words"])
    app.include_router(student_router.router, prefix="/api/student", tags=["student"])
    app.include_router(teacher_router.router, prefix="/api/teacher", tags=["teacher"])

    @app.get("/health", tags=["health"])
    def health(request: Request) -> dict[str, Any]:
        db = request.app.state.services.db
        status, error = db.check_health() if db is not None else ("ok", None)
        return {
            "status": "healthy" if status == "ok" else "degraded",
            "database": status,
            "error": error,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app
