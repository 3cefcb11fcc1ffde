"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from daily_tracker.api.routes import router as schedule_router
from daily_tracker.app_logging import configure_logging
from daily_tracker.containers import AppContainer
from daily_tracker.domain.errors import (
    ConflictRetry,
    DatastoreUnavailable,
    OwnershipViolation,
    TemplateNotFound,
    WriteFailure,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(schedule_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(DatastoreUnavailable)
    @app.exception_handler(WriteFailure)
    async def datastore_error(request: Request, exc: RuntimeError) -> JSONResponse:
        logger.error("Datastore error on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc)},
        )

    @app.exception_handler(ConflictRetry)
    async def conflict_error(request: Request, exc: ConflictRetry) -> JSONResponse:
        logger.warning("Ledger conflict on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(TemplateNotFound)
    async def template_not_found(
        request: Request, exc: TemplateNotFound
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": f"Template {exc} not found"},
        )

    @app.exception_handler(OwnershipViolation)
    async def ownership_error(
        request: Request, exc: OwnershipViolation
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(ValueError)
    async def invalid_value(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
        )

    return app
