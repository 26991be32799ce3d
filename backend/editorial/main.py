"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from editorial.application.services import AuditService, CategoryService
from editorial.config import Settings, get_settings
from editorial.domain.exceptions import (
    AuthenticationError,
    ConflictError,
    EditorialError,
    EntityNotFoundError,
    ForbiddenError,
    ValidationError,
)
from editorial.infrastructure.database import Base, build_engine, build_session_factory, session_scope
from editorial.infrastructure.database.repositories import (
    SQLAlchemyAuditLogRepository,
    SQLAlchemyCategoryRepository,
)
from editorial.infrastructure.logging.log_config import setup_logging
from editorial.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)

# Checked in order; subclasses before their bases.
_STATUS_BY_ERROR: list[tuple[type[EditorialError], int]] = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
]


def status_for(exc: EditorialError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def editorial_error_handler(request: Request, exc: EditorialError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error("Unmapped editorial error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=code,
        content={"code": exc.code, "message": exc.message, "details": exc.details},
    )


async def _seed_system_category(app: FastAPI) -> None:
    """Ensure the fallback category exists. Idempotent, safe on every startup."""
    settings: Settings = app.state.settings
    async with session_scope(app.state.session_factory) as session:
        service = CategoryService(
            SQLAlchemyCategoryRepository(session),
            AuditService(SQLAlchemyAuditLogRepository(session)),
            max_depth=settings.max_category_depth,
            system_slug=settings.system_category_slug,
            system_name=settings.system_category_name,
        )
        await service.ensure_system_category()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: build the engine, create tables, seed the system category."""
    settings: Settings = app.state.settings
    setup_logging(settings)

    engine = build_engine(settings.database_url)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await _seed_system_category(app)
    logger.info("Editorial engine ready (%s)", settings.app_env)

    yield

    await engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(EditorialError, editorial_error_handler)
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "editorial.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
