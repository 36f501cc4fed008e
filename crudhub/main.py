"""
FastAPI application factory and ASGI entry point.

    uvicorn crudhub.main:app
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
import logging
from typing import Dict, Any, Optional

from crudhub.application.dto.base_dto import HealthCheckResponseDTO
from crudhub.config import Settings, get_settings
from crudhub.infrastructure.db.database import Database
from crudhub.infrastructure.logging_config import configure_logging
from crudhub.infrastructure.web.middleware.error_handler import (
    ErrorHandlerMiddleware,
    register_exception_handlers
)
from crudhub.infrastructure.web.routers import clients, invoices, categories, products


logger = logging.getLogger(__name__)

# (module, path segment, OpenAPI tag)
ROUTERS = (
    (clients, "clients", "Clients"),
    (invoices, "invoices", "Invoices"),
    (categories, "categories", "Categories"),
    (products, "products", "Products"),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    database: Database = app.state.database

    logger.info("Starting %s v%s (%s)", settings.api_title, settings.api_version, settings.environment)

    # Server databases are migrated with manage_db.py
    if database.is_sqlite and not settings.is_production:
        database.create_tables()
        logger.info("SQLite schema ready")

    yield

    database.dispose()
    logger.info("Database connections closed")


def create_application(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application around one Database instance.
    Tests pass their own settings and an in-memory database.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    docs_enabled = settings.debug
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        debug=settings.debug,
        docs_url=f"{settings.api_prefix}/docs" if docs_enabled else None,
        redoc_url=f"{settings.api_prefix}/redoc" if docs_enabled else None,
        openapi_url=f"{settings.api_prefix}/openapi.json" if docs_enabled else None,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    if settings.is_production:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    app.add_middleware(ErrorHandlerMiddleware, debug=settings.debug)
    register_exception_handlers(app)

    for module, segment, tag in ROUTERS:
        app.include_router(module.router, prefix=f"{settings.api_prefix}/{segment}", tags=[tag])

    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Service name, version and where to look next."""
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "environment": settings.environment,
            "docs": f"{settings.api_prefix}/docs" if docs_enabled else None,
            "health": f"{settings.api_prefix}/health"
        }

    @app.get(f"{settings.api_prefix}/health", response_model=HealthCheckResponseDTO)
    def health_check(request: Request) -> HealthCheckResponseDTO:
        """Liveness plus a SELECT 1 round trip to the database."""
        request.app.state.database.ping()
        return HealthCheckResponseDTO(
            status="healthy",
            version=settings.api_version,
            dependencies={"database": "ok"}
        )

    return app


app = create_application()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "crudhub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level="debug" if settings.debug else "info",
    )
