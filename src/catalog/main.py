from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.catalog.api.middlewares import setup_middlewares
from src.catalog.api.v1.router import api_router
from src.catalog.core import mongo
from src.catalog.core.config import get_settings
from src.catalog.core.exceptions import setup_exception_handlers
from src.catalog.core.logging import get_logger, setup_logging
from src.catalog.core.redis import HEALTHY, NOT_CONFIGURED, check_redis, close_redis
from src.catalog.core.shutdown import request_tracker
from src.catalog.models import get_registry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug, settings.log_level, settings.log_json)

    # Misconfigured relationships fail here, before any request is served
    registry = get_registry()
    logger.info(f"Starting {settings.app_name}", collections=len(registry))

    yield

    await request_tracker.start_shutdown()
    drained = await request_tracker.wait_for_drain(timeout=settings.shutdown_grace_period)
    if not drained:
        logger.warning(
            "Closing connections with requests still in flight",
            in_flight=request_tracker.in_flight_count,
        )

    logger.info("Closing connections...")
    await close_redis()
    mongo.close_mongo()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "entities", "description": "Registry-driven CRUD over catalog collections"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Catalog API with sequence ids and reference hydration",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)
    setup_middlewares(app, settings)
    app.include_router(api_router)

    @app.get("/health")
    async def health() -> JSONResponse:
        """Health check with dependency validation."""
        if request_tracker.is_shutting_down:
            return JSONResponse(
                content={
                    "status": "shutting_down",
                    "in_flight_requests": request_tracker.in_flight_count,
                },
                status_code=503,
            )

        health_status: dict[str, Any] = {
            "status": "healthy",
            "database": "unknown",
            "redis": "not_configured",
        }

        try:
            await mongo.ping()
            health_status["database"] = "healthy"
        except Exception as e:
            health_status["database"] = f"unhealthy: {str(e)}"
            health_status["status"] = "unhealthy"

        redis_status = await check_redis()
        health_status["redis"] = redis_status
        if redis_status != HEALTHY:
            # Redis only matters for the redis sequence backend
            if settings.sequence_backend == "redis":
                health_status["status"] = "unhealthy"
            elif redis_status != NOT_CONFIGURED and health_status["status"] == "healthy":
                health_status["status"] = "degraded"

        status_code = 200 if health_status["status"] == "healthy" else 503
        return JSONResponse(content=health_status, status_code=status_code)

    return app


app = create_app()
