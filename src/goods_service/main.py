from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.goods_service.api.middlewares import setup_middlewares
from src.goods_service.api.routes.router import api_router
from src.goods_service.core.config import get_settings
from src.goods_service.core.db import dispose_engine
from src.goods_service.core.exceptions import setup_exception_handlers
from src.goods_service.core.health import setup_health_endpoint, setup_metrics
from src.goods_service.core.logging import get_logger, setup_logging
from src.goods_service.core.metrics import get_metrics
from src.goods_service.core.redis import close_redis

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}", env=settings.app_env)

    yield

    logger.info("Closing connections...")
    await close_redis()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "projects", "description": "Project management"},
    {"name": "goods", "description": "Goods CRUD and priority ranking"},
    {"name": "health", "description": "Liveness and dependency status"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Projects and their prioritized goods",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
    )
    app.state.metrics = get_metrics()

    setup_exception_handlers(app)
    setup_middlewares(app, settings)

    app.include_router(api_router)

    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
