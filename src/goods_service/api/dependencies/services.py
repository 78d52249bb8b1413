"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from src.goods_service.api.dependencies.db import DBSession
from src.goods_service.api.dependencies.repositories import GoodsRepo, ProjectRepo
from src.goods_service.core.cache import Cache
from src.goods_service.core.config import get_settings
from src.goods_service.core.metrics import Metrics
from src.goods_service.services import GoodsService, ProjectService, Services


def get_app_metrics(request: Request) -> Metrics:
    """Metrics handles created at application startup."""
    return request.app.state.metrics


AppMetrics = Annotated[Metrics, Depends(get_app_metrics)]


def get_cache(metrics: AppMetrics) -> Cache:
    """Get the read-through cache."""
    return Cache(ttl=get_settings().cache_ttl_seconds, metrics=metrics)


CacheDep = Annotated[Cache, Depends(get_cache)]


def get_project_service(
    project_repo: ProjectRepo,
    session: DBSession,
    cache: CacheDep,
) -> ProjectService:
    """Get project service."""
    settings = get_settings()
    return ProjectService(
        project_repo,
        session,
        cache,
        invalidate_listings=settings.cache_invalidate_listings,
    )


def get_goods_service(
    goods_repo: GoodsRepo,
    project_repo: ProjectRepo,
    session: DBSession,
    cache: CacheDep,
    metrics: AppMetrics,
) -> GoodsService:
    """Get goods service."""
    settings = get_settings()
    return GoodsService(
        goods_repo,
        project_repo,
        session,
        cache,
        metrics=metrics,
        invalidate_listings=settings.cache_invalidate_listings,
    )


ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
GoodsServiceDep = Annotated[GoodsService, Depends(get_goods_service)]


def get_services(projects: ProjectServiceDep, goods: GoodsServiceDep) -> Services:
    """Compose both services for a request handler."""
    return Services(projects=projects, goods=goods)


ServicesDep = Annotated[Services, Depends(get_services)]
