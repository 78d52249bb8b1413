"""FastAPI dependency injection definitions.

Re-exports all dependencies for convenient imports.
"""

from src.goods_service.api.dependencies.db import DBSession, get_db_session
from src.goods_service.api.dependencies.pagination import Page, get_page_params
from src.goods_service.api.dependencies.params import RowId
from src.goods_service.api.dependencies.repositories import (
    GoodsRepo,
    ProjectRepo,
    get_goods_repository,
    get_project_repository,
)
from src.goods_service.api.dependencies.services import (
    AppMetrics,
    CacheDep,
    GoodsServiceDep,
    ProjectServiceDep,
    ServicesDep,
    get_app_metrics,
    get_cache,
    get_goods_service,
    get_project_service,
    get_services,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Pagination
    "Page",
    "get_page_params",
    "RowId",
    # Repositories
    "GoodsRepo",
    "ProjectRepo",
    "get_goods_repository",
    "get_project_repository",
    # Services
    "AppMetrics",
    "CacheDep",
    "GoodsServiceDep",
    "ProjectServiceDep",
    "ServicesDep",
    "get_app_metrics",
    "get_cache",
    "get_goods_service",
    "get_project_service",
    "get_services",
]
