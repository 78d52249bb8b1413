"""Service layer - business logic over repositories and the cache."""

from dataclasses import dataclass

from src.goods_service.services.goods_service import GoodsService
from src.goods_service.services.project_service import ProjectService


@dataclass(frozen=True)
class Services:
    """The project and goods services of one request, sharing its session."""

    projects: ProjectService
    goods: GoodsService


__all__ = [
    "GoodsService",
    "ProjectService",
    "Services",
]
