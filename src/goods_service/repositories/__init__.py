"""Repository layer - data access abstraction."""

from src.goods_service.repositories.base import BaseRepository
from src.goods_service.repositories.goods import GoodsRepository
from src.goods_service.repositories.project import ProjectRepository

__all__ = [
    "BaseRepository",
    "GoodsRepository",
    "ProjectRepository",
]
