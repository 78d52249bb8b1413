"""Model exports.

Import from here: `from src.goods_service.models import Goods, Project`
"""

from src.goods_service.models.goods import Goods
from src.goods_service.models.project import Project

__all__ = [
    "Goods",
    "Project",
]
