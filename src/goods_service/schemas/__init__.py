"""API request/response schemas."""

from src.goods_service.schemas.goods import (
    GoodsCreate,
    GoodsList,
    GoodsListMeta,
    GoodsRead,
    GoodsUpdate,
)
from src.goods_service.schemas.pagination import ListMeta, PageParams
from src.goods_service.schemas.project import (
    ProjectCreate,
    ProjectList,
    ProjectRead,
    ProjectUpdate,
)

__all__ = [
    # Goods
    "GoodsCreate",
    "GoodsList",
    "GoodsListMeta",
    "GoodsRead",
    "GoodsUpdate",
    # Pagination
    "ListMeta",
    "PageParams",
    # Project
    "ProjectCreate",
    "ProjectList",
    "ProjectRead",
    "ProjectUpdate",
]
