"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.goods_service.api.dependencies.db import DBSession
from src.goods_service.repositories import GoodsRepository, ProjectRepository


def get_project_repository(session: DBSession) -> ProjectRepository:
    """Get project repository bound to the request session."""
    return ProjectRepository(session)


def get_goods_repository(session: DBSession) -> GoodsRepository:
    """Get goods repository bound to the request session."""
    return GoodsRepository(session)


ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
GoodsRepo = Annotated[GoodsRepository, Depends(get_goods_repository)]
