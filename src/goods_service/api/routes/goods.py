"""Goods endpoints.

Static paths (``/list``, ``/prioritize/...``) are registered before the
``/{project_id}/{goods_id}`` routes so they are matched first.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from src.goods_service.api.dependencies import Page, RowId, ServicesDep
from src.goods_service.core.logging import bind_goods_context
from src.goods_service.models.base import INT4_MAX
from src.goods_service.schemas.goods import GoodsCreate, GoodsList, GoodsRead, GoodsUpdate

router = APIRouter(prefix="/goods", tags=["goods"])


@router.get(
    "/list",
    response_model=GoodsList,
    summary="List goods",
    description=(
        "Active goods of all projects, grouped by project in priority order. "
        "`meta.total` counts every row, `meta.removed` the soft-deleted ones."
    ),
)
async def list_goods(services: ServicesDep, page: Page) -> GoodsList:
    """List active goods with total and removed counts."""
    return await services.goods.list_all(page)


@router.patch(
    "/prioritize/{project_id}/{goods_id}",
    response_model=GoodsRead,
    summary="Reprioritize goods",
    description=(
        "Move an active item to a new rank. The rank is clamped to [1, N] and "
        "the items in between slide one step to keep ranks contiguous."
    ),
    responses={
        200: {"description": "Goods at its new rank"},
        400: {"description": "Priority missing, negative or not an integer"},
        404: {"description": "No active goods with this id in the project"},
    },
)
async def reprioritize_goods(
    project_id: RowId,
    goods_id: RowId,
    priority: Annotated[
        int, Query(ge=0, le=INT4_MAX, description="Requested rank, 1 is first")
    ],
    services: ServicesDep,
) -> GoodsRead:
    """Change the rank of a goods item."""
    bind_goods_context(project_id, goods_id)
    return await services.goods.reprioritize(goods_id, project_id, priority)


@router.post(
    "/{project_id}",
    response_model=GoodsRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create goods",
    responses={
        201: {"description": "Goods created"},
        400: {"description": "Name missing or blank"},
        409: {"description": "Project does not exist"},
    },
)
async def create_goods(
    project_id: RowId,
    data: GoodsCreate,
    services: ServicesDep,
) -> GoodsRead:
    """Create a goods item, appended last unless a priority is given."""
    bind_goods_context(project_id)
    return await services.goods.create(project_id, data)


@router.get(
    "/{project_id}/{goods_id}",
    response_model=GoodsRead,
    summary="Get goods",
    responses={
        200: {"description": "Goods details"},
        404: {"description": "Goods not found"},
    },
)
async def get_goods(project_id: RowId, goods_id: RowId, services: ServicesDep) -> GoodsRead:
    bind_goods_context(project_id, goods_id)
    return await services.goods.get_one(goods_id, project_id)


@router.patch(
    "/{project_id}/{goods_id}",
    response_model=GoodsRead,
    summary="Update goods",
    responses={
        200: {"description": "Goods updated"},
        404: {"description": "Goods not found"},
    },
)
async def update_goods(
    project_id: RowId,
    goods_id: RowId,
    data: GoodsUpdate,
    services: ServicesDep,
) -> GoodsRead:
    """Patch name and/or description."""
    bind_goods_context(project_id, goods_id)
    return await services.goods.update(goods_id, project_id, data)


@router.delete(
    "/{project_id}/{goods_id}",
    response_model=GoodsRead,
    summary="Remove goods",
    description="Soft delete: the row stays, flagged `removed`, and leaves the ranking.",
    responses={
        200: {"description": "Goods removed"},
        404: {"description": "Goods not found"},
    },
)
async def remove_goods(project_id: RowId, goods_id: RowId, services: ServicesDep) -> GoodsRead:
    """Soft-delete a goods item."""
    bind_goods_context(project_id, goods_id)
    return await services.goods.remove(goods_id, project_id)
