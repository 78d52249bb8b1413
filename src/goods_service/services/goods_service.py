"""Goods service - CRUD plus the ranking-preserving writes.

Create, reprioritize and soft delete change the ranks of other goods in the
same project. Each of them runs in one transaction that first locks the
project row, then the goods row, so writers on one project are serialized
while different projects proceed independently. Plain name/description
patches lock only the goods row.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.goods_service.core.cache import LISTING_GOODS, Cache, goods_key
from src.goods_service.core.exceptions import ConstraintViolationError, NotFoundError
from src.goods_service.core.logging import get_logger
from src.goods_service.core.metrics import Metrics
from src.goods_service.core.ranking import plan_insert, plan_move, plan_remove
from src.goods_service.models import Goods
from src.goods_service.repositories import GoodsRepository, ProjectRepository
from src.goods_service.schemas.goods import (
    GoodsCreate,
    GoodsList,
    GoodsListMeta,
    GoodsRead,
    GoodsUpdate,
)
from src.goods_service.schemas.pagination import PageParams
from src.goods_service.services.base import write_transaction

logger = get_logger(__name__)

ENTITY = "good"


class GoodsService:
    """Goods operations over the store and the cache."""

    def __init__(
        self,
        goods_repo: GoodsRepository,
        project_repo: ProjectRepository,
        session: AsyncSession,
        cache: Cache,
        metrics: Metrics | None = None,
        invalidate_listings: bool = True,
    ):
        self.goods_repo = goods_repo
        self.project_repo = project_repo
        self.session = session
        self.cache = cache
        self.metrics = metrics
        self.invalidate_listings = invalidate_listings

    async def create(self, project_id: int, data: GoodsCreate) -> GoodsRead:
        """Create a goods item, inserting it at the requested rank.

        Without a priority the item is appended last. A requested priority is
        clamped to [1, N+1] and the items at and below it move down one rank.
        Items created already removed keep the requested priority as-is.

        Raises:
            ConstraintViolationError: If the project does not exist.
        """
        moved: list[int] = []
        conflict = f"Project {project_id} does not exist"
        async with write_transaction(self.session, conflict):
            if await self.project_repo.lock(project_id) is None:
                raise ConstraintViolationError(conflict)

            if data.removed:
                priority = data.priority or 0
            else:
                active = await self.goods_repo.count_active(project_id)
                priority, shift = plan_insert(data.priority, active)
                moved = await self.goods_repo.shift(project_id, shift)

            goods = Goods(
                project_id=project_id,
                name=data.name,
                description=data.description or data.name,
                priority=priority,
                removed=data.removed,
            )
            self.goods_repo.add(goods)
        await self.session.refresh(goods)

        logger.info(
            "Goods created",
            goods_id=goods.id,
            project_id=project_id,
            priority=goods.priority,
            shifted=len(moved),
        )
        await self._invalidate(project_id, moved)
        return GoodsRead.model_validate(goods)

    async def get_one(self, goods_id: int, project_id: int) -> GoodsRead:
        """Get a goods item (removed ones included), reading through the cache.

        Raises:
            NotFoundError: If no such item exists in the project.
        """
        key = goods_key(goods_id, project_id)
        result: GoodsRead | None = None

        cached = await self.cache.get(key, ENTITY)
        if cached is not None:
            try:
                result = GoodsRead.model_validate_json(cached)
            except ValueError:
                logger.warning("Discarding unreadable cached goods", key=key)

        if result is None:
            goods = await self.goods_repo.get_one(goods_id, project_id)
            if goods is None:
                raise NotFoundError(ENTITY, goods_id, f"project {project_id}")
            result = GoodsRead.model_validate(goods)
            await self.cache.set(key, result.model_dump_json())

        if self.metrics is not None:
            self.metrics.goods_reads.inc()
        return result

    async def update(self, goods_id: int, project_id: int, data: GoodsUpdate) -> GoodsRead:
        """Patch name and/or description. Never touches priority.

        Raises:
            NotFoundError: If no such item exists in the project.
        """
        async with write_transaction(self.session, "Goods could not be updated"):
            goods = await self.goods_repo.lock_one(goods_id, project_id)
            if goods is None:
                raise NotFoundError(ENTITY, goods_id, f"project {project_id}")
            if data.name is not None:
                goods.name = data.name
            if data.description is not None:
                goods.description = data.description

        logger.info("Goods updated", goods_id=goods_id, project_id=project_id)
        await self._invalidate(project_id, [goods_id])
        return GoodsRead.model_validate(goods)

    async def remove(self, goods_id: int, project_id: int) -> GoodsRead:
        """Soft-delete a goods item and close the gap in the project ranking.

        Removing an already removed item succeeds without changes.

        Raises:
            NotFoundError: If no such item exists in the project.
        """
        moved: list[int] = []
        async with write_transaction(self.session, "Goods could not be removed"):
            goods = await self._lock_for_ranking(goods_id, project_id)
            if not goods.removed:
                active = await self.goods_repo.count_active(project_id)
                shift = plan_remove(goods.priority, active)
                moved = await self.goods_repo.shift(project_id, shift, exclude_id=goods_id)
                goods.removed = True
                logger.info(
                    "Goods removed",
                    goods_id=goods_id,
                    project_id=project_id,
                    shifted=len(moved),
                )

        await self._invalidate(project_id, [goods_id, *moved])
        return GoodsRead.model_validate(goods)

    async def reprioritize(self, goods_id: int, project_id: int, priority: int) -> GoodsRead:
        """Move an active goods item to a new rank within its project.

        The requested priority is clamped to [1, N] where N is the number of
        active goods in the project. The items between the old and the new
        rank slide one step towards the vacated rank; moving an item to its
        current rank touches nothing.

        Raises:
            NotFoundError: If no active item with this id exists in the project.
        """
        moved: list[int] = []
        async with write_transaction(self.session, "Goods could not be reprioritized"):
            goods = await self._lock_for_ranking(goods_id, project_id)
            if goods.removed:
                raise NotFoundError(ENTITY, goods_id, f"project {project_id}")

            active = await self.goods_repo.count_active(project_id)
            current = goods.priority
            target, shift = plan_move(current, priority, active)
            if target != current:
                moved = await self.goods_repo.shift(project_id, shift, exclude_id=goods_id)
                goods.priority = target

        if target != current:
            logger.info(
                "Goods reprioritized",
                goods_id=goods_id,
                project_id=project_id,
                requested=priority,
                old_priority=current,
                new_priority=target,
                shifted=len(moved),
            )
            if self.metrics is not None:
                self.metrics.reprioritizations.inc()
            await self._invalidate(project_id, [goods_id, *moved])
        return GoodsRead.model_validate(goods)

    async def list_all(self, page: PageParams) -> GoodsList:
        """Global page of active goods with total and removed counts."""
        key = await self.cache.listing_key(LISTING_GOODS, page.limit, page.offset)
        cached = await self.cache.get(key, "goods_list")
        if cached is not None:
            try:
                return GoodsList.model_validate_json(cached)
            except ValueError:
                logger.warning("Discarding unreadable cached listing", key=key)

        goods = await self.goods_repo.list_active(page.limit, page.offset)
        total = await self.goods_repo.count()
        removed = await self.goods_repo.count_removed()
        result = GoodsList(
            meta=GoodsListMeta(
                total=total,
                removed=removed,
                limit=page.limit,
                offset=page.offset,
            ),
            goods=[GoodsRead.model_validate(g) for g in goods],
        )
        await self.cache.set(key, result.model_dump_json())
        return result

    async def _lock_for_ranking(self, goods_id: int, project_id: int) -> Goods:
        """Take the project lock, then the goods row lock."""
        if await self.project_repo.lock(project_id) is None:
            raise NotFoundError(ENTITY, goods_id, f"project {project_id}")
        goods = await self.goods_repo.lock_one(goods_id, project_id)
        if goods is None:
            raise NotFoundError(ENTITY, goods_id, f"project {project_id}")
        return goods

    async def _invalidate(self, project_id: int, goods_ids: list[int]) -> None:
        keys = [goods_key(goods_id, project_id) for goods_id in goods_ids]
        await self.cache.delete(*keys)
        if self.invalidate_listings:
            await self.cache.invalidate_listing(LISTING_GOODS)
