"""Repository for Goods entity."""

from sqlalchemy import update
from sqlmodel import col, select

from src.goods_service.core.ranking import Shift
from src.goods_service.models import Goods
from src.goods_service.repositories.base import BaseRepository


class GoodsRepository(BaseRepository[Goods]):
    """Repository for goods rows, including the bulk rank shift."""

    model = Goods

    async def get_one(self, goods_id: int, project_id: int) -> Goods | None:
        """Get a goods item scoped to its project (removed rows included)."""
        result = await self.session.execute(
            select(Goods).where(Goods.id == goods_id, Goods.project_id == project_id)
        )
        return result.scalar_one_or_none()

    async def lock_one(self, goods_id: int, project_id: int) -> Goods | None:
        """Same as get_one, holding a row lock until the transaction ends."""
        result = await self.session.execute(
            select(Goods)
            .where(Goods.id == goods_id, Goods.project_id == project_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def count_active(self, project_id: int) -> int:
        """Number of non-removed goods in a project."""
        return await self.count(Goods.project_id == project_id, col(Goods.removed).is_(False))

    async def shift(
        self, project_id: int, shift: Shift, exclude_id: int | None = None
    ) -> list[int]:
        """Apply a rank shift to the active goods of a project.

        Returns:
            Ids of the rows whose priority changed.
        """
        if shift.is_empty:
            return []
        criteria = [
            Goods.project_id == project_id,
            col(Goods.removed).is_(False),
            col(Goods.priority).between(shift.lower, shift.upper),
        ]
        if exclude_id is not None:
            criteria.append(Goods.id != exclude_id)
        result = await self.session.execute(
            update(Goods)
            .where(*criteria)
            .values(priority=col(Goods.priority) + shift.delta)
            .returning(col(Goods.id))
            .execution_options(synchronize_session=False)
        )
        return list(result.scalars().all())

    async def list_active(self, limit: int, offset: int) -> list[Goods]:
        """Global page of active goods, grouped by project in rank order."""
        query = (
            select(Goods)
            .where(col(Goods.removed).is_(False))
            .order_by(col(Goods.project_id), col(Goods.priority), col(Goods.id))
        )
        return await self.page(query, limit, offset)

    async def count_removed(self) -> int:
        """Number of soft-deleted goods across all projects."""
        return await self.count(col(Goods.removed).is_(True))
