"""Base repository with common CRUD operations."""

from typing import Any, Generic, TypeVar

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    is done in the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: int) -> ModelType | None:
        """Get a record by its primary key."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def count(self, *criteria: Any) -> int:
        """Count rows matching all ``criteria``."""
        query = select(func.count()).select_from(self.model)
        if criteria:
            query = query.where(*criteria)
        result = await self.session.execute(query)
        return int(result.scalar_one())

    async def page(self, query: Any, limit: int, offset: int) -> list[ModelType]:
        """Execute a limit/offset page of an ordered query."""
        result = await self.session.execute(query.limit(limit).offset(offset))
        return list(result.scalars().all())
