"""Repository for Project entity."""

from sqlmodel import select

from src.goods_service.models import Project
from src.goods_service.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entity."""

    model = Project

    async def list_all(self, limit: int, offset: int) -> list[Project]:
        """List projects ordered by id."""
        query = select(Project).order_by(Project.id)  # type: ignore[arg-type]
        return await self.page(query, limit, offset)

    async def lock(self, project_id: int) -> Project | None:
        """Load a project holding a row lock until the transaction ends.

        The project row is the serialization point for every write that
        changes the ranking of the project's goods.
        """
        result = await self.session.execute(
            select(Project).where(Project.id == project_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def delete(self, project: Project) -> None:
        """Mark a project for deletion (no flush/commit)."""
        await self.session.delete(project)
