"""Project management service."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.goods_service.core.cache import LISTING_PROJECTS, Cache, project_key
from src.goods_service.core.exceptions import NotFoundError
from src.goods_service.core.logging import get_logger
from src.goods_service.models import Project
from src.goods_service.repositories import ProjectRepository
from src.goods_service.schemas.pagination import ListMeta, PageParams
from src.goods_service.schemas.project import (
    ProjectCreate,
    ProjectList,
    ProjectRead,
    ProjectUpdate,
)
from src.goods_service.services.base import write_transaction

logger = get_logger(__name__)

ENTITY = "project"


class ProjectService:
    """Project CRUD with cache-aside point reads and listings."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        session: AsyncSession,
        cache: Cache,
        invalidate_listings: bool = True,
    ):
        self.project_repo = project_repo
        self.session = session
        self.cache = cache
        self.invalidate_listings = invalidate_listings

    async def create(self, data: ProjectCreate) -> ProjectRead:
        """Create a project."""
        project = Project(name=data.name)
        async with write_transaction(self.session, "Project could not be created"):
            self.project_repo.add(project)
        await self.session.refresh(project)

        logger.info("Project created", project_id=project.id)
        await self._invalidate()
        return ProjectRead.model_validate(project)

    async def get_by_id(self, project_id: int) -> ProjectRead:
        """Get a project, reading through the cache.

        Raises:
            NotFoundError: If the project does not exist.
        """
        key = project_key(project_id)
        cached = await self.cache.get(key, ENTITY)
        if cached is not None:
            try:
                return ProjectRead.model_validate_json(cached)
            except ValueError:
                logger.warning("Discarding unreadable cached project", key=key)

        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError(ENTITY, project_id)

        result = ProjectRead.model_validate(project)
        await self.cache.set(key, result.model_dump_json())
        return result

    async def update(self, project_id: int, data: ProjectUpdate) -> ProjectRead:
        """Rename a project. An empty patch returns the project unchanged.

        Raises:
            NotFoundError: If the project does not exist.
        """
        async with write_transaction(self.session, "Project could not be updated"):
            project = await self.project_repo.lock(project_id)
            if project is None:
                raise NotFoundError(ENTITY, project_id)
            if data.name is not None:
                project.name = data.name

        logger.info("Project updated", project_id=project_id)
        await self._invalidate(project_id)
        return ProjectRead.model_validate(project)

    async def delete(self, project_id: int) -> None:
        """Hard-delete a project.

        Raises:
            NotFoundError: If the project does not exist.
            ConstraintViolationError: If goods still reference the project.
        """
        conflict = f"Cannot delete project {project_id}: goods still reference it"
        async with write_transaction(self.session, conflict):
            project = await self.project_repo.lock(project_id)
            if project is None:
                raise NotFoundError(ENTITY, project_id)
            await self.project_repo.delete(project)

        logger.info("Project deleted", project_id=project_id)
        await self._invalidate(project_id)

    async def list_all(self, page: PageParams) -> ProjectList:
        """Page of projects with the total count, cached per page."""
        key = await self.cache.listing_key(LISTING_PROJECTS, page.limit, page.offset)
        cached = await self.cache.get(key, "project_list")
        if cached is not None:
            try:
                return ProjectList.model_validate_json(cached)
            except ValueError:
                logger.warning("Discarding unreadable cached listing", key=key)

        projects = await self.project_repo.list_all(page.limit, page.offset)
        total = await self.project_repo.count()
        result = ProjectList(
            meta=ListMeta(total=total, limit=page.limit, offset=page.offset),
            projects=[ProjectRead.model_validate(p) for p in projects],
        )
        await self.cache.set(key, result.model_dump_json())
        return result

    async def _invalidate(self, project_id: int | None = None) -> None:
        if project_id is not None:
            await self.cache.delete(project_key(project_id))
        if self.invalidate_listings:
            await self.cache.invalidate_listing(LISTING_PROJECTS)
