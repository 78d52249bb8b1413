"""Project endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from src.goods_service.api.dependencies import Page, RowId, ServicesDep
from src.goods_service.schemas.project import (
    ProjectCreate,
    ProjectList,
    ProjectRead,
    ProjectUpdate,
)

router = APIRouter(prefix="/projects", tags=["projects"])


class StatusResponse(BaseModel):
    status: str = "ok"


@router.get(
    "",
    response_model=ProjectList,
    summary="List projects",
    description="List projects ordered by id with limit/offset pagination.",
)
async def list_projects(services: ServicesDep, page: Page) -> ProjectList:
    """List projects with the total count."""
    return await services.projects.list_all(page)


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    responses={
        201: {"description": "Project created"},
        400: {"description": "Name missing or blank"},
    },
)
async def create_project(data: ProjectCreate, services: ServicesDep) -> ProjectRead:
    """Create a new project."""
    return await services.projects.create(data)


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get project",
    responses={
        200: {"description": "Project details"},
        404: {"description": "Project not found"},
    },
)
async def get_project(project_id: RowId, services: ServicesDep) -> ProjectRead:
    """Get a project by ID."""
    return await services.projects.get_by_id(project_id)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update project",
    responses={
        200: {"description": "Project updated"},
        404: {"description": "Project not found"},
    },
)
async def update_project(
    project_id: RowId,
    data: ProjectUpdate,
    services: ServicesDep,
) -> ProjectRead:
    """Rename a project."""
    return await services.projects.update(project_id, data)


@router.delete(
    "/{project_id}",
    response_model=StatusResponse,
    summary="Delete project",
    responses={
        200: {"description": "Project deleted"},
        404: {"description": "Project not found"},
        409: {"description": "Goods still reference the project"},
    },
)
async def delete_project(project_id: RowId, services: ServicesDep) -> StatusResponse:
    """Hard-delete a project that has no goods."""
    await services.projects.delete(project_id)
    return StatusResponse()
