"""Project schemas for API request/response."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.goods_service.schemas.pagination import ListMeta


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v


class ProjectUpdate(BaseModel):
    """Schema for updating a project. Only the name can change."""

    name: str | None = Field(default=None, min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("name cannot be empty or whitespace only")
        return v


class ProjectRead(BaseModel):
    """Schema for reading a project."""

    id: int
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ProjectList(BaseModel):
    """Page of projects with the total row count."""

    meta: ListMeta
    projects: list[ProjectRead]
