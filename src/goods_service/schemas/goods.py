"""Goods schemas for API request/response."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from src.goods_service.models.base import INT4_MAX
from src.goods_service.schemas.pagination import ListMeta


class GoodsCreate(BaseModel):
    """Schema for creating a goods item.

    ``description`` defaults to ``name`` when omitted or blank. ``priority``
    is the requested rank; omitted means "append last".
    """

    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    priority: int | None = Field(default=None, ge=0, le=INT4_MAX)
    removed: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v

    @model_validator(mode="after")
    def default_description(self) -> "GoodsCreate":
        if self.description is None or not self.description.strip():
            self.description = self.name
        return self


class GoodsUpdate(BaseModel):
    """Partial patch of a goods item. Priority is changed only by reprioritize."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("name cannot be empty or whitespace only")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v


class GoodsRead(BaseModel):
    """Schema for reading a goods item."""

    id: int
    project_id: int
    name: str
    description: str
    priority: int
    removed: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class GoodsListMeta(ListMeta):
    """Listing metadata with the soft-deleted row count."""

    removed: int


class GoodsList(BaseModel):
    """Page of active goods with total and removed counts."""

    meta: GoodsListMeta
    goods: list[GoodsRead]
