"""Goods model - line items ranked within a project."""

from datetime import datetime

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from src.goods_service.models.base import utc_now


class Goods(SQLModel, table=True):
    """Goods item.

    Active rows (removed=False) of one project hold priorities 1..N with no
    gaps or duplicates. The (project_id, priority) index cannot be unique:
    shifting a window of ranks with one UPDATE collides row by row.
    """

    __tablename__ = "goods"
    __table_args__ = (Index("ix_goods_project_id_priority", "project_id", "priority"),)

    id: int | None = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    name: str = Field(max_length=255)
    description: str = Field(max_length=1000)
    priority: int = Field(default=0)
    removed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
