"""Project model."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from src.goods_service.models.base import utc_now


class Project(SQLModel, table=True):
    """Project owning zero or more goods. Hard-deleted."""

    __tablename__ = "projects"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=utc_now)
