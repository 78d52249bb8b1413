"""Path parameter types."""

from typing import Annotated

from fastapi import Path

from src.goods_service.models.base import INT4_MAX

RowId = Annotated[int, Path(ge=1, le=INT4_MAX, description="Row id")]
