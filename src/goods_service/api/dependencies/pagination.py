"""Limit/offset query binding."""

from typing import Annotated

from fastapi import Depends, Query

from src.goods_service.core.config import get_settings
from src.goods_service.schemas.pagination import PageParams, resolve_page


def get_page_params(
    limit: Annotated[str | None, Query(description="Max items to return")] = None,
    offset: Annotated[str | None, Query(description="Items to skip")] = None,
) -> PageParams:
    """Bind limit/offset leniently: bad values fall back to the defaults."""
    settings = get_settings()
    return resolve_page(limit, offset, settings.default_page_limit, settings.max_page_limit)


Page = Annotated[PageParams, Depends(get_page_params)]
