"""Limit/offset pagination parameters and listing metadata."""

from dataclasses import dataclass

from pydantic import BaseModel


@dataclass(frozen=True)
class PageParams:
    """Resolved limit/offset of a listing request."""

    limit: int
    offset: int


def parse_non_negative(raw: str | None, default: int) -> int:
    """Parse a query value as a non-negative integer.

    Missing, unparsable or negative values fall back to ``default`` rather
    than failing the request.
    """
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value >= 0 else default


def resolve_page(
    limit: str | None,
    offset: str | None,
    default_limit: int,
    max_limit: int,
) -> PageParams:
    """Resolve raw query values into bounded page parameters."""
    return PageParams(
        limit=min(parse_non_negative(limit, default_limit), max_limit),
        offset=parse_non_negative(offset, 0),
    )


class ListMeta(BaseModel):
    """Pagination metadata returned with every listing."""

    total: int
    limit: int
    offset: int
