"""Async engine for the goods store.

The engine is built on first use so that importing the package never needs a
reachable database; `dispose_engine()` drops it on shutdown and the next call
to `get_engine()` starts a fresh pool.
"""

import ssl
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.goods_service.core.config import Settings, get_settings

# libpq modes that encrypt without checking the server certificate
_UNVERIFIED_SSL_MODES = frozenset({"prefer", "require"})

_engine: AsyncEngine | None = None


def ssl_context_for(mode: str) -> ssl.SSLContext | None:
    """Translate a libpq `sslmode` into an SSL context for asyncpg."""
    if mode == "disable":
        return None

    context = ssl.create_default_context()
    if mode in _UNVERIFIED_SSL_MODES:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        return context

    # verify-ca checks the chain only, verify-full also the host name
    context.check_hostname = mode == "verify-full"
    context.verify_mode = ssl.CERT_REQUIRED
    return context


def _connect_args(settings: Settings) -> dict[str, Any]:
    args: dict[str, Any] = {"statement_cache_size": settings.database_statement_cache_size}
    context = ssl_context_for(settings.database_ssl_mode)
    if context is not None:
        args["ssl"] = context
    return args


def _build_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
        connect_args=_connect_args(settings),
    )


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = _build_engine(get_settings())
    return _engine


async def dispose_engine() -> None:
    global _engine
    engine, _engine = _engine, None
    if engine is not None:
        await engine.dispose()
