"""Liveness and Prometheus endpoints.

`/health` reports `healthy`, `degraded` (PostgreSQL up, Redis down) or
`unhealthy` (PostgreSQL down, 503). A report is reused for
`HEALTH_CACHE_TTL` seconds so that frequent probes by orchestrators do not
open a database connection each time.
"""

import secrets
import time
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text

from src.goods_service.core.config import get_settings
from src.goods_service.core.db import get_session
from src.goods_service.core.redis import get_redis

HEALTH_CACHE_TTL = 10  # seconds

_last_report: dict[str, Any] | None = None
_last_report_at: float = 0


def reset_health_cache() -> None:
    global _last_report, _last_report_at
    _last_report = None
    _last_report_at = 0


async def _database_status() -> str:
    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        return f"unhealthy: {e!s}"
    return "healthy"


async def _redis_status() -> str:
    redis = await get_redis()
    if redis is None:
        return "not_configured"
    try:
        await redis.ping()  # type: ignore[misc]
    except Exception as e:
        return f"unhealthy: {e!s}"
    return "healthy"


def _overall(database: str, redis: str) -> str:
    if database != "healthy":
        return "unhealthy"
    if redis.startswith("unhealthy"):
        return "degraded"
    return "healthy"


def _respond(report: dict[str, Any]) -> JSONResponse:
    code = status.HTTP_503_SERVICE_UNAVAILABLE if report["status"] == "unhealthy" else 200
    return JSONResponse(content=report, status_code=code)


async def check_health() -> JSONResponse:
    global _last_report, _last_report_at

    now = time.time()
    age = now - _last_report_at
    if _last_report is not None and age < HEALTH_CACHE_TTL:
        return _respond({**_last_report, "cached": True, "cache_age_seconds": round(age, 1)})

    database = await _database_status()
    redis = await _redis_status()
    report: dict[str, Any] = {
        "status": _overall(database, redis),
        "database": database,
        "redis": redis,
        "cached": False,
        "timestamp": now,
    }
    _last_report, _last_report_at = report, now
    return _respond(report)


def setup_health_endpoint(app: FastAPI) -> None:
    app.add_api_route("/health", check_health, methods=["GET"], tags=["health"])


def setup_metrics(app: FastAPI) -> None:
    """Instrument the app and expose `/metrics`, behind `X-Metrics-Key` if one is set."""
    expected_key = get_settings().metrics_api_key
    instrumentator = Instrumentator().instrument(app)

    if not expected_key:
        instrumentator.expose(app, endpoint="/metrics")
        return

    key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

    async def require_metrics_key(api_key: str | None = Depends(key_header)) -> None:
        if api_key is None or not secrets.compare_digest(api_key, expected_key):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing metrics API key",
            )

    instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(require_metrics_key)])
