"""Domain errors and the handlers that turn them into HTTP responses.

Every error body carries the request_id from asgi-correlation-id so that a
client-reported failure can be matched to the server log line.
"""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.goods_service.core.logging import get_logger

logger = get_logger(__name__)

NOT_FOUND_CODE = 3
NOT_FOUND_DETAIL = "record not found"


class DomainError(Exception):
    """Base class for errors raised by the service layer."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    """Entity absent for the given id/scope."""

    def __init__(self, entity: str, entity_id: int, scope: str | None = None):
        where = f" in {scope}" if scope else ""
        super().__init__(f"{entity} {entity_id} not found{where}")
        self.entity = entity
        self.entity_id = entity_id

    @property
    def error_key(self) -> str:
        """Stable machine-readable key, e.g. ``errors.good.NotFound``."""
        return f"errors.{self.entity}.NotFound"


class ValidationFailedError(DomainError):
    """Missing or malformed required field."""


class ConstraintViolationError(DomainError):
    """Foreign key or uniqueness breach at the store."""


class TransientStoreError(DomainError):
    """Connection or transaction failure talking to the store."""


def _error_body(message: str) -> dict[str, str | None]:
    return {"message": message, "request_id": correlation_id.get()}


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        msg = error.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "invalid request"


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that map domain errors to responses."""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "code": NOT_FOUND_CODE,
                "message": exc.error_key,
                "status": status.HTTP_404_NOT_FOUND,
                "detail": NOT_FOUND_DETAIL,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(ValidationFailedError)
    async def validation_failed_handler(
        request: Request, exc: ValidationFailedError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(_validation_message(exc)),
        )

    @app.exception_handler(ConstraintViolationError)
    async def constraint_violation_handler(
        request: Request, exc: ConstraintViolationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=_error_body(exc.message),
        )

    @app.exception_handler(TransientStoreError)
    async def transient_store_handler(request: Request, exc: TransientStoreError) -> JSONResponse:
        logger.error("Store unavailable", path=request.url.path, error=exc.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(exc.message),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            path=request.url.path,
        )
        # Internal service: the raw message is returned to the caller
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(str(exc) or exc.__class__.__name__),
        )
