"""Transaction boundary shared by the write paths of the services."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from src.goods_service.core.exceptions import (
    ConstraintViolationError,
    TransientStoreError,
    ValidationFailedError,
)


@asynccontextmanager
async def write_transaction(
    session: AsyncSession,
    conflict_message: str,
) -> AsyncGenerator[None]:
    """Commit the work done in the block, or roll all of it back.

    Store errors are translated into domain errors:
    - IntegrityError -> ConstraintViolationError(conflict_message)
    - DataError (value rejected by the column type) -> ValidationFailedError
    - connection/transaction failures -> TransientStoreError

    Args:
        session: Session whose transaction the block runs in.
        conflict_message: Message reported when a constraint is violated.
    """
    try:
        yield
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise ConstraintViolationError(conflict_message) from e
    except DataError as e:
        await session.rollback()
        raise ValidationFailedError(str(e.orig) if e.orig is not None else str(e)) from e
    except (OperationalError, InterfaceError) as e:
        await session.rollback()
        raise TransientStoreError(str(e.orig) if e.orig is not None else str(e)) from e
    except Exception:
        await session.rollback()
        raise
