"""
Atomic unit of work over an explicit session.

All multi-row writes of the ride lifecycle go through ``atomic`` so that a
failure partway leaves nothing behind.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from movr.app.core.exceptions import StorageFailureError

logger = logging.getLogger("movr.db")


@asynccontextmanager
async def atomic(db: AsyncSession, name: str = "unit") -> AsyncIterator[AsyncSession]:
    """
    Run the enclosed reads and writes as one transaction.

    Commits when the block exits normally. On any exception every pending
    write is rolled back; SQLAlchemy errors are re-raised as
    ``StorageFailureError``, application errors propagate unchanged.

    Example:
        async with atomic(db, "checkout"):
            ...
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Rolled back %s: %s", name, exc)
        raise StorageFailureError(
            message=f"Transaction '{name}' failed and was rolled back",
            details={"transaction": name, "error": type(exc).__name__}
        ) from exc
    except BaseException:
        await db.rollback()
        logger.debug("Rolled back %s", name)
        raise
