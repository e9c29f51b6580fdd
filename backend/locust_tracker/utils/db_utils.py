"""Database utility functions."""
import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import OperationalError, InterfaceError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar('T')

TRANSIENT_ERROR_MARKERS = (
    "connection refused",
    "connection reset",
    "connection closed",
    "server closed",
    "timeout",
    "too many clients",
    "database is locked",
)


def is_transient_error(error: Exception) -> bool:
    """Whether a database error is worth retrying."""
    error_str = str(error).lower()
    return any(marker in error_str for marker in TRANSIENT_ERROR_MARKERS)


async def retry_on_lock(
    coro_func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = 0.1,
) -> T:
    """Retry a database operation on transient errors with exponential backoff.

    Handles PostgreSQL connection drops and SQLite lock contention that occur
    when many devices report at once.

    Args:
        coro_func: Async function to call (should be a callable that returns a coroutine)
        max_retries: Maximum number of attempts
        base_delay: Base delay in seconds (doubles with each retry)

    Returns:
        The result of the coroutine function

    Raises:
        OperationalError: If all retries fail or error is not transient
    """
    last_exception = None
    for attempt in range(max_retries):
        try:
            return await coro_func()
        except (OperationalError, InterfaceError) as e:
            if not is_transient_error(e):
                raise
            last_exception = e
            delay = base_delay * (2 ** attempt)
            logger.warning(f"Database transient error, retrying in {delay}s (attempt {attempt + 1}/{max_retries})")
            await asyncio.sleep(delay)
    raise last_exception


def dialect_insert(session: AsyncSession):
    """The INSERT construct with ON CONFLICT support for the session's database."""
    dialect = session.bind.dialect.name
    if dialect == "postgresql":
        return pg_insert
    if dialect == "sqlite":
        return sqlite_insert
    raise ConfigurationError(f"Upsert not supported on {dialect}")
