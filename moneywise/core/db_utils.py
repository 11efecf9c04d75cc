"""
Database utilities for connection management and error handling
"""
import asyncio
import functools
import logging
from typing import Callable, Any, TypeVar, cast, Awaitable

from sqlalchemy.exc import DBAPIError, OperationalError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def is_connection_error(error: Exception) -> bool:
    """True for errors that a fresh connection could fix (dropped, refused, reset)."""
    if isinstance(error, (ConnectionError, OperationalError)):
        return True
    return isinstance(error, DBAPIError) and error.connection_invalidated


def with_db_retry(
    max_retries: int = 3,
    retry_delay: float = 0.5
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Retry a read-only database coroutine on connection errors.

    The session is rolled back between attempts by the caller's ``db``
    argument when one is passed, so the next attempt starts a new
    transaction.

    Args:
        max_retries: Maximum number of retries before giving up
        retry_delay: Base delay in seconds, doubled after every attempt
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            retries = 0

            while True:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not is_connection_error(e) or retries >= max_retries:
                        if retries:
                            logger.error(f"Database operation failed after {retries} retries: {e}")
                        raise

                    retries += 1
                    delay = retry_delay * (2 ** (retries - 1))
                    logger.warning(
                        f"Database connection error: {str(e)}. "
                        f"Retrying in {delay:.2f}s... (Attempt {retries}/{max_retries})"
                    )
                    db = kwargs.get("db")
                    if db is not None:
                        await db.rollback()
                    await asyncio.sleep(delay)

        return cast(Callable[..., Awaitable[T]], wrapper)

    return decorator
