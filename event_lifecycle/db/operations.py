"""Database operations and utilities.

This module provides common database operations and utilities,
including retry logic for transient failures.
"""

import logging
import time
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from .db_core import db, DatabaseError, TransientStorageError

logger = logging.getLogger(__name__)

# Type variable for generic return type
T = TypeVar('T')

def with_retry(
    max_attempts: int = 3,
    delay: float = 0.1,
    backoff: float = 2,
    exceptions: tuple = (TransientStorageError,)
) -> Callable:
    """
    Decorator that implements retry logic for database operations.

    Only failures that left nothing persisted should be listed in
    `exceptions`; the wrapped call is repeated with identical arguments.

    Args:
        max_attempts: Maximum number of retry attempts
        delay: Initial delay between retries in seconds
        backoff: Multiplier for delay between retries
        exceptions: Tuple of exceptions to catch and retry

    Example:
        @with_retry(max_attempts=3)
        def load_event(event_id: str) -> dict:
            with db.session() as session:
                return session.get(Event, event_id).to_dict()
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            last_exception = None
            current_delay = delay

            for attempt in range(max_attempts):
                try:
                    return cast(T, func(*args, **kwargs))
                except exceptions as e:
                    last_exception = e
                    if attempt + 1 == max_attempts:
                        logger.error(
                            f"Final attempt failed for {func.__name__}: {str(e)}"
                        )
                        raise

                    logger.warning(
                        f"Attempt {attempt + 1}/{max_attempts} failed for "
                        f"{func.__name__}: {str(e)}. Retrying in {current_delay}s..."
                    )

                    time.sleep(current_delay)
                    current_delay *= backoff

            # Unreachable while max_attempts >= 1
            raise last_exception or DatabaseError("Unknown error in retry logic")

        return wrapper
    return decorator

@with_retry()
def execute_in_transaction(operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Execute a database operation within a transaction with retry logic.

    The operation receives the session as its first argument. Everything it
    writes commits together; any exception rolls all of it back. Storage
    failures are retried, other exceptions propagate on the first attempt.

    Args:
        operation: Callable that performs the database operation
        *args: Positional arguments to pass to the operation
        **kwargs: Keyword arguments to pass to the operation

    Returns:
        The result of the operation

    Example:
        def rename_event(session, event_id: str, title: str):
            event = session.get(Event, event_id)
            event.title = title
            return event.to_dict()

        updated = execute_in_transaction(
            rename_event, event_id="...", title="New Title"
        )
    """
    with db.session() as session:
        return operation(session, *args, **kwargs)
