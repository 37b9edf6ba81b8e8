"""Translation of database failures into domain errors."""

from collections.abc import Iterator
from contextlib import contextmanager

import logfire
from sqlalchemy.exc import SQLAlchemyError

from cookbook.domain.error import StoreUnavailableError


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Raise StoreUnavailableError for any backend failure inside the block.

    Args:
        operation: Repository operation name, for the error and the log
    """
    try:
        yield
    except (SQLAlchemyError, OSError) as e:
        logfire.error(
            "Comment store operation failed",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise StoreUnavailableError(operation, str(e)) from e
