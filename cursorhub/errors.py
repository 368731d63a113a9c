"""
This module defines the errors raised by cursorhub.

Callers only ever see subclasses of `CursorHubError` from the cursor store: precondition
failures (`InvalidArgument`, `MissingArgument`) are raised before any I/O, and every failure
of the backing key-value store is re-raised as `StoreOperationFailed`.
"""

import asyncio
from collections.abc import Generator
from contextlib import contextmanager

from ._logging import logger


class CursorHubError(Exception):
    """Base exception for all cursorhub errors."""

    def __init__(self, message: str, original_error: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class InvalidArgument(CursorHubError, ValueError):
    """Raised when a required string argument is empty."""


class MissingArgument(InvalidArgument, TypeError):
    """Raised when a required argument is None."""


class StoreOperationFailed(CursorHubError):
    """Raised when the backing key-value store fails during a cursor store operation."""

    def __init__(self, operation: str, original_error: BaseException | None = None) -> None:
        msg = f"Cursor store operation '{operation}' failed"
        if original_error is not None:
            msg += f": {original_error!r}"
        super().__init__(msg, original_error)
        self.operation = operation


class ProtocolViolation(CursorHubError, ValueError):
    """Raised when a range or continuation token, or a page body, cannot be understood."""


class PaginationLimitExceeded(CursorHubError):
    """Raised when the server keeps offering pages beyond the caller's page budget."""

    def __init__(self, max_pages: int) -> None:
        super().__init__(f"Pagination stopped after {max_pages} pages with more available")
        self.max_pages = max_pages


def require_non_empty(value: str | None, name: str) -> str:
    """
    Check that a required string argument is present and non-empty.

    :param value: the argument value
    :param name: the argument name, used in the error message
    :raises MissingArgument: if the value is None
    :raises InvalidArgument: if the value is empty
    :return: the value, unchanged
    """
    if value is None:
        raise MissingArgument(f"{name} cannot be None")
    if not value:
        raise InvalidArgument(f"{name} cannot be empty")
    return value


@contextmanager
def translate_store_errors(operation: str) -> Generator[None, None, None]:
    """
    Context manager that catches any failure of an awaited backing store call
    and raises StoreOperationFailed instead.

    Cancellation while waiting on the store counts as a failure of the operation: it is
    acknowledged on the current task and surfaced as StoreOperationFailed.

    Usage:
        with translate_store_errors("store"):
            await kv_store.put(...)
    """
    try:
        yield
    except asyncio.CancelledError as error:
        task = asyncio.current_task()
        if task is not None and task.cancelling():
            task.uncancel()
        logger.warning("Cursor store %s interrupted", operation)
        raise StoreOperationFailed(operation, error) from error
    except Exception as error:
        logger.warning("Cursor store %s failed: %r", operation, error)
        raise StoreOperationFailed(operation, error) from error
