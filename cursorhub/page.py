"""
Page protocol shared by the client and the server.

A client requests the first page of a collection without a `Range` header. Every response
carries a page of items and, when more items exist, a `Next-Range` header whose value is sent
back verbatim as the `Range` header of the next request. A response without `Next-Range` is
the last page. Only the server interprets the token; to the client it is opaque.

The token format follows the range style `id ]8..; max=3`: ranged field, an optional `]`
marking the start as exclusive, the start and end ids, and an optional page size.
"""

import re
from dataclasses import dataclass
from http import HTTPStatus
from typing import Generic, TypeVar

from .constants import RANGE_FIELD, SUCCESS_STATUSES
from .errors import ProtocolViolation

T = TypeVar("T")

_RANGE_PATTERN = re.compile(
    r"^\s*(?P<field>[A-Za-z_]\w*)\s+"
    r"(?P<exclusive>\])?(?P<start>\d+)?\.\.(?P<end>\d+)?"
    r"\s*(?:;\s*max=(?P<max>\d+))?\s*$"
)


def is_success_status(status_code: int) -> bool:
    """Return True if a page answered with this status should be merged."""
    return status_code in SUCCESS_STATUSES


@dataclass
class Page(Generic[T]):
    """
    Represents a single page of items with its continuation token.

    Attributes:
        items: Items of this page, in the order the server returned them
        continuation_token: Token for the next page (None if no more pages)
        status_code: HTTP status the page was answered with
    """

    items: list[T]
    continuation_token: str | None = None
    status_code: int = HTTPStatus.OK

    @property
    def has_more(self) -> bool:
        """Returns True if there are more pages available."""
        return self.continuation_token is not None

    @property
    def is_success(self) -> bool:
        """Returns True if the items of this page belong in the result."""
        return is_success_status(self.status_code)


@dataclass(frozen=True)
class RangeHeader:
    """
    A parsed range token.

    :param field: The item attribute the range applies to
    :param start: The newest id of the range, or None to start at the newest item
    :param start_inclusive: Whether the item with id `start` belongs to the range
    :param end: The oldest id of the range, or None for no lower bound
    :param max_items: The requested page size, or None for the server default
    """

    field: str = RANGE_FIELD
    start: int | None = None
    start_inclusive: bool = True
    end: int | None = None
    max_items: int | None = None

    @classmethod
    def parse(cls, value: str) -> "RangeHeader":
        """
        Parse a range token.

        :param value: the header value
        :raises ProtocolViolation: if the value does not follow the range format
        """
        match = _RANGE_PATTERN.match(value)
        if match is None:
            raise ProtocolViolation(f"invalid range: {value!r}")

        start = match.group("start")
        if match.group("exclusive") and start is None:
            raise ProtocolViolation(f"exclusive range without a start: {value!r}")

        max_items = match.group("max")
        if max_items is not None and int(max_items) < 1:
            raise ProtocolViolation(f"range max must be positive: {value!r}")

        end = match.group("end")
        return cls(
            field=match.group("field"),
            start=int(start) if start is not None else None,
            start_inclusive=not match.group("exclusive"),
            end=int(end) if end is not None else None,
            max_items=int(max_items) if max_items is not None else None,
        )

    @classmethod
    def after(cls, last_id: int, max_items: int | None = None) -> "RangeHeader":
        """Build the range of the page following the item with the given id."""
        return cls(start=last_id, start_inclusive=False, max_items=max_items)

    def __str__(self) -> str:
        start = "" if self.start is None else str(self.start)
        end = "" if self.end is None else str(self.end)
        bracket = "" if self.start_inclusive else "]"
        text = f"{self.field} {bracket}{start}..{end}"
        if self.max_items is not None:
            text += f"; max={self.max_items}"
        return text
