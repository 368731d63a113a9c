"""This module defines the Cursor value object used to remember a position within a stream."""

from dataclasses import dataclass
from functools import total_ordering
from typing import Any


@total_ordering
@dataclass(frozen=True)
class Cursor:
    """
    An immutable (stream key, position value) pair.

    Cursors order by key ascending, then by numeric value descending, so the most
    advanced cursor of a stream sorts first. Equality and ordering agree: two cursors
    compare as equal only when both key and value are equal.

    :param key: The stream identifier, e.g. "<user>-<stream name>"
    :param value: The position within the stream, a numerically comparable string
    """

    key: str
    value: str

    @property
    def position(self) -> int:
        """Return the value as an integer position."""
        return int(self.value)

    def _sort_key(self) -> tuple[Any, ...]:
        try:
            return (self.key, 0, -int(self.value), self.value)
        except ValueError:
            # non-numeric values sort after every numeric value of the same key
            return (self.key, 1, 0, self.value)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        return f"Cursor{{key={self.key}, value={self.value}}}"


def compare(a: Cursor, b: Cursor) -> int:
    """Three-way comparison of two cursors: negative, zero or positive."""
    if a == b:
        return 0
    return -1 if a < b else 1
