"""Module to define the ItemReader interface."""

from collections.abc import Awaitable, Sequence
from typing import Any, Protocol

from .page import RangeHeader

# pylint: disable=R0903


class ItemReader(Protocol):
    """
    ItemReader is an interface describing an abstraction for reading a page of a user's
    items at server side. Implementations may be synchronous or asynchronous.
    """

    def get_items(
        self,
        username: str,
        page_range: RangeHeader,
        limit: int,
    ) -> Sequence[dict[str, Any]] | Awaitable[Sequence[dict[str, Any]]]:
        """
        Read up to `limit` items of the user within the given range, newest first.

        :param username: the user whose items are requested
        :param page_range: the requested range; an unbounded range on the first page
        :param limit: maximum number of items to return
        """
        ...
