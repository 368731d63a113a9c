"""Module to accumulate the items of several pages into one ordered collection."""

from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from typing import Any, Generic, TypeVar

from .constants import RANGE_FIELD

T = TypeVar("T")


def default_item_key(item: Any) -> Any:
    """Return the ranged field of a mapping item, or the item itself for scalars."""
    if isinstance(item, Mapping):
        return item[RANGE_FIELD]
    return item


class ItemCollection(Generic[T]):
    """
    Deduplicated collection of items ordered newest first.

    Items are identified and ordered by `key(item)`, by default their `id` field; when two
    items share a key the one added first is kept.
    """

    def __init__(self, key: Callable[[T], Hashable] | None = None) -> None:
        """Initialize the ItemCollection with empty state."""
        self._key = key or default_item_key
        self._items: dict[Hashable, T] = {}

    def clear(self) -> None:
        """Clear the collected items, ready to accumulate a new result."""
        self._items.clear()

    @property
    def items(self) -> Sequence[T]:
        """Return the collected items, highest key first."""
        return sorted(self._items.values(), key=self._key, reverse=True)

    def add(self, item: T) -> bool:
        """
        Add the given item unless an item with the same key is already present.

        :param item: the item
        :return: True if the item was added
        """
        item_key = self._key(item)
        if item_key in self._items:
            return False
        self._items[item_key] = item
        return True

    def add_all(self, items: Iterable[T]) -> int:
        """
        Add every item of a page.

        :param items: the items
        :return: how many of them were not present yet
        """
        return sum(self.add(item) for item in items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        try:
            return self._key(item) in self._items  # type: ignore[arg-type]
        except (KeyError, TypeError):
            return False
