"""Module containing an in-memory implementation of the KeyValueStore interface."""

from ._logging import logger
from .key_value_store import KeyValueStore, Resolver


class MemoryKeyValueStore(KeyValueStore):
    """
    Keep values in a dictionary.

    Concurrent writes from other processes can be simulated with `add_sibling`: the value
    is held as an unreconciled sibling until the next `put` on that key, which resolves
    it together with the value being written.
    """

    def __init__(self) -> None:
        """Initialize the MemoryKeyValueStore with empty state."""
        self._values: dict[str, bytes] = {}
        self._siblings: dict[str, list[bytes]] = {}

    def add_sibling(self, key: str, value: bytes) -> None:
        """
        Record a conflicting write to the given key which has not been reconciled yet.

        :param key: the storage key
        :param value: the value written by the concurrent writer
        """
        self._siblings.setdefault(key, []).append(value)

    def siblings(self, key: str) -> list[bytes]:
        """Return the unreconciled siblings for the given key."""
        return list(self._siblings.get(key, []))

    async def get(self, key: str) -> bytes | None:
        return self._values.get(key)

    async def put(self, key: str, value: bytes, resolver: Resolver) -> None:
        pending = self._siblings.pop(key, [])
        if pending:
            logger.debug("Resolving %d siblings", len(pending) + 1)
            value = resolver([value, *pending])
        self._values[key] = value

    async def delete(self, key: str) -> None:
        self._values.pop(key, None)
        self._siblings.pop(key, None)
