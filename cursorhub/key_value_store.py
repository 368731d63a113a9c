"""Module to define the KeyValueStore interface."""

from collections.abc import Callable, Sequence
from typing import Protocol

Resolver = Callable[[Sequence[bytes]], bytes]
"""
A merge function the store invokes with every conflicting value (siblings) for a key,
returning the single value the key converges to.
"""


class KeyValueStore(Protocol):
    """
    KeyValueStore is an interface describing an eventually consistent key-value service
    offering get, put-with-resolver and delete by key.

    Any method may fail with an arbitrary exception, or be cancelled while awaited.
    """

    async def get(self, key: str) -> bytes | None:
        """
        Read the value stored at the given key.

        :param key: the storage key
        :return: the stored value, or None if there is no entry for the key
        """
        ...

    async def put(self, key: str, value: bytes, resolver: Resolver) -> None:
        """
        Write the value at the given key, reconciling conflicting concurrent writes.

        :param key: the storage key
        :param value: the value to write
        :param resolver: called with the conflicting values when the store detects siblings
        """
        ...

    async def delete(self, key: str) -> None:
        """
        Remove the entry at the given key. Removing a missing key is not an error.

        :param key: the storage key
        """
        ...
