"""Module containing the server-side persistence of per-user stream cursors."""

from collections.abc import Sequence

from ._logging import logger, redact
from .cursor import Cursor
from .errors import require_non_empty, translate_store_errors
from .key_value_store import KeyValueStore, Resolver


class CursorStore:
    """
    Persist the last position a user reached in a named stream.

    Each (user, stream name) pair maps to one entry in the backing key-value store holding
    the position as its only payload. Failures of the backing store never reach the caller
    in their native form: they are raised as StoreOperationFailed.
    """

    def __init__(self, kv_store: KeyValueStore) -> None:
        """
        Initializes a new instance of the CursorStore class.

        :param kv_store: The backing key-value store. It is the serialization point for
            concurrent writers, so no locking happens here.
        """
        self._kv_store = kv_store

    @property
    def kv_store(self) -> KeyValueStore:
        """Return the backing store being used by this cursor store."""
        return self._kv_store

    @staticmethod
    def derive_key(user: str, stream_name: str) -> str:
        """Return the storage key for the given user and stream name."""
        return f"{user}-{stream_name}"

    async def fetch(self, user: str, stream_name: str) -> int | None:
        """
        Fetch the stored position for a user's stream.

        :param user: the user the cursor belongs to
        :param stream_name: the name of the stream
        :return: the stored position, or None if no cursor has been stored
        :raises MissingArgument: if user or stream_name is None
        :raises InvalidArgument: if user or stream_name is empty
        :raises StoreOperationFailed: if the backing store fails
        """
        key = self._validated_key(user, stream_name)
        logger.debug("Fetching cursor %s", redact(key))
        with translate_store_errors("fetch"):
            payload = await self._kv_store.get(key)
            if payload is None:
                return None
            return Cursor(key, payload.decode("ascii")).position

    async def store(self, user: str, stream_name: str, position: int) -> None:
        """
        Store the position for a user's stream, replacing any previous position.

        :param user: the user the cursor belongs to
        :param stream_name: the name of the stream
        :param position: the position to remember
        :raises MissingArgument: if user or stream_name is None
        :raises InvalidArgument: if user or stream_name is empty
        :raises StoreOperationFailed: if the backing store fails
        """
        key = self._validated_key(user, stream_name)
        logger.debug("Storing cursor %s", redact(key))
        with translate_store_errors("store"):
            await self._kv_store.put(key, str(position).encode("ascii"), self._resolver(key))

    async def delete(self, user: str, stream_name: str) -> None:
        """
        Delete the stored position for a user's stream, if there is one.

        :param user: the user the cursor belongs to
        :param stream_name: the name of the stream
        :raises MissingArgument: if user or stream_name is None
        :raises InvalidArgument: if user or stream_name is empty
        :raises StoreOperationFailed: if the backing store fails
        """
        key = self._validated_key(user, stream_name)
        logger.debug("Deleting cursor %s", redact(key))
        with translate_store_errors("delete"):
            await self._kv_store.delete(key)

    def _validated_key(self, user: str, stream_name: str) -> str:
        require_non_empty(user, "user")
        require_non_empty(stream_name, "stream_name")
        return self.derive_key(user, stream_name)

    @staticmethod
    def _resolver(key: str) -> Resolver:
        """
        Build the sibling resolver for the given key.

        Siblings converge on the first cursor in Cursor order, the most advanced position.
        """

        def resolve(siblings: Sequence[bytes]) -> bytes:
            if not siblings:
                raise ValueError("no siblings to resolve")
            cursors = sorted(Cursor(key, sibling.decode("ascii")) for sibling in siblings)
            return cursors[0].value.encode("ascii")

        return resolve
