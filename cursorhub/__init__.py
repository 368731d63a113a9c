"""cursorhub module."""

from .api_handler import PagedFastApiHandler
from .client import Client
from .constants import NEXT_RANGE_HEADER, RANGE_HEADER
from .cursor import Cursor, compare
from .cursor_store import CursorStore
from .errors import (
    CursorHubError,
    InvalidArgument,
    MissingArgument,
    PaginationLimitExceeded,
    ProtocolViolation,
    StoreOperationFailed,
)
from .item_collection import ItemCollection
from .item_reader import ItemReader
from .key_value_store import KeyValueStore, Resolver
from .memory_store import MemoryKeyValueStore
from .page import Page, RangeHeader, is_success_status

__all__ = [
    "NEXT_RANGE_HEADER",
    "RANGE_HEADER",
    "Client",
    "Cursor",
    "CursorHubError",
    "CursorStore",
    "InvalidArgument",
    "ItemCollection",
    "ItemReader",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "MissingArgument",
    "Page",
    "PagedFastApiHandler",
    "PaginationLimitExceeded",
    "ProtocolViolation",
    "RangeHeader",
    "Resolver",
    "StoreOperationFailed",
    "compare",
    "is_success_status",
]
