"""Api handlers definition."""

import inspect
from collections.abc import Callable, Sequence
from http import HTTPStatus
from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from ._logging import logger, redact
from .constants import (
    ACCEPT_RANGES_HEADER,
    CONTENT_RANGE_HEADER,
    DEFAULT_PAGE_SIZE,
    DEFAULT_STREAM_NAME,
    MAX_PAGE_SIZE,
    NEXT_RANGE_HEADER,
    RANGE_FIELD,
    RANGE_HEADER,
)
from .cursor_store import CursorStore
from .errors import ProtocolViolation, StoreOperationFailed
from .item_collection import default_item_key
from .item_reader import ItemReader
from .page import RangeHeader


class PagedFastApiHandler:
    """Handler serving a user's items page by page from server side using fastapi."""

    def __init__(  # pylint: disable=R0913
        self,
        item_reader: ItemReader,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
        cursor_store: CursorStore | None = None,
        stream_name: str = DEFAULT_STREAM_NAME,
        item_id: Callable[[dict[str, Any]], int] = default_item_key,
    ) -> None:
        """
        Initialize the PagedFastApiHandler with an ItemReader.

        :param item_reader: reads the pages of items
        :param page_size: page size when the request does not ask for one
        :param max_page_size: upper bound for the page size a request may ask for
        :param cursor_store: when given, the newest id served on a first page is stored
            as the user's position in `stream_name`
        :param stream_name: the stream name positions are stored under
        :param item_id: returns the id of an item
        """
        self.item_reader = item_reader
        self.page_size = page_size
        self.max_page_size = max_page_size
        self.cursor_store = cursor_store
        self.stream_name = stream_name
        self.item_id = item_id

    def validate(self, request: Request) -> tuple[RangeHeader | None, int]:
        """Validate the Range header, if any.
        Return the requested range and the number of items to serve.
        """
        range_param = request.headers.get(RANGE_HEADER)
        if range_param is None:
            return None, self.page_size
        try:
            page_range = RangeHeader.parse(range_param)
        except ProtocolViolation as err:
            raise HTTPException(
                status_code=HTTPStatus.REQUESTED_RANGE_NOT_SATISFIABLE,
                detail=str(err),
            ) from err
        if page_range.field != RANGE_FIELD:
            raise HTTPException(
                status_code=HTTPStatus.REQUESTED_RANGE_NOT_SATISFIABLE,
                detail=f"Range field must be '{RANGE_FIELD}'",
            )
        limit = min(page_range.max_items or self.page_size, self.max_page_size)
        return page_range, limit

    async def read_items(
        self, username: str, page_range: RangeHeader, limit: int
    ) -> Sequence[dict[str, Any]]:
        """Read items from the ItemReader, awaiting the result if it is asynchronous."""
        items = self.item_reader.get_items(username, page_range, limit)
        if inspect.isawaitable(items):
            items = await items
        return items

    async def handle(self, request: Request, username: str) -> JSONResponse:
        """Handle the request after validation.
        Return one page of items to the client.
        """
        page_range, limit = self.validate(request)
        items = list(await self.read_items(username, page_range or RangeHeader(), limit + 1))

        headers = {ACCEPT_RANGES_HEADER: RANGE_FIELD}
        has_more = len(items) > limit
        if has_more:
            items = items[:limit]
            headers[NEXT_RANGE_HEADER] = str(RangeHeader.after(self.item_id(items[-1]), limit))
        if items:
            first_id, last_id = self.item_id(items[0]), self.item_id(items[-1])
            headers[CONTENT_RANGE_HEADER] = f"{RANGE_FIELD} {first_id}..{last_id}"

        if page_range is None and items and self.cursor_store is not None:
            await self._store_position(self.cursor_store, username, self.item_id(items[0]))

        status_code = (
            status.HTTP_206_PARTIAL_CONTENT
            if page_range is not None or has_more
            else status.HTTP_200_OK
        )
        return JSONResponse(content=items, status_code=status_code, headers=headers)

    async def _store_position(
        self, cursor_store: CursorStore, username: str, position: int
    ) -> None:
        try:
            await cursor_store.store(username, self.stream_name, position)
        except StoreOperationFailed as err:
            logger.warning("Unable to store position for user %s", redact(username))
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Unable to store cursor",
            ) from err
