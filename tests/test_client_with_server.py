from collections.abc import Sequence
from operator import itemgetter
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pytest_mock import MockerFixture

from cursorhub import (
    Client,
    CursorStore,
    ItemReader,
    MemoryKeyValueStore,
    PagedFastApiHandler,
    PaginationLimitExceeded,
    RangeHeader,
)

app = FastAPI()
cursor_store = CursorStore(MemoryKeyValueStore())


class FakeItemReader(ItemReader):
    def get_items(
        self, username: str, page_range: RangeHeader, limit: int
    ) -> Sequence[dict[str, Any]]:
        return [{"this method will be replaced": "by mocks"}]


handler = PagedFastApiHandler(FakeItemReader(), page_size=4, cursor_store=cursor_store)


@app.get("/v1/notifications/{username}")
async def notifications(username: str, request: Request) -> JSONResponse:
    return await handler.handle(request, username)


@pytest_asyncio.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://example/") as httpx_client:
        yield Client("http://example", httpx_client, item_key=itemgetter("id"))


@pytest.mark.parametrize("item_count", [0, 1, 4, 5, 11])
async def test_client_fetches_every_item_from_server(
    client: Client, mocker: MockerFixture, item_count: int
) -> None:
    """Test that fetch walks every page the server serves and returns all items once."""
    # arrange
    feed = [{"id": item_id, "text": f"item {item_id}"} for item_id in range(item_count, 0, -1)]

    def read_page(
        _username: str, page_range: RangeHeader, limit: int
    ) -> Sequence[dict[str, Any]]:
        items = feed
        if page_range.start is not None:
            items = [item for item in feed if item["id"] < page_range.start]
        return items[:limit]

    get_items_mock = mocker.patch.object(FakeItemReader, "get_items")
    get_items_mock.side_effect = read_page

    # act
    result = await client.fetch("test")

    # assert
    assert result == feed
    expected_pages = max(1, -(-item_count // 4))
    assert get_items_mock.call_count == expected_pages
    first_call = get_items_mock.call_args_list[0]
    assert first_call.args == ("test", RangeHeader(), 5)


async def test_first_page_records_position(client: Client, mocker: MockerFixture) -> None:
    """Test that serving the first page stores the newest item id as the user's position."""
    feed = [{"id": 9}, {"id": 8}, {"id": 7}]
    mocker.patch.object(FakeItemReader, "get_items", side_effect=lambda u, r, limit: feed[:limit])

    await client.fetch("position")

    assert await cursor_store.fetch("position", "notifications") == 9


async def test_server_that_never_stops_paginating_is_bounded_by_caller(
    client: Client, mocker: MockerFixture
) -> None:
    """Test that fetch_bounded gives up when every page offers a continuation token."""
    feed = [{"id": item_id} for item_id in range(9, 0, -1)]
    get_items_mock = mocker.patch.object(FakeItemReader, "get_items")
    get_items_mock.side_effect = lambda u, r, limit: feed[:limit]

    with pytest.raises(PaginationLimitExceeded):
        await client.fetch_bounded("endless", max_pages=3)

    assert get_items_mock.call_count == 3


async def test_default_client_against_default_handler(mocker: MockerFixture) -> None:
    """Test that a client and a handler built with default arguments work together."""
    default_app = FastAPI()
    default_handler = PagedFastApiHandler(FakeItemReader(), page_size=2)

    @default_app.get("/v1/notifications/{username}")
    async def default_notifications(username: str, request: Request) -> JSONResponse:
        return await default_handler.handle(request, username)

    feed = [{"id": 3}, {"id": 2}, {"id": 1}]

    def read_page(
        _username: str, page_range: RangeHeader, limit: int
    ) -> Sequence[dict[str, Any]]:
        items = feed
        if page_range.start is not None:
            items = [item for item in feed if item["id"] < page_range.start]
        return items[:limit]

    mocker.patch.object(default_handler.item_reader, "get_items", side_effect=read_page)
    transport = httpx.ASGITransport(app=default_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://example/") as httpx_client:
        result = await Client("http://example", httpx_client).fetch("test")

    assert result == [{"id": 3}, {"id": 2}, {"id": 1}]
