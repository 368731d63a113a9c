"""Module containing client-side related code for cursorhub."""

import asyncio
from collections.abc import AsyncGenerator, Callable, Collection, Hashable
from contextlib import aclosing
from typing import Any
from urllib.parse import quote

import httpx

from ._logging import logger, redact
from .constants import DEFAULT_RESOURCE, NEXT_RANGE_HEADER, RANGE_HEADER
from .errors import (
    InvalidArgument,
    MissingArgument,
    PaginationLimitExceeded,
    ProtocolViolation,
    require_non_empty,
)
from .item_collection import ItemCollection
from .page import Page, is_success_status


class Client:
    """Client-side code to query a cursorhub server for a user's items, page by page."""

    def __init__(  # pylint: disable=R0913
        self,
        url: str,
        http_client: httpx.AsyncClient,
        resource: str = DEFAULT_RESOURCE,
        item_key: Callable[[Any], Hashable] | None = None,
        item_factory: Callable[[Any], Any] | None = None,
    ) -> None:
        """
        Initializes a new instance of the Client class.

        :param url: The base URL for the service.
        :param http_client: A httpx AsyncClient under which to make the HTTP requests.
            This allows one time setup of authentication etc. on the session,
            and increases performance if fetching frequently due to connection pooling.
        :param resource: The name of the collection, as it appears in the path
            `/v1/<resource>/<username>`.
        :param item_key: Returns the identity of an item, used to order the result newest
            first and to drop duplicates. Defaults to the `id` field of mapping items and to
            the item itself otherwise.
        :param item_factory: Converts each decoded JSON item, e.g. into a model class.
        """
        self.url = url.rstrip("/")
        self.resource = resource
        self.item_key = item_key
        self.item_factory = item_factory
        self._http_client = http_client

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Return the http_client being used by this client."""
        return self._http_client

    def target(self, username: str) -> str:
        """
        Return the URL of the user's collection.

        :param username: the user
        :raises MissingArgument: if username is None.
        :raises InvalidArgument: if username is empty.
        """
        require_non_empty(username, "username")
        return f"{self.url}/v1/{self.resource}/{quote(username, safe='')}"

    def _log_target(self, username: str) -> str:
        return f"{self.url}/v1/{self.resource}/{redact(username)}"

    async def fetch(self, username: str) -> list[Any]:
        """
        Fetch all items for a given username. This method will paginate through all of the
        available items for the user.

        :param username: User to fetch items for
        :return: All items of the user, newest first, without duplicates
        :raises InvalidArgument: if username is None or empty.
        :raises ProtocolViolation: if a page or its continuation token cannot be understood.
        :raises httpx.RequestError: if unable to call the endpoint successfully.
        """
        results: ItemCollection[Any] = ItemCollection(self.item_key)
        async with aclosing(self.iter_pages(username)) as pages:
            async for page in pages:
                if page.is_success:
                    results.add_all(page.items)
        return list(results.items)

    async def fetch_bounded(
        self,
        username: str,
        max_pages: int | None = None,
        timeout: float | None = None,
    ) -> list[Any]:
        """
        Fetch all items like `fetch`, giving up when the server keeps on paginating.

        :param username: User to fetch items for
        :param max_pages: Maximum number of pages to request
        :param timeout: Maximum number of seconds for the whole pagination
        :raises InvalidArgument: if max_pages is less than 1.
        :raises PaginationLimitExceeded: if more pages are offered after `max_pages` pages.
        :raises TimeoutError: if pagination takes longer than `timeout`.
        """
        if max_pages is not None and max_pages < 1:
            raise InvalidArgument("max_pages must be at least 1")
        results: ItemCollection[Any] = ItemCollection(self.item_key)
        async with asyncio.timeout(timeout):
            async with aclosing(self.iter_pages(username)) as pages:
                page_count = 0
                async for page in pages:
                    page_count += 1
                    if page.is_success:
                        results.add_all(page.items)
                    if max_pages is not None and page_count >= max_pages and page.has_more:
                        raise PaginationLimitExceeded(max_pages)
        return list(results.items)

    async def iter_pages(self, username: str) -> AsyncGenerator[Page[Any], None]:
        """
        Request the pages of the user's collection one after the other, until a response
        carries no continuation token.

        Pages answered with a status other than 200 or 206 are yielded without items.

        :param username: User to fetch items for
        :raises InvalidArgument: if username is None or empty.
        :raises ProtocolViolation: if a page or its continuation token cannot be understood.
        :raises httpx.RequestError: if unable to call the endpoint successfully.
        """
        url = self.target(username)
        token: str | None = None
        while True:
            page = await self._fetch_page(url, token, self._log_target(username))
            yield page
            if not page.has_more:
                return
            token = page.continuation_token

    async def _fetch_page(self, url: str, token: str | None, log_target: str) -> Page[Any]:
        """
        Request a single page; the response is released on every exit path.

        :param url: the collection URL
        :param token: the range token to send, None for the first page
        :param log_target: the collection URL with the username redacted
        """
        headers = {RANGE_HEADER: token} if token is not None else {}
        logger.info("GET %s", log_target)
        async with self._http_client.stream("GET", url, headers=headers) as res:
            next_token = self._parse_continuation_token(res)
            if not is_success_status(res.status_code):
                logger.warning("Skipping page of %s with status %d", log_target, res.status_code)
                return Page([], next_token, res.status_code)
            await res.aread()
            return Page(self._parse_items(res), next_token, res.status_code)

    def _parse_continuation_token(self, res: httpx.Response) -> str | None:
        """
        Read the continuation token of a response.

        :param res: the server response
        :raises ProtocolViolation: if the Next-Range header is present but blank.
        """
        token = res.headers.get(NEXT_RANGE_HEADER)
        if token is not None and not token.strip():
            raise ProtocolViolation(f"blank {NEXT_RANGE_HEADER} header")
        return token

    def _parse_items(self, res: httpx.Response) -> list[Any]:
        """
        Decode the items of a page.

        :param res: the server response, already read
        :raises ProtocolViolation: if the body is not a JSON list or an item can't be converted.
        """
        if not res.content:
            return []
        try:
            items = res.json()
        except ValueError as error:
            raise ProtocolViolation("error while parsing page", error) from error
        if not isinstance(items, list):
            raise ProtocolViolation("page is not a list of items")
        if self.item_factory is None:
            return items
        try:
            return [self.item_factory(item) for item in items]
        except Exception as error:
            raise ProtocolViolation("error while parsing item", error) from error

    async def store(self, username: str, item: dict[str, Any]) -> Any:
        """
        Store a new item for a user.

        :param username: User to add the item to
        :param item: Item to store, as JSON-serializable data
        :return: the newly stored item
        :raises httpx.HTTPError: if response status code does not indicate success.
        """
        if item is None:
            raise MissingArgument("item cannot be None")
        url = self.target(username)
        logger.debug("POST %s", self._log_target(username))
        res = await self._http_client.post(url, json=item)
        res.raise_for_status()
        created = res.json()
        return self.item_factory(created) if self.item_factory else created

    async def delete(self, username: str, ids: Collection[int] | None = None) -> None:
        """
        Delete items of a given user: the given ids only, or all of them.

        :param username: User to delete items from
        :param ids: Item ids to delete, None to delete every item
        :raises InvalidArgument: if ids is empty.
        :raises httpx.HTTPError: if response status code does not indicate success.
        """
        url = self.target(username)
        params: dict[str, str] = {}
        if ids is not None:
            if not ids:
                raise InvalidArgument("ids cannot be empty")
            params["ids"] = ",".join(str(item_id) for item_id in ids)
        logger.debug("DELETE %s", self._log_target(username))
        res = await self._http_client.delete(url, params=params)
        res.raise_for_status()

    async def ping(self) -> bool:
        """Return True if the ping response was successful."""
        url = f"{self.url}/ping"
        logger.debug("GET %s", url)
        res = await self._http_client.get(url)
        res.raise_for_status()
        return res.text == "pong"

    async def version(self) -> str:
        """Return the service version."""
        url = f"{self.url}/version"
        logger.debug("GET %s", url)
        res = await self._http_client.get(url)
        res.raise_for_status()
        return res.text
