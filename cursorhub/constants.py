"""Module containing constants which are relevant for both Client and Server."""

from http import HTTPStatus

RANGE_HEADER = "Range"
"""Request header carrying the range token of the page being requested."""

NEXT_RANGE_HEADER = "Next-Range"
"""
Response header carrying the continuation token. Its absence is the only signal that no
further pages exist.
"""

CONTENT_RANGE_HEADER = "Content-Range"
ACCEPT_RANGES_HEADER = "Accept-Ranges"

RANGE_FIELD = "id"
"""The item attribute pages are ranged over."""

SUCCESS_STATUSES = (HTTPStatus.OK, HTTPStatus.PARTIAL_CONTENT)
"""Only pages answered with one of these statuses are merged into the result."""

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 1000

DEFAULT_RESOURCE = "notifications"
DEFAULT_STREAM_NAME = "notifications"
