"""
Cursor pagination over googleapiclient list methods.

Google list endpoints return one page of items plus an opaque nextPageToken;
the token goes back verbatim as pageToken until the server stops sending one.

Usage:
    svc = factory.directory
    for group in fetch_all_pages(svc.groups().list, "groups", {"customer": "my_customer"}):
        print(group["email"])
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass
class PageCursor:
    """Where a listing walk stands: the next page token, and whether page one was fetched."""

    token: Optional[str] = None
    started: bool = False

    @property
    def has_next(self) -> bool:
        # The first page is always requested, even though there is no token yet
        return not self.started or bool(self.token)

    def advance(self, next_token: Optional[str]) -> None:
        self.token = next_token or None
        self.started = True

    def apply(self, parameters: dict[str, Any]) -> dict[str, Any]:
        """Request parameters for the next page. pageToken is owned by the cursor."""
        request = {k: v for k, v in parameters.items() if k != "pageToken"}
        if self.token:
            request["pageToken"] = self.token
        return request


def fetch_all_pages(
    list_method: Callable[..., Any],
    items_key: str,
    parameters: Optional[dict[str, Any]] = None,
) -> Iterator[dict[str, Any]]:
    """
    Lazily yield every item of a paged listing, in server order.

    Args:
        list_method:  e.g. service.groups().list, called with keyword
                      parameters, must return a request with .execute().
        items_key:    Response key holding the page's items ("groups", "users"…).
        parameters:   Filters forwarded unchanged on every page.

    Pages are fetched only as the consumer asks for more items. A page with
    no items but a token is not the end. Any request error propagates and
    ends the walk; each call to this function starts a new walk.
    """
    parameters = dict(parameters or {})
    cursor = PageCursor()
    page_number = 0

    while cursor.has_next:
        response = list_method(**cursor.apply(parameters)).execute()
        page_number += 1
        items = response.get(items_key) or []
        logger.debug("Page %d: %d %s", page_number, len(items), items_key)

        yield from items
        cursor.advance(response.get("nextPageToken"))
