"""
GroupsClient — listing of Google Workspace groups via the Admin SDK Directory API.

Every listing walks all pages lazily; see group_patcher.pagination.
"""
from __future__ import annotations

import logging
from typing import Any, Iterator

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from .google_factory import GoogleServiceFactory
from .models import Group
from .pagination import fetch_all_pages

logger = logging.getLogger(__name__)

# Scopes required for fetch_all_groups / GroupsClient to work.
FETCH_ALL_GROUPS_SCOPES: list[str] = [
    "https://www.googleapis.com/auth/admin.directory.group.readonly",
]

_DEFAULT_CUSTOMER = "my_customer"
_OWNER_PARAMETERS = ("customer", "domain", "userKey")


def iter_groups(directory_service: Any, **parameters: Any) -> Iterator[dict[str, Any]]:
    """
    Yield every group (raw API dict) matching the groups.list parameters.

    Without customer, domain or userKey the listing covers the whole account
    of the authorized admin (customer="my_customer").
    """
    if not any(parameters.get(key) for key in _OWNER_PARAMETERS):
        parameters["customer"] = _DEFAULT_CUSTOMER
    return fetch_all_pages(directory_service.groups().list, "groups", parameters)


def fetch_all_groups(credentials: Credentials, **parameters: Any) -> Iterator[dict[str, Any]]:
    """
    Fetch all groups visible to `credentials`, following nextPageToken.

    Usage:
        for group in fetch_all_groups(creds, domain="example.com"):
            print(group["email"])
    """
    directory = build("admin", "directory_v1", credentials=credentials, cache_discovery=False)
    return iter_groups(directory, **parameters)


class GroupsClient:
    """
    High-level Directory API group operations.

    Usage:
        factory = GoogleServiceFactory(FETCH_ALL_GROUPS_SCOPES)
        groups  = GroupsClient(factory)

        for raw in groups.iter_groups(domain="example.com"):
            ...
        typed = groups.list_groups(query="email:eng-*")
    """

    def __init__(self, factory: GoogleServiceFactory) -> None:
        self._factory = factory

    def iter_groups(self, **parameters: Any) -> Iterator[dict[str, Any]]:
        """Lazily yield raw group dicts; the service is built on the first page."""
        yield from iter_groups(self._factory.directory, **parameters)

    def list_groups(self, **parameters: Any) -> list[Group]:
        """Return every matching group as a typed Group (walks all pages)."""
        groups = [Group.from_resource(raw) for raw in self.iter_groups(**parameters)]
        logger.info("Listed %d group(s)", len(groups))
        return groups
