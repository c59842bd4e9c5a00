"""
GroupSettingsClient — Groups Settings API v1, plus bulk patching across a listing.

Usage:
    body = {"whoCanPostMessage": "ALL_MEMBERS_CAN_POST"}
    for settings in patch_all_groups({"domain": "example.com"}, body):
        print(settings["email"], settings["whoCanPostMessage"])
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from .google_factory import GoogleServiceFactory
from .groups_client import FETCH_ALL_GROUPS_SCOPES, GroupsClient

logger = logging.getLogger(__name__)

GROUPS_SETTINGS_SCOPE = "https://www.googleapis.com/auth/apps.groups.settings"

# Read for the listing, write for the patches (order kept, duplicates dropped)
PATCH_ALL_GROUPS_SCOPES: list[str] = list(
    dict.fromkeys([*FETCH_ALL_GROUPS_SCOPES, GROUPS_SETTINGS_SCOPE])
)


class GroupSettingsClient:
    """
    High-level Groups Settings operations.

    Usage:
        factory  = GoogleServiceFactory(PATCH_ALL_GROUPS_SCOPES)
        settings = GroupSettingsClient(factory)
        settings.patch("eng@example.com", {"whoCanJoin": "INVITED_CAN_JOIN"})
    """

    def __init__(self, factory: GoogleServiceFactory) -> None:
        self._factory = factory

    def patch(self, group_email: str, body: dict[str, Any]) -> dict[str, Any]:
        """Apply a partial settings object to one group; returns the updated settings."""
        result = self._factory.groups_settings.groups().patch(
            groupUniqueId=group_email, body=body
        ).execute()
        logger.info("Patched settings of %s", group_email)
        return result


def patch_all_groups(
    list_parameters: Optional[dict[str, Any]] = None,
    body: Optional[dict[str, Any]] = None,
    factory: Optional[GoogleServiceFactory] = None,
    credentials_file: Optional[Union[str, Path]] = None,
    token_cache_path: Optional[Union[str, Path]] = None,
) -> Iterator[dict[str, Any]]:
    """
    Patch every group matched by `list_parameters` with the same `body`.

    Yields each patch response as soon as it arrives. Groups are patched one
    at a time, in listing order; the first failure propagates and no later
    group is touched. Callers that need to know what was already patched
    must track the yielded responses themselves.
    """
    if factory is None:
        factory = GoogleServiceFactory(
            PATCH_ALL_GROUPS_SCOPES,
            credentials_file=credentials_file,
            token_cache_path=token_cache_path,
        )
    body = dict(body or {})
    groups = GroupsClient(factory)
    settings = GroupSettingsClient(factory)

    for group in groups.iter_groups(**(list_parameters or {})):
        yield settings.patch(group["email"], body)
