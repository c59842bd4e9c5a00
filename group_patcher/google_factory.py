"""
GoogleServiceFactory — single OAuth2 credential shared across Google API clients.

Both service objects (Directory, Groups Settings) are built lazily and cached,
so constructing several clients from the same factory does not trigger
repeated auth flows or API client builds.

Usage:
    factory = GoogleServiceFactory(PATCH_ALL_GROUPS_SCOPES)

    directory_svc = factory.directory
    settings_svc  = factory.groups_settings

    # Or pass the factory to a typed client class:
    from group_patcher.groups_client import GroupsClient
    client = GroupsClient(factory)
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional, Union

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from .google_auth import build_oauth2_client


class GoogleServiceFactory:
    """
    Constructs and caches Google API service objects from a single OAuth2 credential.

    Credentials are acquired once, on first use (cache file or interactive prompt).
    Service objects are built at most once per (api_name, version) pair.
    """

    def __init__(
        self,
        scopes: list[str],
        credentials_file: Optional[Union[str, Path]] = None,
        token_cache_path: Optional[Union[str, Path]] = None,
        ask: Optional[Callable[[str], str]] = None,
    ) -> None:
        self.scopes: list[str] = list(scopes)
        self._credentials_file = credentials_file
        self._token_cache_path = token_cache_path
        self._ask = ask
        self._creds: Optional[Credentials] = None
        self._services: dict[str, Any] = {}

    # ── Credentials ───────────────────────────────────────────────────────────

    @property
    def credentials(self) -> Credentials:
        """OAuth2 credentials for self.scopes (acquired on first access)."""
        if self._creds is None:
            self._creds = build_oauth2_client(
                self.scopes,
                credentials_file=self._credentials_file,
                token_cache_path=self._token_cache_path,
                ask=self._ask,
            )
        return self._creds

    # ── Internal builder ──────────────────────────────────────────────────────

    def _build(self, name: str, version: str) -> Any:
        """Build and cache a googleapiclient service object."""
        key = f"{name}/{version}"
        if key not in self._services:
            self._services[key] = build(
                name, version, credentials=self.credentials, cache_discovery=False
            )
        return self._services[key]

    # ── Service properties ────────────────────────────────────────────────────

    @property
    def directory(self) -> Any:
        """Admin SDK Directory API directory_v1 service object."""
        return self._build("admin", "directory_v1")

    @property
    def groups_settings(self) -> Any:
        """Groups Settings API v1 service object."""
        return self._build("groupssettings", "v1")
