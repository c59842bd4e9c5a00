"""
reauth.py — Re-authorize with the full group_patcher scope set.

Run this after the required scopes change (the token cache does not record
which scopes it was granted for). Deletes the cached token and runs the
interactive authorization again.

Usage:
    group-patcher-reauth
    group-patcher-reauth --token-file ~/cred/group_patcher_token.json
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from .. import config
from ..base import BaseScript
from ..google_auth import read_credentials_file
from ..google_factory import GoogleServiceFactory
from ..group_settings_client import PATCH_ALL_GROUPS_SCOPES


class Reauth(BaseScript):
    """Delete the cached token and re-run the interactive OAuth flow."""

    def run(self) -> dict[str, Any]:
        token_file = Path(self.args.token_file) if self.args.token_file else config.token_file()
        credentials_file = self.args.credentials_file or config.credentials_file()
        # Fail on a bad credentials file while the old token is still in place
        read_credentials_file(credentials_file)

        removed = token_file.exists()
        if removed:
            token_file.unlink()
            self.logger.info("Deleted old token: %s", token_file)

        self.logger.info("Requesting %d scope(s):", len(PATCH_ALL_GROUPS_SCOPES))
        for scope in PATCH_ALL_GROUPS_SCOPES:
            self.logger.info("  %s", scope)

        factory = GoogleServiceFactory(
            PATCH_ALL_GROUPS_SCOPES,
            credentials_file=credentials_file,
            token_cache_path=token_file,
        )
        _ = factory.credentials   # triggers the interactive flow
        self.logger.info("Re-auth complete.")

        return {
            "token_file": str(token_file),
            "removed_old_token": removed,
            "scopes": PATCH_ALL_GROUPS_SCOPES,
        }


def main() -> None:
    Reauth.main()


if __name__ == "__main__":
    main()
