"""
patch_all_groups.py — Apply one Groups Settings patch to every listed group.

Body input (pick one):
    --body '{"whoCanJoin": "INVITED_CAN_JOIN"}'   inline JSON object
    --body-file /path/to/settings.json            read the JSON object from a file

Usage:
    # Every group of the admin's account
    patch-all-groups --body '{"whoCanPostMessage": "ALL_MEMBERS_CAN_POST"}'

    # Only one domain, body from a file
    patch-all-groups --domain example.com --body-file /tmp/settings.json

    # Show which groups would be patched, without patching
    patch-all-groups --query "email:eng-*" --body-file /tmp/settings.json --dry-run

Output (JSON to stdout):
    {
        "dry_run": false,
        "patched_count": 2,
        "groups": ["eng@example.com", "ops@example.com"]
    }

Groups are patched one at a time in listing order. The first failure stops
the run; groups patched before it are logged.
"""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from ..base import BaseScript
from ..exceptions import ConfigError
from ..google_factory import GoogleServiceFactory
from ..group_settings_client import PATCH_ALL_GROUPS_SCOPES, patch_all_groups
from ..groups_client import GroupsClient
from .list_groups import add_listing_arguments, listing_parameters


def load_patch_body(args: argparse.Namespace) -> dict[str, Any]:
    """Parse --body / --body-file into a settings object. Raises ConfigError."""
    source = args.body_file or "--body"
    try:
        text = Path(args.body_file).read_text(encoding="utf-8") if args.body_file else args.body
        body = json.loads(text)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"unable to read patch body from {source}: {exc}", source) from exc
    if not isinstance(body, dict) or not body:
        raise ConfigError(f"patch body from {source} must be a non-empty JSON object", source)
    return body


class PatchAllGroups(BaseScript):
    """Patch the settings of every matching Google Workspace group."""

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        add_listing_arguments(parser)
        body_group = parser.add_mutually_exclusive_group(required=True)
        body_group.add_argument(
            "--body", metavar="JSON",
            help="Partial Groups Settings resource (inline JSON object).",
        )
        body_group.add_argument(
            "--body-file", metavar="PATH",
            help="Path to a file containing the partial settings JSON object.",
        )
        parser.add_argument(
            "--dry-run", action="store_true",
            help="List the groups that would be patched, without patching them.",
        )

    def run(self) -> dict[str, Any]:
        body = load_patch_body(self.args)
        params = listing_parameters(self.args)
        self.logger.debug("Patch body: %s", body)

        if self.args.dry_run:
            return self._dry_run(params)

        factory = GoogleServiceFactory(
            PATCH_ALL_GROUPS_SCOPES,
            credentials_file=self.args.credentials_file,
            token_cache_path=self.args.token_file,
        )
        patched: list[str] = []
        try:
            for settings in patch_all_groups(params, body, factory=factory):
                patched.append(settings.get("email", ""))
        except Exception:
            self.logger.error(
                "Stopped after patching %d group(s): %s", len(patched), patched
            )
            raise

        self.logger.info("Patched %d group(s)", len(patched))
        return {"dry_run": False, "patched_count": len(patched), "groups": patched}

    def _dry_run(self, params: dict[str, Any]) -> dict[str, Any]:
        # Same scopes as a real run: the token cached now is reused by it
        factory = GoogleServiceFactory(
            PATCH_ALL_GROUPS_SCOPES,
            credentials_file=self.args.credentials_file,
            token_cache_path=self.args.token_file,
        )
        emails = [g["email"] for g in GroupsClient(factory).iter_groups(**params)]
        self.logger.info("Dry run: %d group(s) would be patched", len(emails))
        return {"dry_run": True, "patched_count": 0, "groups": emails}


def main() -> None:
    PatchAllGroups.main()


if __name__ == "__main__":
    main()
