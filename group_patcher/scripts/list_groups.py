"""
list_groups.py — List Google Workspace groups through the Directory API.

Requests the same scopes as patch-all-groups: every command shares one
token cache, and the cache does not record scopes.

Usage:
    list-groups
    list-groups --domain example.com
    list-groups --customer my_customer --query "email:eng-*"
    list-groups --debug

Output (JSON to stdout):
    {
        "group_count": 2,
        "groups": [ { id, email, name, description, direct_members_count,
                      admin_created, aliases } ]
    }
"""
from __future__ import annotations

import argparse
from typing import Any

from ..base import BaseScript
from ..google_factory import GoogleServiceFactory
from ..group_settings_client import PATCH_ALL_GROUPS_SCOPES
from ..groups_client import GroupsClient
from ..models import Group


def add_listing_arguments(parser: argparse.ArgumentParser) -> None:
    """Directory groups.list filters, shared with patch-all-groups."""
    owner = parser.add_mutually_exclusive_group()
    owner.add_argument(
        "--customer", metavar="ID",
        help="Customer ID (default: my_customer, the admin's own account)",
    )
    owner.add_argument("--domain", metavar="DOMAIN", help="Only groups of this domain.")
    owner.add_argument(
        "--user-key", metavar="EMAIL",
        help="Only groups this user or group is a member of.",
    )
    parser.add_argument(
        "--query", metavar="QUERY",
        help='Directory search query, e.g. "email:eng-*".',
    )
    parser.add_argument(
        "--max-results", type=int, metavar="N",
        help="Page size (the listing always walks every page).",
    )


def listing_parameters(args: argparse.Namespace) -> dict[str, Any]:
    """groups.list keyword parameters from parsed CLI flags."""
    candidates = {
        "customer":   args.customer,
        "domain":     args.domain,
        "userKey":    args.user_key,
        "query":      args.query,
        "maxResults": args.max_results,
    }
    return {k: v for k, v in candidates.items() if v is not None}


class ListGroups(BaseScript):
    """List Google Workspace groups (Directory API)."""

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        add_listing_arguments(parser)

    def run(self) -> dict[str, Any]:
        params = listing_parameters(self.args)
        self.logger.info("Listing groups with %s", params or "default parameters")

        factory = GoogleServiceFactory(
            PATCH_ALL_GROUPS_SCOPES,
            credentials_file=self.args.credentials_file,
            token_cache_path=self.args.token_file,
        )
        groups = GroupsClient(factory).list_groups(**params)

        return {
            "group_count": len(groups),
            "groups": [_fmt_group(g) for g in groups],
        }


def _fmt_group(group: Group) -> dict:
    return {
        "id":                   group.group_id,
        "email":                group.email,
        "name":                 group.name,
        "description":          group.description,
        "direct_members_count": group.direct_members_count,
        "admin_created":        group.admin_created,
        "aliases":              group.aliases,
    }


def main() -> None:
    ListGroups.main()


if __name__ == "__main__":
    main()
