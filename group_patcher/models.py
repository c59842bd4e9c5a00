"""
Typed data models for OAuth client identity and Directory API groups.

All classes are plain dataclasses — no external dependencies, safe to import
anywhere. Business logic lives in the client modules, not here.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


# ── OAuth client ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ClientIdentity:
    """An OAuth 2.0 client registered in a Google Cloud project."""

    client_id: str
    client_secret: str
    redirect_uri: str
    auth_uri: str = GOOGLE_AUTH_URI
    token_uri: str = GOOGLE_TOKEN_URI

    def to_client_config(self) -> dict[str, Any]:
        """Client config in the shape google_auth_oauthlib.flow.Flow expects."""
        return {
            "installed": {
                "client_id":     self.client_id,
                "client_secret": self.client_secret,
                "redirect_uris": [self.redirect_uri],
                "auth_uri":      self.auth_uri,
                "token_uri":     self.token_uri,
            }
        }


# ── Directory ─────────────────────────────────────────────────────────────────

@dataclass
class Group:
    """A Google Workspace group as returned by the Directory API."""

    group_id: str
    email: str
    name: str = ""
    description: str = ""
    direct_members_count: int = 0
    admin_created: bool = False
    aliases: list[str] = field(default_factory=list)

    @classmethod
    def from_resource(cls, raw: dict[str, Any]) -> "Group":
        """Convert a raw Directory API group dict into a typed Group."""
        return cls(
            group_id=raw.get("id", ""),
            email=raw.get("email", ""),
            name=raw.get("name", ""),
            description=raw.get("description", ""),
            # The API serialises int64 fields as strings
            direct_members_count=int(raw.get("directMembersCount") or 0),
            admin_created=bool(raw.get("adminCreated", False)),
            aliases=list(raw.get("aliases", [])),
        )
