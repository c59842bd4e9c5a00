"""
Google OAuth2 helper with token persistence, for use from a terminal.

The first call prints an authorization URL, waits for the operator to paste
the one-time code back, exchanges it for a token set and caches that token set
as JSON. Later calls read the cache and never touch the network or the prompt.

To obtain the credentials file, download an OAuth 2.0 client ID of the
"Desktop app" type from the Credentials panel of a Google Cloud project.

Usage:
    from group_patcher.google_auth import build_oauth2_client
    creds = build_oauth2_client(
        ["https://www.googleapis.com/auth/admin.directory.group.readonly"]
    )
    service = googleapiclient.discovery.build("admin", "directory_v1", credentials=creds)
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar, Union

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from . import config
from .exceptions import AuthExchangeError, ConfigError
from .models import GOOGLE_AUTH_URI, GOOGLE_TOKEN_URI, ClientIdentity

logger = logging.getLogger(__name__)

T = TypeVar("T")
PathLike = Union[str, Path]
TokenSet = dict[str, Any]

_CODE_QUESTION = "Enter the code from that page here: "


# ── Credentials file ──────────────────────────────────────────────────────────

def read_credentials_file(path: PathLike) -> ClientIdentity:
    """
    Load the OAuth client identity from a Google client secrets JSON file.

    Raises ConfigError if the file is missing, unreadable or malformed.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"unable to read credentials file {path}: {exc}", str(path)) from exc

    try:
        credentials = json.loads(content)
    except ValueError as exc:
        raise ConfigError(f"credentials file {path} is not valid JSON: {exc}", str(path)) from exc

    section = None
    if isinstance(credentials, dict):
        section = credentials.get("installed") or credentials.get("web")
    if not isinstance(section, dict):
        raise ConfigError(
            f"credentials file {path} has no 'installed' or 'web' client section",
            str(path),
        )

    try:
        redirect_uris = section["redirect_uris"]
        return ClientIdentity(
            client_id=section["client_id"],
            client_secret=section["client_secret"],
            redirect_uri=redirect_uris[0],
            auth_uri=section.get("auth_uri", GOOGLE_AUTH_URI),
            token_uri=section.get("token_uri", GOOGLE_TOKEN_URI),
        )
    except (KeyError, IndexError, TypeError) as exc:
        raise ConfigError(f"credentials file {path} is missing {exc}", str(path)) from exc


# ── JSON file cache ───────────────────────────────────────────────────────────

def cache_using_json_file(
    producer: Callable[[], T],
    path: PathLike,
    decode: Optional[Callable[[Any], T]] = None,
) -> T:
    """
    Return the value cached in `path`, or compute it with `producer` and cache it.

    A missing, unreadable or undecodable file counts as a miss. The cached
    value is returned as-is: freshness is the producer's concern, not ours.
    Failing to write the cache only logs a warning.
    """
    try:
        value = json.loads(Path(path).read_text(encoding="utf-8"))
        value = decode(value) if decode else value
        logger.info("Loaded cached value from %s", path)
        return value
    except (OSError, ValueError, KeyError, TypeError) as exc:
        logger.debug("Cache miss for %s: %s", path, exc)

    result = producer()
    error = _write_json_file(path, result)
    if error is not None:
        logger.warning("unable to write cache file %s: %s", path, error)
    return result


def _write_json_file(path: PathLike, value: Any) -> Optional[Exception]:
    """Serialise `value` to `path`. Returns the failure instead of raising it."""
    try:
        content = json.dumps(value)
        Path(path).write_text(content, encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        return exc
    return None


# ── Interactive authorization ─────────────────────────────────────────────────

def ask_question_through_cli(question: str) -> str:
    """Write `question` to stderr and read one line from stdin (EOFError at end of input)."""
    print(question, end="", file=sys.stderr, flush=True)
    return input()


def acquire_token_using_cli_code(
    identity: ClientIdentity,
    scopes: list[str],
    ask: Optional[Callable[[str], str]] = None,
) -> TokenSet:
    """
    Run the installed-app flow by hand: show the URL, read the code, exchange it.

    The prompt is the only blocking point that waits on a human; Ctrl-C there
    propagates as KeyboardInterrupt, while end of input or a blank answer
    raises AuthExchangeError. Returns the token set in Google's
    authorized-user JSON shape.
    """
    ask = ask or ask_question_through_cli
    flow = Flow.from_client_config(
        identity.to_client_config(), scopes=scopes, redirect_uri=identity.redirect_uri
    )
    # access_type='offline' so Google issues a refresh token
    auth_url, _ = flow.authorization_url(access_type="offline", prompt="consent")
    print(f"Authorize this app by visiting this url: {auth_url}", file=sys.stderr)

    try:
        code = ask(_CODE_QUESTION)
    except EOFError as exc:
        raise AuthExchangeError("no authorization code entered") from exc
    code = (code or "").strip()
    if not code:
        raise AuthExchangeError("no authorization code entered")

    try:
        flow.fetch_token(code=code)
    except OAuth2Error as exc:
        raise AuthExchangeError(f"authorization code exchange failed: {exc}") from exc

    logger.info("OAuth flow completed for %d scope(s)", len(scopes))
    return json.loads(flow.credentials.to_json())


# ── Client builder ────────────────────────────────────────────────────────────

def _require_token(value: Any) -> TokenSet:
    if not isinstance(value, dict) or not value.get("token"):
        raise ValueError("cached token set has no access token")
    _parse_expiry(value.get("expiry"))
    return value


def _parse_expiry(value: Optional[str]) -> Optional[datetime]:
    # google-auth stores expiry as naive UTC ISO 8601 with a trailing Z
    if not value:
        return None
    return datetime.strptime(value.rstrip("Z").split(".")[0], "%Y-%m-%dT%H:%M:%S")


def build_oauth2_client(
    scopes: list[str],
    credentials_file: Optional[PathLike] = None,
    token_cache_path: Optional[PathLike] = None,
    ask: Optional[Callable[[str], str]] = None,
) -> Credentials:
    """
    Return OAuth2 credentials usable with googleapiclient.discovery.build().

    The client identity always comes from the credentials file; the token set
    comes from the cache, or from the interactive flow on a cache miss.
    The cache is not scope-aware: delete it (see group-patcher-reauth) after
    changing the requested scopes.
    """
    credentials_file = credentials_file or config.credentials_file()
    token_cache_path = token_cache_path or config.token_file()

    identity = read_credentials_file(credentials_file)
    token = cache_using_json_file(
        lambda: acquire_token_using_cli_code(identity, scopes, ask=ask),
        token_cache_path,
        decode=_require_token,
    )

    return Credentials(
        token=token["token"],
        refresh_token=token.get("refresh_token"),
        token_uri=identity.token_uri,
        client_id=identity.client_id,
        client_secret=identity.client_secret,
        scopes=token.get("scopes") or scopes,
        expiry=_parse_expiry(token.get("expiry")),
    )
