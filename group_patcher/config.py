"""
Runtime configuration.

A .env file in (or above) the working directory is loaded on import; every
value is then read from the environment at call time so tests and CLI flags
can override it.

    GROUP_PATCHER_CREDENTIALS_FILE   OAuth client secrets JSON   (credentials.json)
    GROUP_PATCHER_TOKEN_FILE         cached token set            (token.json)
    GROUP_PATCHER_LOG_DIR            rotating script logs        (~/.group_patcher/logs)
"""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True))

DEFAULT_CREDENTIALS_FILE = "credentials.json"
DEFAULT_TOKEN_FILE = "token.json"
DEFAULT_LOGS_DIR = "~/.group_patcher/logs"


def _path_from_env(name: str, default: str) -> Path:
    return Path(os.environ.get(name) or default).expanduser()


def credentials_file() -> Path:
    """Path of the OAuth client secrets file downloaded from Cloud Console."""
    return _path_from_env("GROUP_PATCHER_CREDENTIALS_FILE", DEFAULT_CREDENTIALS_FILE)


def token_file() -> Path:
    """Path where the authorized token set is cached."""
    return _path_from_env("GROUP_PATCHER_TOKEN_FILE", DEFAULT_TOKEN_FILE)


def logs_dir() -> Path:
    return _path_from_env("GROUP_PATCHER_LOG_DIR", DEFAULT_LOGS_DIR)
