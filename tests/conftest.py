import json
import logging

import pytest

_SCRIPT_LOGGERS = ("group_patcher", "listgroups", "patchallgroups", "reauth")


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("GROUP_PATCHER_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("GROUP_PATCHER_CREDENTIALS_FILE", str(tmp_path / "credentials.json"))
    monkeypatch.setenv("GROUP_PATCHER_TOKEN_FILE", str(tmp_path / "token.json"))
    yield
    # BaseScript attaches handlers bound to this test's stderr and tmp dir
    for name in _SCRIPT_LOGGERS:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()


@pytest.fixture
def client_secrets():
    return {
        "installed": {
            "client_id": "1234.apps.googleusercontent.com",
            "client_secret": "s3cret",
            "redirect_uris": ["urn:ietf:wg:oauth:2.0:oob", "http://localhost"],
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    }


@pytest.fixture
def credentials_file(tmp_path, client_secrets):
    path = tmp_path / "credentials.json"
    path.write_text(json.dumps(client_secrets))
    return path


@pytest.fixture
def token_set():
    return {
        "token": "ya29.access",
        "refresh_token": "1//refresh",
        "token_uri": "https://oauth2.googleapis.com/token",
        "client_id": "1234.apps.googleusercontent.com",
        "client_secret": "s3cret",
        "scopes": ["https://www.googleapis.com/auth/admin.directory.group.readonly"],
        "expiry": "2030-01-01T12:00:00.123456Z",
    }
