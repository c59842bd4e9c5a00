import argparse
import json

import pytest

from group_patcher import google_auth, google_factory
from group_patcher.exceptions import ConfigError
from group_patcher.group_settings_client import GROUPS_SETTINGS_SCOPE, PATCH_ALL_GROUPS_SCOPES
from group_patcher.scripts import list_groups, patch_all_groups, reauth
from group_patcher.scripts.patch_all_groups import load_patch_body
from tests.fakes import FakeDirectory, FakeFactory, FakeGroupsSettings, group, http_error


@pytest.fixture
def factories(monkeypatch):
    """Replace GoogleServiceFactory in every script module; records created factories."""
    created = []
    state = {"directory_pages": [{"groups": [group("a@x.org"), group("b@x.org")]}], "failures": {}}

    def make(scopes, credentials_file=None, token_cache_path=None, ask=None):
        factory = FakeFactory(
            directory=FakeDirectory(state["directory_pages"]),
            groups_settings=FakeGroupsSettings(state["failures"]),
            scopes=scopes,
        )
        factory.paths = (credentials_file, token_cache_path)
        created.append(factory)
        return factory

    for module in (list_groups, patch_all_groups, reauth):
        monkeypatch.setattr(module, "GoogleServiceFactory", make)
    return created, state


def _stdout_json(capsys):
    return json.loads(capsys.readouterr().out)


def test_list_groups_prints_json(factories, capsys):
    created, _ = factories
    list_groups.ListGroups.main(["--domain", "x.org", "--max-results", "50"])

    output = _stdout_json(capsys)
    assert output["group_count"] == 2
    assert [g["email"] for g in output["groups"]] == ["a@x.org", "b@x.org"]
    assert created[0].scopes == PATCH_ALL_GROUPS_SCOPES
    assert created[0].directory.groups_resource.list_calls == [{"domain": "x.org", "maxResults": 50}]


def test_list_groups_writes_a_log_file(factories, capsys, tmp_path):
    list_groups.ListGroups.main(["--debug"])
    capsys.readouterr()
    assert (tmp_path / "logs" / "listgroups.log").exists()


def test_patch_all_groups_cli(factories, capsys, tmp_path):
    created, _ = factories
    patch_all_groups.PatchAllGroups.main([
        "--body", '{"whoCanJoin": "INVITED_CAN_JOIN"}',
        "--token-file", str(tmp_path / "t.json"),
    ])

    output = _stdout_json(capsys)
    assert output == {"dry_run": False, "patched_count": 2, "groups": ["a@x.org", "b@x.org"]}
    factory = created[0]
    assert factory.scopes == PATCH_ALL_GROUPS_SCOPES
    assert factory.paths == (None, str(tmp_path / "t.json"))
    assert factory.groups_settings.groups_resource.patch_calls == [
        ("a@x.org", {"whoCanJoin": "INVITED_CAN_JOIN"}),
        ("b@x.org", {"whoCanJoin": "INVITED_CAN_JOIN"}),
    ]


def test_patch_all_groups_body_file(factories, capsys, tmp_path):
    body_file = tmp_path / "settings.json"
    body_file.write_text('{"allowWebPosting": "false"}')
    patch_all_groups.PatchAllGroups.main(["--body-file", str(body_file)])
    assert _stdout_json(capsys)["patched_count"] == 2


def test_patch_all_groups_dry_run_does_not_patch(factories, capsys):
    created, _ = factories
    patch_all_groups.PatchAllGroups.main(["--body", '{"a": "b"}', "--dry-run"])

    output = _stdout_json(capsys)
    assert output == {"dry_run": True, "patched_count": 0, "groups": ["a@x.org", "b@x.org"]}
    assert created[0].scopes == PATCH_ALL_GROUPS_SCOPES
    assert created[0].groups_settings.groups_resource.patch_calls == []


def test_patch_all_groups_failure_exits_non_zero(factories, capsys):
    created, state = factories
    state["failures"] = {"b@x.org": http_error(500)}

    with pytest.raises(SystemExit) as exc_info:
        patch_all_groups.PatchAllGroups.main(["--body", '{"a": "b"}'])

    assert exc_info.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Stopped after patching 1 group(s)" in captured.err


def test_patch_all_groups_requires_a_body(factories):
    with pytest.raises(SystemExit) as exc_info:
        patch_all_groups.PatchAllGroups.main([])
    assert exc_info.value.code == 2


@pytest.mark.parametrize("body", ["[1, 2]", "{}", "not json", '"text"'])
def test_load_patch_body_rejects_non_objects(body):
    with pytest.raises(ConfigError):
        load_patch_body(argparse.Namespace(body=body, body_file=None))


def test_load_patch_body_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_patch_body(argparse.Namespace(body=None, body_file=str(tmp_path / "nope.json")))


def test_reauth_deletes_the_cached_token(factories, capsys, tmp_path, credentials_file):
    created, _ = factories
    token_file = tmp_path / "token.json"
    token_file.write_text('{"token": "old"}')

    reauth.Reauth.main([])

    output = _stdout_json(capsys)
    assert not token_file.exists()
    assert output == {
        "token_file": str(token_file),
        "removed_old_token": True,
        "scopes": PATCH_ALL_GROUPS_SCOPES,
    }
    assert created[0].scopes == PATCH_ALL_GROUPS_SCOPES
    assert created[0].paths[1] == token_file


def test_reauth_keeps_the_token_when_credentials_are_missing(factories, capsys, tmp_path):
    created, _ = factories
    token_file = tmp_path / "token.json"
    token_file.write_text('{"token": "old"}')

    with pytest.raises(SystemExit) as exc_info:
        reauth.Reauth.main([])

    assert exc_info.value.code == 1
    assert token_file.read_text() == '{"token": "old"}'
    assert created == []
    assert "ConfigError" in capsys.readouterr().err


def test_dry_run_token_is_reused_by_the_real_run(monkeypatch, capsys, credentials_file, token_set):
    """Both runs share token.json, so the token from the dry run must carry the write scope."""
    acquired = []
    granted = []

    def fake_acquire(identity, scopes, ask=None):
        acquired.append(list(scopes))
        return {**token_set, "scopes": list(scopes)}

    def fake_build(name, version, credentials=None, cache_discovery=True):
        granted.append(list(credentials.scopes))
        if name == "admin":
            return FakeDirectory([{"groups": [group("a@x.org"), group("b@x.org")]}])
        return FakeGroupsSettings()

    monkeypatch.setattr(google_auth, "acquire_token_using_cli_code", fake_acquire)
    monkeypatch.setattr(google_factory, "build", fake_build)

    patch_all_groups.PatchAllGroups.main(["--body", '{"a": "b"}', "--dry-run"])
    assert _stdout_json(capsys)["dry_run"] is True

    patch_all_groups.PatchAllGroups.main(["--body", '{"a": "b"}'])
    assert _stdout_json(capsys)["patched_count"] == 2

    # One interactive flow only: the real run is served from the cache
    assert acquired == [PATCH_ALL_GROUPS_SCOPES]
    assert all(GROUPS_SETTINGS_SCOPE in scopes for scopes in granted)
