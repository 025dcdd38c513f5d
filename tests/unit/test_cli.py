from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from airtable_export import main
from airtable_export.domain.models import Record
from airtable_export.errors import ConfigError

runner = CliRunner()


class _ContextStore:
    """Wraps a fake store so it can be used as `with _build_client(...) as client`."""

    def __init__(self, store) -> None:
        self.store = store

    def __enter__(self):
        return self.store

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb


@pytest.fixture
def cli_env(monkeypatch: pytest.MonkeyPatch, settings, fake_store):
    monkeypatch.setattr(main, "load_settings", lambda: settings)
    monkeypatch.setattr(main, "configure_logging", lambda **_: None)
    monkeypatch.setattr(main, "_build_client", lambda _settings: _ContextStore(fake_store))
    return fake_store


def test_export_writes_csv_under_project_root(cli_env, project_root: Path) -> None:
    result = runner.invoke(main.app, ["export", "Contacts"])

    assert result.exit_code == 0, result.output
    written = project_root / "data" / "contacts.csv"
    assert written.read_text(encoding="utf-8").splitlines()[0] == "id,createdTime,Name,Tags"
    assert "Contacts" in result.output


def test_export_with_explicit_output(cli_env, project_root: Path) -> None:
    result = runner.invoke(main.app, ["export", "Contacts", "--output", "out/c.csv"])

    assert result.exit_code == 0, result.output
    assert (project_root / "out" / "c.csv").exists()


def test_export_output_requires_single_table(cli_env) -> None:
    result = runner.invoke(main.app, ["export", "A", "B", "--output", "x.csv"])

    assert result.exit_code == 2


def test_export_rejects_traversal(cli_env, project_root: Path) -> None:
    result = runner.invoke(main.app, ["export", "Contacts", "--output", "../../etc/output.csv"])

    assert result.exit_code == 1
    assert "Path traversal detected" in result.output


def test_export_remote_error_exits_nonzero(cli_env) -> None:
    result = runner.invoke(main.app, ["export", "Missing"])

    assert result.exit_code == 1
    assert "Missing" in result.output


def test_missing_configuration_exits_before_any_call(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing():
        raise ConfigError(["AIRTABLE_API_KEY"])

    def no_client(_settings):
        raise AssertionError("client must not be built")

    monkeypatch.setattr(main, "load_settings", missing)
    monkeypatch.setattr(main, "_build_client", no_client)

    result = runner.invoke(main.app, ["export", "Contacts"])

    assert result.exit_code == 1
    assert "AIRTABLE_API_KEY" in result.output


def test_create_parses_json_field_values(cli_env) -> None:
    result = runner.invoke(
        main.app,
        ["create", "Contacts", "--field", "Name=Carol", "--field", 'Tags=["x"]', "--field", "Age=41"],
    )

    assert result.exit_code == 0, result.output
    created = json.loads(result.output)
    assert created["fields"] == {"Name": "Carol", "Tags": ["x"], "Age": 41}
    assert created["createdTime"]


def test_create_rejects_malformed_field(cli_env) -> None:
    result = runner.invoke(main.app, ["create", "Contacts", "--field", "no-equals-sign"])

    assert result.exit_code == 2


def test_update_and_delete(cli_env) -> None:
    updated = runner.invoke(main.app, ["update", "Contacts", "r2", "--field", "Name=Robert"])
    deleted = runner.invoke(main.app, ["delete", "Contacts", "r1"])

    assert updated.exit_code == 0, updated.output
    assert json.loads(updated.output)["fields"]["Name"] == "Robert"
    assert deleted.exit_code == 0, deleted.output
    assert [record.id for record in cli_env.tables["Contacts"]] == ["r2"]


def test_list_prints_records(cli_env) -> None:
    result = runner.invoke(main.app, ["list", "Contacts", "--limit", "1"])

    assert result.exit_code == 0, result.output
    assert "r1" in result.output
    assert "Showing 1 of 2 records" in result.output


def test_info_masks_api_key(cli_env) -> None:
    result = runner.invoke(main.app, ["info"])

    assert result.exit_code == 0, result.output
    assert "keyTEST1234" not in result.output
    assert "1234" in result.output
    assert "appTESTBASE" in result.output


def test_list_shows_field_named_like_fixed_column(monkeypatch: pytest.MonkeyPatch, settings, make_store) -> None:
    store = make_store({"T": [Record(id="r1", fields={"id": 7, "Note": "see [/b] here"}, createdTime="t1")]})
    monkeypatch.setattr(main, "load_settings", lambda: settings)
    monkeypatch.setattr(main, "configure_logging", lambda **_: None)
    monkeypatch.setattr(main, "_build_client", lambda _settings: _ContextStore(store))

    result = runner.invoke(main.app, ["list", "T"])

    assert result.exit_code == 0, result.output
    assert result.exception is None
    assert "r1" in result.output
