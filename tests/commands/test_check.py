"""Tests for the check CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from fieldwright.cli import cli


@pytest.mark.usefixtures("_isolated_cli")
class TestCheckCommand:
    def test_valid_file(self, cli_runner: CliRunner, _isolated_cli: Path) -> None:
        listing = _isolated_cli / "listing.json"
        listing.write_text(
            json.dumps({"phone": "555-1234", "website": "example.org", "price_range": "$$"}),
            encoding="utf-8",
        )
        result = cli_runner.invoke(cli, ["check", str(listing)])
        assert result.exit_code == 0
        assert "OK  process_fields" in result.output
        assert "website: http://example.org" in result.output

    def test_json_storage(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            ["--json", "check", "-"],
            input='{"phone": "<b>555-1234</b>", "bogus": "dropped"}',
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["data"]["values"] == {"phone": "555-1234"}
        assert data["data"]["storage"] == {"_fw_phone": "555-1234"}
        assert data["meta"] == {"checked": 1, "failed": 0}

    def test_invalid_stdin_exits_1(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["check", "-"], input='{"email": "owner-at-listings"}')
        assert result.exit_code == 1
        assert "email [invalid_email] Email must be a valid email address." in result.output

    def test_json_failure(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "check", "-"], input='{"price_range": "$$$$$"}')
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["ok"] is False
        assert data["error"]["code"] == "validation_failed"
        assert data["error"]["detail"]["errors"]["price_range"]["code"] == "invalid_option"

    def test_field_selection(self, cli_runner: CliRunner) -> None:
        payload = '{"email": "owner-at-listings", "phone": "555-1234"}'
        result = cli_runner.invoke(cli, ["check", "-", "--field", "phone"], input=payload)
        assert result.exit_code == 0
        result = cli_runner.invoke(cli, ["check", "-", "--exclude", "email"], input=payload)
        assert result.exit_code == 0

    def test_required_from_config(self, cli_runner: CliRunner, _isolated_cli: Path) -> None:
        (_isolated_cli / "fieldwright.toml").write_text(
            "[fields.name]\nrequired = true\n", encoding="utf-8"
        )
        result = cli_runner.invoke(cli, ["check", "-"], input="{}")
        assert result.exit_code == 1
        assert "name [required] Name is required." in result.output

    def test_not_an_object(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["check", "-"], input="[1, 2]")
        assert result.exit_code == 1
        assert "Expected a JSON object" in result.output

    def test_invalid_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["check", "-"], input="{phone")
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_missing_file(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["check", "nowhere.json"])
        assert result.exit_code == 2
