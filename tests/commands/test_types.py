"""Tests for the types CLI command."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from fieldwright.cli import cli


@pytest.mark.usefixtures("_isolated_cli")
class TestTypesCommand:
    def test_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["types"])
        assert result.exit_code == 0
        assert "daterange" in result.output
        assert "24 field types" in result.output

    def test_verbose_shows_class(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "types"])
        assert result.exit_code == 0
        assert "CurrencyField" in result.output

    def test_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "types"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["op"] == "list_types"
        assert data["data"]["count"] == 24
        by_type = {item["type"]: item for item in data["data"]["items"]}
        assert by_type["gallery"]["class"] == "GalleryField"
        assert by_type["gallery"]["features"] == ["repeater"]
        assert by_type["number"]["features"] == ["filterable", "sortable"]
        assert by_type["hidden"]["features"] == []

    def test_quiet_lists_tags(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "types"])
        assert result.exit_code == 0
        tags = result.output.split()
        assert tags[:3] == ["text", "textarea", "richtext"]
        assert len(tags) == 24
