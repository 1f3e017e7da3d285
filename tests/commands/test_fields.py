"""Tests for the fields CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from fieldwright.cli import cli

STOCK_FIELDS = [
    "phone", "email", "website", "address", "city", "state", "zip", "hours", "price_range",
]  # fmt: skip


def _write_config(root: Path, text: str) -> None:
    (root / "fieldwright.toml").write_text(text, encoding="utf-8")


@pytest.mark.usefixtures("_isolated_cli")
class TestFieldsCommand:
    def test_stock_fields_in_priority_order(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "fields"])
        assert result.exit_code == 0
        assert result.output.split() == STOCK_FIELDS

    def test_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["fields"])
        assert result.exit_code == 0
        assert "Business Hours" in result.output
        assert "9 fields" in result.output

    def test_verbose_shows_meta_key(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "fields"])
        assert result.exit_code == 0
        assert "_fw_price_range" in result.output

    def test_filter_by_type_and_order(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "fields", "--type", "text", "--orderby", "name", "--desc"]
        )
        assert result.exit_code == 0
        names = [item["name"] for item in json.loads(result.output)["data"]["items"]]
        assert names == ["zip", "state", "city", "address"]

    def test_searchable_filter(self, cli_runner: CliRunner, _isolated_cli: Path) -> None:
        _write_config(
            _isolated_cli,
            "[fields.cuisine]\n"
            'type = "select"\n'
            "searchable = true\n"
            "priority = 5\n",
        )
        result = cli_runner.invoke(cli, ["-q", "fields", "--searchable"])
        assert result.exit_code == 0
        assert result.output.split() == ["cuisine"]

    def test_configured_fields_only(self, cli_runner: CliRunner, _isolated_cli: Path) -> None:
        _write_config(
            _isolated_cli,
            "[registry]\n"
            "default_fields = false\n"
            "[fields.cuisine]\n"
            'type = "select"\n'
            "required = true\n"
            'options = ["thai", "pizza"]\n',
        )
        result = cli_runner.invoke(cli, ["--json", "fields"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["items"] == [
            {
                "name": "cuisine",
                "type": "select",
                "label": "Cuisine",
                "required": True,
                "priority": 10,
                "admin_only": False,
                "meta_key": "_fw_cuisine",
            }
        ]

    def test_invalid_configured_field(self, cli_runner: CliRunner, _isolated_cli: Path) -> None:
        _write_config(_isolated_cli, '[fields.bad]\nname = "Bad Name!"\n')
        result = cli_runner.invoke(cli, ["fields"])
        assert result.exit_code == 1
        assert "Invalid field definition" in result.output


class TestPluginFields:
    def test_local_plugin_contributes_type_and_field(
        self, cli_runner: CliRunner, _isolated_cli: Path
    ) -> None:
        plugins = _isolated_cli / "plugins"
        plugins.mkdir()
        (plugins / "rating.py").write_text(
            "from fieldwright.fields.base import AbstractFieldType\n"
            "from fieldwright.plugins import hookimpl\n"
            "\n"
            "\n"
            "class RatingField(AbstractFieldType):\n"
            "    @property\n"
            "    def type(self):\n"
            '        return "rating"\n'
            "\n"
            "\n"
            "class RatingPlugin:\n"
            "    @hookimpl\n"
            "    def register_field_types(self, context):\n"
            "        return [RatingField(context)]\n"
            "\n"
            "    @hookimpl\n"
            "    def register_fields(self):\n"
            '        return [{"name": "stars", "type": "rating", "priority": 1}]\n',
            encoding="utf-8",
        )
        _write_config(_isolated_cli, '[plugins]\nlocal_dir = "plugins"\n')

        result = cli_runner.invoke(cli, ["--json", "fields"])
        assert result.exit_code == 0
        first = json.loads(result.output)["data"]["items"][0]
        assert first["name"] == "stars"
        assert first["type"] == "rating"

        result = cli_runner.invoke(cli, ["-q", "types"])
        assert result.output.split()[-1] == "rating"

    def test_plugins_disabled(self, cli_runner: CliRunner, _isolated_cli: Path) -> None:
        plugins = _isolated_cli / "plugins"
        plugins.mkdir()
        (plugins / "extra.py").write_text(
            "from fieldwright.plugins import hookimpl\n"
            "\n"
            "\n"
            "class ExtraPlugin:\n"
            "    @hookimpl\n"
            "    def register_fields(self):\n"
            '        return [{"name": "extra"}]\n',
            encoding="utf-8",
        )
        _write_config(_isolated_cli, '[plugins]\nenabled = false\nlocal_dir = "plugins"\n')
        result = cli_runner.invoke(cli, ["-q", "fields"])
        assert result.exit_code == 0
        assert "extra" not in result.output.split()
