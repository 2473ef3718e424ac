"""Tests for the tools command."""

from __future__ import annotations

import json

from click.testing import CliRunner

from sketchctx.cli import cli


class TestToolsCommand:
    def test_lists_all(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tools"])
        assert result.exit_code == 0, result.output
        for name in ("get_file", "list_components", "get_selection", "create_rectangle", "create_text"):
            assert name in result.stdout

    def test_json_category_filter(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "tools", "--category", "relay"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data["count"] == 2
        assert {tool["name"] for tool in data["tools"]} == {"create_rectangle", "create_text"}
        assert all(tool["category"] == "relay" for tool in data["tools"])

    def test_schema_shape(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "tools", "--category", "query"])
        get_file = json.loads(result.stdout)["data"]["tools"][0]
        assert get_file["name"] == "get_file"
        assert get_file["parameters"]["type"] == "object"
        assert get_file["parameters"]["required"] == ["url"]

    def test_bad_category(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["tools", "--category", "paint"])
        assert result.exit_code == 2
