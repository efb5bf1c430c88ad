"""Tests for the docgraph CLI."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from docgraph import __version__
from docgraph.cli.main import cli

runner = CliRunner()


@pytest.fixture
def program_file(tmp_path: Path, shapes_program: dict[str, Any]) -> Path:
    """The shapes program written as a JSON description."""
    path = tmp_path / "program.json"
    path.write_text(json.dumps(shapes_program))
    return path


class TestConvertCommand:
    """docgraph convert command tests."""

    def test_given_program_when_converted_then_json_on_stdout(self, program_file: Path) -> None:
        # When
        result = runner.invoke(cli, ["convert", str(program_file)])

        # Then
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["name"] == "shapes"
        assert [m["name"] for m in data["children"]] == ["shapes", "src"]

    def test_given_name_option_when_converted_then_project_renamed(self, program_file: Path) -> None:
        # When
        result = runner.invoke(cli, ["convert", str(program_file), "--name", "demo"])

        # Then
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["name"] == "demo"

    def test_given_out_option_when_converted_then_file_written(self, program_file: Path, tmp_path: Path) -> None:
        # Given
        out = tmp_path / "docs" / "api.json"

        # When
        result = runner.invoke(cli, ["convert", str(program_file), "--out", str(out)])

        # Then
        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text())["kindString"] == "project"
        assert re.search(r"Wrote \d+ reflections", result.stderr)
        assert result.stdout == ""

    def test_given_malformed_program_when_converted_then_error_exit(self, tmp_path: Path) -> None:
        # Given
        program = tmp_path / "broken.yaml"
        program.write_text("files: [unclosed\n")

        # When
        result = runner.invoke(cli, ["convert", str(program)])

        # Then
        assert result.exit_code == 1
        assert "SEMANTIC_PARSE_ERROR" in result.stderr

    def test_given_log_file_configured_when_conversion_fails_then_error_points_at_log(
        self, tmp_path: Path
    ) -> None:
        # Given
        program = tmp_path / "broken.yaml"
        program.write_text("files: [unclosed\n")
        log_file = tmp_path / "logs" / "docgraph.log"
        config = tmp_path / "logging.yaml"
        config.write_text(
            "logging:\n"
            "  level: INFO\n"
            "  outputs:\n"
            "    - destination: stderr\n"
            f"    - destination: {log_file}\n"
            "      format: json\n"
        )

        # When
        result = runner.invoke(cli, ["convert", str(program), "--config", str(config)])

        # Then
        assert result.exit_code == 1
        assert f"See {log_file} for details." in result.stderr
        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "cli.convert_failed"
        assert record["error"] == "SEMANTIC_PARSE_ERROR"

    def test_given_stdout_log_output_when_converted_then_stdout_stays_json(
        self, program_file: Path, tmp_path: Path
    ) -> None:
        # Given
        config = tmp_path / "logging.yaml"
        config.write_text("logging:\n  outputs:\n    - destination: stdout\n")

        # When
        result = runner.invoke(cli, ["-v", "convert", str(program_file), "--config", str(config)])

        # Then
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["name"] == "shapes"
        assert "converter.begin" in result.stderr

    def test_given_missing_program_when_converted_then_usage_error(self, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["convert", str(tmp_path / "nope.json")])
        assert result.exit_code == 2

    def test_given_config_file_when_converted_then_settings_applied(
        self, program_file: Path, tmp_path: Path
    ) -> None:
        # Given
        config = tmp_path / "custom.yaml"
        config.write_text("converter:\n  sort: none\n  disable_plugins: [module_names]\n")

        # When
        result = runner.invoke(cli, ["convert", str(program_file), "--config", str(config)])

        # Then
        assert result.exit_code == 0, result.output
        shapes = json.loads(result.stdout)["children"][0]
        assert shapes["name"] == "src/shapes"
        assert [c["name"] for c in shapes["children"]] == ["Shape", "Color", "area", "Point", "Id"]


class TestKindsCommand:
    """docgraph kinds command tests."""

    def test_when_listed_then_one_line_per_kind(self) -> None:
        # When
        result = runner.invoke(cli, ["kinds"])

        # Then
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == "0x00001  project"
        assert lines[-1] == "0x10000  reference"


class TestVersion:
    def test_when_version_requested_then_printed(self) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout
