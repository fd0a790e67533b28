"""Tests for the root bachctl CLI."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from bachctl import __version__
from bachctl.cli import cli
from tests.conftest import write_source


@pytest.fixture(autouse=True)
def _restore_root_handlers():
    root = logging.getLogger()
    handlers = list(root.handlers)
    yield
    root.handlers[:] = handlers
    logging.getLogger("bachctl").setLevel(logging.NOTSET)


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "bachctl" in result.output
    assert "--dormant" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_examples(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--examples"])
    assert result.exit_code == 0
    assert "bachctl tool javac --version" in result.output


# --- Default operation ---


def test_build_empty_project(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-b", str(tmp_path)])
    assert result.exit_code == 0
    assert "BUILD SUCCESS" in result.stderr
    assert tmp_path.name in result.stderr


def test_quiet_omits_status(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-q", "-b", str(tmp_path)])
    assert result.exit_code == 0
    assert "BUILD" not in result.stderr


def test_dormant_skips_compile(cli_runner: CliRunner, tmp_path: Path) -> None:
    write_source(tmp_path / "src" / "main" / "a" / "A.java")
    result = cli_runner.invoke(cli, ["--dormant", "-b", str(tmp_path)])
    assert result.exit_code == 0
    assert "Dormant mode is enabled" in result.stderr


def test_project_name_from_config(cli_runner: CliRunner, tmp_path: Path) -> None:
    (tmp_path / "bach.toml").write_text('[project]\nname = "configured"\n')
    result = cli_runner.invoke(cli, ["-b", str(tmp_path)])
    assert result.exit_code == 0
    assert "BUILD SUCCESS configured" in result.stderr


def test_missing_base_fails(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-b", str(tmp_path / "missing")])
    assert result.exit_code == 1
    assert "bachctl failed with error code: 1" in result.stderr


# --- Operations ---


def test_tool_without_name(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-b", str(tmp_path), "tool"])
    assert result.exit_code == 1
    assert "Missing name of tool to run!" in result.stderr


def test_unsupported_operation(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-b", str(tmp_path), "deploy"])
    assert result.exit_code == 1
    assert "Unsupported operation" in result.stderr


def test_builtin_tool(cli_runner: CliRunner, tmp_path: Path) -> None:
    write_source(tmp_path / "src" / "A.java")
    result = cli_runner.invoke(cli, ["-b", str(tmp_path), "tool", "tree", str(tmp_path / "src")])
    assert result.exit_code == 0
    assert "A.java" in result.stdout


def test_external_tool_output(cli_runner: CliRunner, tmp_path: Path) -> None:
    args = ["-b", str(tmp_path), "tool", sys.executable, "-c", "print('from child')"]
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "from child" in result.stdout


def test_external_tool_exit_code(cli_runner: CliRunner, tmp_path: Path) -> None:
    args = ["-b", str(tmp_path), "tool", sys.executable, "-c", "raise SystemExit(7)"]
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 7
    assert "BUILD FAILED (code 7)" in result.stderr
    assert "bachctl failed with error code: 7" in result.stderr


def test_tool_options_not_parsed_as_cli_options(cli_runner: CliRunner, tmp_path: Path) -> None:
    args = ["-b", str(tmp_path), "tool", sys.executable, "-c", "import sys; print(sys.argv[1:])", "-v"]
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "['-v']" in result.stdout
