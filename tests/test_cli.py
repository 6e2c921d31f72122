# tests/test_cli.py
"""End-to-end tests of the command line interface."""

import pytest
from pathlib import Path
from unittest.mock import patch
from click.testing import CliRunner

from codebase_to_prompt import __version__
from codebase_to_prompt.cli.interface import main_cli
from codebase_to_prompt.core.rendering import BINARY_PLACEHOLDER


@pytest.fixture(autouse=True)
def no_user_config(tmp_path: Path):
    with patch("codebase_to_prompt.config.loader.USER_CONFIG_FILE", tmp_path / "absent-user-config.toml"):
        yield


@pytest.fixture
def cli_project(make_tree):
    return make_tree({
        "a.rs": "fn main() {}\n",
        "a.go": "package main\n",
        "b.log": "noise\n",
        ".hidden.rs": "fn hidden() {}\n",
        ".gitignore": "*.log\n",
        "assets/logo.png": b"\x89PNG\r\n\x1a\n\xff\x00",
    }, name="cli_proj")


def test_markdown_with_include(cli_project: Path):
    runner = CliRunner()
    result = runner.invoke(
        main_cli,
        [str(cli_project), "--format", "markdown", "--include", "rs", "--ignore-hidden"],
        catch_exceptions=False,
    )
    assert result.exit_code == 0
    assert "### `a.rs`" in result.output
    assert "```rust\nfn main() {}\n```" in result.output
    assert "a.go" not in result.output
    assert "hidden" not in result.output


def test_default_console_format_respects_gitignore(cli_project: Path):
    runner = CliRunner()
    result = runner.invoke(main_cli, [str(cli_project)], catch_exceptions=False)
    assert result.exit_code == 0
    assert "━━━ a.rs " in result.output
    assert "━━━ .hidden.rs " in result.output
    assert "b.log" not in result.output
    assert "━━━ assets/logo.png " in result.output
    assert BINARY_PLACEHOLDER in result.output


def test_no_respect_gitignore_and_exclude(cli_project: Path):
    runner = CliRunner()
    result = runner.invoke(
        main_cli,
        [str(cli_project), "-f", "text", "--no-respect-gitignore", "--ignore-hidden", "-e", "png,go"],
        catch_exceptions=False,
    )
    assert result.exit_code == 0
    assert "./b.log\n---\nnoise\n---\n" in result.output
    assert "./a.rs" in result.output
    assert "logo.png" not in result.output
    assert "a.go" not in result.output


def test_line_numbers_flag(cli_project: Path):
    runner = CliRunner()
    result = runner.invoke(main_cli, [str(cli_project), "-f", "text", "-n", "-i", "go"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "./a.go\n---\n   1 | package main\n---\n" in result.output


def test_output_file(cli_project: Path, tmp_path: Path):
    out_file = tmp_path / "bundle.md"
    runner = CliRunner()
    result = runner.invoke(
        main_cli,
        [str(cli_project), "-f", "markdown", "-i", "rs", "-o", str(out_file)],
        catch_exceptions=False,
    )
    assert result.exit_code == 0
    content = out_file.read_text(encoding="utf-8")
    assert content.startswith("### `.hidden.rs`")
    assert "### `a.rs`" in content
    assert "### `a.rs`" not in result.stdout


def test_missing_directory_is_an_error(tmp_path: Path):
    runner = CliRunner()
    result = runner.invoke(main_cli, [str(tmp_path / "nowhere")])
    assert result.exit_code == 1
    assert "Error: directory not found" in result.output


def test_append_date_without_output_is_an_error(cli_project: Path):
    runner = CliRunner()
    result = runner.invoke(main_cli, [str(cli_project), "--append-date"])
    assert result.exit_code == 1
    assert "require an output file" in result.output
    assert "a.rs" not in result.output


def test_profile_from_project_config(cli_project: Path):
    (cli_project / ".codebase-to-prompt.toml").write_text(
        'format = "text"\n[profiles.go]\ninclude = ["go"]\nline_numbers = true\n'
    )
    runner = CliRunner()
    result = runner.invoke(main_cli, [str(cli_project), "--config-profile", "go"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "./a.go\n---\n   1 | package main\n---\n" in result.output
    assert "a.rs" not in result.output


def test_command_line_overrides_config_file(cli_project: Path):
    (cli_project / ".codebase-to-prompt.toml").write_text('format = "text"\ninclude = ["go"]\n')
    runner = CliRunner()
    result = runner.invoke(main_cli, [str(cli_project), "-f", "markdown"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "### `a.go`" in result.output


def test_unknown_profile_is_an_error(cli_project: Path):
    runner = CliRunner()
    result = runner.invoke(main_cli, [str(cli_project), "--config-profile", "nope"])
    assert result.exit_code == 1
    assert "profile 'nope' not found" in result.output


def test_version():
    runner = CliRunner()
    result = runner.invoke(main_cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_verbose_prints_summary(cli_project: Path):
    runner = CliRunner()
    result = runner.invoke(main_cli, [str(cli_project), "-v", "-i", "rs"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "Files bundled: 2 (0 as placeholders)" in result.output
