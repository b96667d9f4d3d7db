import os

import pytest
from typer.testing import CliRunner

from gatsby_cli.cli import create_cli
from gatsby_cli.surfaces.cli.cli import NO_COMMAND_MESSAGE

runner = CliRunner()


def test_no_command_shows_help_and_fails(site):
    result = runner.invoke(create_cli(directory=site.root), [])

    assert result.exit_code == 1
    assert "Pass --help to see all available commands and options." in result.output
    assert "Usage" in result.output
    assert NO_COMMAND_MESSAGE == "Pass --help to see all available commands and options."


def test_help_lists_all_commands(site):
    result = runner.invoke(create_cli(directory=site.root), ["--help"])

    assert result.exit_code == 0
    for command in ("develop", "build", "serve", "new"):
        assert command in result.output


def test_short_help_alias(site):
    result = runner.invoke(create_cli(directory=site.root), ["-h"])

    assert result.exit_code == 0
    assert "develop" in result.output


def test_command_help_shows_flags(site):
    result = runner.invoke(create_cli(directory=site.root), ["develop", "--help"])

    assert result.exit_code == 0
    for flag in ("--host", "-H", "--port", "-p", "--open", "-o"):
        assert flag in result.output


def test_build_help_shows_prefix_paths(site):
    result = runner.invoke(create_cli(directory=site.root), ["build", "--help"])

    assert result.exit_code == 0
    assert "--prefix-paths" in result.output


def test_version_flags(site, monkeypatch):
    monkeypatch.setattr("gatsby_cli.surfaces.cli.cli.get_cli_version", lambda: "9.9.9")

    for flag in ("--version", "-v"):
        result = runner.invoke(create_cli(directory=site.root), [flag])
        assert result.exit_code == 0
        assert result.output.strip() == "9.9.9"


def test_unknown_command_shows_help_and_guidance(site):
    result = runner.invoke(create_cli(directory=site.root), ["deploy"])

    assert result.exit_code == 1
    assert NO_COMMAND_MESSAGE in result.output
    assert "Usage" in result.output
    assert "No such command" not in result.output


def test_unknown_command_after_root_flag_shows_guidance(site):
    result = runner.invoke(create_cli(directory=site.root), ["--verbose", "deploy"])

    assert result.exit_code == 1
    assert NO_COMMAND_MESSAGE in result.output


def test_unknown_flag_is_a_usage_error(site):
    result = runner.invoke(create_cli(directory=site.root), ["develop", "--bogus"])

    assert result.exit_code == 2
    assert NO_COMMAND_MESSAGE not in result.output


@pytest.mark.parametrize("args", [["--help"], ["develop", "--help"]])
def test_help_wraps_to_detected_terminal_width(site, monkeypatch, args):
    monkeypatch.setattr(
        "gatsby_cli.surfaces.cli.cli.shutil.get_terminal_size",
        lambda *a, **kw: os.terminal_size((50, 24)),
    )

    result = runner.invoke(create_cli(directory=site.root), args)

    assert result.exit_code == 0, result.output
    widths = [len(line) for line in result.output.splitlines()]
    assert max(widths) <= 50


def test_verbose_from_environment(local_site, monkeypatch):
    path = local_site.install_command("serve")
    monkeypatch.setenv("GATSBY_CLI_VERBOSE", "1")

    result = runner.invoke(create_cli(directory=local_site.root), ["serve"])

    assert result.exit_code == 0, result.output
    assert f"loading local command from: {path}" in result.output


def test_invalid_config_file_panics(local_site, tmp_path, monkeypatch):
    config = tmp_path / "cli.yml"
    config.write_text("verbose: [unclosed\n")
    monkeypatch.setenv("GATSBY_CLI_CONFIG", str(config))

    result = runner.invoke(create_cli(directory=local_site.root), ["serve"])

    assert result.exit_code == 1
    assert "Invalid YAML" in result.output
