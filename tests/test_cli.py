"""Tests for the staticmark command line interface."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner
from staticmark import cli
from staticmark.config import load_config

from .conftest import DEFAULT_CONFIG, write_config, write_file


def _invoke(config_path: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(cli.cli, ["-c", str(config_path), *args])


def test_build_reports_pages_and_warnings(site_dir: Path) -> None:
    result = _invoke(site_dir / "staticmark.toml", "build", "--production")

    assert result.exit_code == 0, result.output
    build_dir = (site_dir / "build").resolve()
    assert f"Built 3 pages to {build_dir} (base: /blog)" in result.output
    assert 'warning: No element with id "nowhere"' in result.output
    assert (build_dir / "posts" / "hello" / "index.html").exists()


def test_build_development_mode_and_destination(site_dir: Path, tmp_path: Path) -> None:
    destination = tmp_path / "out"

    result = _invoke(
        site_dir / "staticmark.toml",
        "build",
        "--development",
        "--dest",
        str(destination),
    )

    assert result.exit_code == 0, result.output
    assert "(base: /)" in result.output
    assert (destination / "index.html").exists()


def test_build_failure_is_reported(site_dir: Path) -> None:
    write_config(
        site_dir, DEFAULT_CONFIG + '\n[kit.prerender]\nhandle_missing_id = "fail"\n'
    )

    result = _invoke(site_dir / "staticmark.toml", "build")

    assert result.exit_code == 1
    assert "Prerendering failed" in result.output


def test_missing_config_suggests_config_command(tmp_path: Path) -> None:
    result = _invoke(tmp_path / "missing.toml", "build")

    assert result.exit_code == 1
    assert "staticmark config" in result.output


def test_check_passes_for_configured_languages(site_dir: Path) -> None:
    result = _invoke(site_dir / "staticmark.toml", "check")

    assert result.exit_code == 0, result.output
    assert "All code blocks use configured languages (python, javascript)." in (
        result.output
    )


def test_check_lists_unconfigured_languages(site_dir: Path) -> None:
    write_file(
        site_dir / "src" / "routes" / "posts" / "systems.md",
        "```rust\nfn main() {}\n```\n\n```c\nint x;\n```\n",
    )

    result = _invoke(site_dir / "staticmark.toml", "check")

    assert result.exit_code == 1
    assert "posts/systems.md: rust" in result.output
    assert "posts/systems.md: c" in result.output


def test_info_shows_resolved_settings(site_dir: Path) -> None:
    result = _invoke(site_dir / "staticmark.toml", "info")

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert any(
        line.strip().startswith("Title") and line.endswith("Test Blog")
        for line in lines
    )
    assert any(
        line.strip().startswith("Base (production)") and line.endswith("/blog")
        for line in lines
    )
    assert any(
        line.strip().startswith("Base (development)") and line.endswith("(root)")
        for line in lines
    )


def test_plugins_lists_builtins(site_dir: Path) -> None:
    result = _invoke(site_dir / "staticmark.toml", "plugins")

    assert result.exit_code == 0, result.output
    assert "Preprocessors:" in result.output
    assert "- frontmatter:" in result.output
    assert "- markdown:" in result.output
    assert "- static: Static files for any static host" in result.output


def test_config_creates_default_file(tmp_path: Path) -> None:
    config_path = tmp_path / "site" / "staticmark.toml"

    result = _invoke(config_path, "config", "--no-edit")

    assert result.exit_code == 0, result.output
    assert f"Created configuration at {config_path}" in result.output
    config = load_config(config_path, production=False)
    assert config.markdown.math is True
    assert config.kit.prerender.handle_missing_id == "warn"

    again = _invoke(config_path, "config", "--no-edit")
    assert again.exit_code == 0
    assert "Created" not in again.output


def test_main_returns_exit_code(site_dir: Path, capsys) -> None:
    assert cli.main(["-c", str(site_dir / "staticmark.toml"), "info"]) == 0
    assert cli.main(["-c", str(site_dir / "nope.toml"), "info"]) == 1
    assert "Error:" in capsys.readouterr().err
