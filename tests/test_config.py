from __future__ import annotations

from pathlib import Path

import pytest
from staticmark.config import (
    DEFAULT_LANGUAGES,
    ConfigError,
    InvalidConfigError,
    MissingConfigError,
    SiteConfig,
    bootstrap_config_file,
    is_production,
    load_config,
    resolve_base_path,
)

from .conftest import write_config


def test_load_config_defaults(tmp_path: Path) -> None:
    config_path = write_config(tmp_path, "")

    config = load_config(config_path, production=False)
    assert isinstance(config, SiteConfig)
    assert config.extensions == (".html", ".md")
    assert config.preprocess == ("frontmatter", "markdown")
    assert config.markdown.extensions == (".md",)
    assert config.markdown.highlight.languages == DEFAULT_LANGUAGES
    assert config.kit.adapter.name == "static"
    assert config.kit.prerender.handle_missing_id == "warn"
    assert config.kit.prerender.handle_http_error == "fail"
    assert config.routes_dir == (tmp_path / "src" / "routes").resolve()
    assert config.source_path == config_path


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(MissingConfigError):
        load_config(tmp_path / "missing.toml")


def test_production_build_uses_configured_base(tmp_path: Path) -> None:
    config_path = write_config(
        tmp_path,
        """
        [kit.paths]
        base = "/my-repo/"
        """,
    )

    production = load_config(config_path, production=True)
    development = load_config(config_path, production=False)

    assert production.base_path == "/my-repo"
    assert development.base_path == ""


def test_environment_selects_production(tmp_path: Path) -> None:
    config_path = write_config(
        tmp_path,
        """
        [kit.paths]
        base = "/docs"
        """,
    )

    config = load_config(config_path, environ={"STATICMARK_ENV": "Production"})
    assert config.production is True
    assert config.base_path == "/docs"

    config = load_config(config_path, environ={"STATICMARK_ENV": "development"})
    assert config.base_path == ""


def test_explicit_mode_overrides_environment(tmp_path: Path) -> None:
    config_path = write_config(tmp_path, '[kit.paths]\nbase = "/docs"\n')

    config = load_config(
        config_path, production=False, environ={"STATICMARK_ENV": "production"}
    )
    assert config.base_path == ""


def test_is_production_and_base_resolution() -> None:
    assert is_production({}) is False
    assert is_production({"STATICMARK_ENV": " production "}) is True
    assert resolve_base_path("/", True) == ""
    assert resolve_base_path("/a/b/", True) == "/a/b"
    assert resolve_base_path("/a", False) == ""


@pytest.mark.parametrize(
    "content",
    [
        '[site]\nextensions = ["md"]\n',
        '[site]\npreprocess = ["markdown", "markdown"]\n',
        '[markdown]\nextensions = [".markdown"]\n',
        '[kit.prerender]\nhandle_missing_id = "explode"\n',
        '[kit.paths]\nbase = "no-slash"\n',
        '[kit.adapter]\nprecompress = "yes"\n',
        "[site]\npreprocess = [\"frontmatter\", \" \"]\n",
        "site = 3\n",
    ],
)
def test_load_config_rejects_invalid_values(tmp_path: Path, content: str) -> None:
    config_path = write_config(tmp_path, content)

    with pytest.raises(InvalidConfigError):
        load_config(config_path)


def test_invalid_toml_is_a_config_error(tmp_path: Path) -> None:
    config_path = write_config(tmp_path, "[site\n")

    with pytest.raises(ConfigError):
        load_config(config_path)


def test_adapter_extra_options_are_kept(tmp_path: Path) -> None:
    config_path = write_config(
        tmp_path,
        """
        [kit.adapter]
        name = "static"
        pages = "public"
        fallback = "404.html"
        precompress = true
        region = "eu"
        """,
    )

    adapter = load_config(config_path).kit.adapter
    assert adapter.pages == "public"
    assert adapter.assets == "public"
    assert adapter.fallback == "404.html"
    assert adapter.precompress is True
    assert dict(adapter.options) == {"region": "eu"}


def test_bootstrap_config_file_creates_loadable_config(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "staticmark.toml"

    assert bootstrap_config_file(config_path) is True
    assert bootstrap_config_file(config_path) is False

    config = load_config(config_path, production=False)
    assert config.markdown.math is True
    assert config.markdown.highlight.languages == DEFAULT_LANGUAGES
    assert config.kit.prerender.handle_missing_id == "warn"
