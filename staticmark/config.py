"""Configuration management for Staticmark."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

DEFAULT_CONFIG_FILENAME = "staticmark.toml"
DEFAULT_CONFIG_PATH = Path(DEFAULT_CONFIG_FILENAME)
ENVIRONMENT_VARIABLE = "STATICMARK_ENV"
PRODUCTION = "production"

DEFAULT_SITE_TITLE = "Staticmark"
DEFAULT_EXTENSIONS = (".html", ".md")
DEFAULT_PREPROCESS = ("frontmatter", "markdown")
DEFAULT_MARKDOWN_EXTENSIONS = (".md",)
DEFAULT_THEME = "monokai"
DEFAULT_LANGUAGES = ("javascript", "typescript", "rust", "c", "c++", "python")
DEFAULT_ADAPTER = "static"
DEFAULT_OUTPUT_DIR = "build"

POLICIES = ("fail", "warn", "ignore")


class ConfigError(RuntimeError):
    """Base error for configuration related issues."""


class MissingConfigError(ConfigError):
    """Raised when the configuration file cannot be found."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Configuration file not found at {path}")
        self.path = path


class InvalidConfigError(ConfigError):
    """Raised when the configuration file misses required keys or values."""


@dataclass(slots=True, frozen=True)
class HighlightOptions:
    """Fixed theme and language list used for every code block."""

    theme: str = DEFAULT_THEME
    languages: tuple[str, ...] = DEFAULT_LANGUAGES
    strict: bool = False


@dataclass(slots=True, frozen=True)
class MarkdownOptions:
    extensions: tuple[str, ...] = DEFAULT_MARKDOWN_EXTENSIONS
    highlight: HighlightOptions = field(default_factory=HighlightOptions)
    plugins: tuple[str, ...] = ()
    math: bool = False


@dataclass(slots=True, frozen=True)
class AdapterOptions:
    name: str = DEFAULT_ADAPTER
    pages: str = DEFAULT_OUTPUT_DIR
    assets: str = DEFAULT_OUTPUT_DIR
    fallback: str | None = None
    precompress: bool = False
    strict: bool = True
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class PrerenderOptions:
    entries: tuple[str, ...] = ("*",)
    crawl: bool = True
    handle_http_error: str = "fail"
    handle_missing_id: str = "warn"


@dataclass(slots=True, frozen=True)
class KitOptions:
    adapter: AdapterOptions = field(default_factory=AdapterOptions)
    base_path: str = ""
    prerender: PrerenderOptions = field(default_factory=PrerenderOptions)


@dataclass(slots=True, frozen=True)
class SiteConfig:
    """In-memory representation of the Staticmark configuration file."""

    root_dir: Path
    routes_dir: Path
    static_dir: Path
    templates_dir: Path
    title: str = DEFAULT_SITE_TITLE
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    preprocess: tuple[str, ...] = DEFAULT_PREPROCESS
    markdown: MarkdownOptions = field(default_factory=MarkdownOptions)
    kit: KitOptions = field(default_factory=KitOptions)
    production: bool = False
    plugins: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    source_path: Path | None = None

    @property
    def base_path(self) -> str:
        """Base URL path in effect for this build."""

        return resolve_base_path(self.kit.base_path, self.production)


def is_production(environ: Mapping[str, str] | None = None) -> bool:
    """Return whether the environment selects a production build."""

    env = os.environ if environ is None else environ
    return env.get(ENVIRONMENT_VARIABLE, "").strip().lower() == PRODUCTION


def normalize_base_path(value: str) -> str:
    """Return ``value`` with a leading slash and no trailing slash.

    An empty value (or a lone ``/``) means the site is served from the root
    and yields ``""``.
    """

    stripped = value.strip().strip("/")
    if not stripped:
        return ""
    return "/" + stripped


def resolve_base_path(configured: str, production: bool) -> str:
    """Select the base path: the configured one in production, else ``""``."""

    if not production:
        return ""
    return normalize_base_path(configured)


def load_config(
    path: Path | None = None,
    *,
    production: bool | None = None,
    environ: Mapping[str, str] | None = None,
) -> SiteConfig:
    """Load configuration from ``path`` or ``./staticmark.toml``.

    Parameters
    ----------
    path:
        Optional location of the configuration file.
    production:
        Force a production (``True``) or development (``False``) build. When
        ``None`` the ``STATICMARK_ENV`` environment variable decides.

    Raises
    ------
    MissingConfigError
        If the file cannot be found.
    InvalidConfigError
        If settings are malformed.
    """

    config_path = (path or DEFAULT_CONFIG_PATH).expanduser()
    if not config_path.exists():
        raise MissingConfigError(config_path)

    try:
        with config_path.open("rb") as fh:
            raw = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise InvalidConfigError(f"Invalid TOML in {config_path}: {exc}") from exc

    root_dir = config_path.resolve().parent

    site_raw = _table(raw, "site")
    markdown_raw = _table(raw, "markdown")
    kit_raw = _table(raw, "kit")

    extensions = _extensions(site_raw, "extensions", DEFAULT_EXTENSIONS)
    preprocess = _string_tuple(site_raw, "preprocess", DEFAULT_PREPROCESS)
    if len(set(preprocess)) != len(preprocess):
        raise InvalidConfigError("'preprocess' must not list a preprocessor twice")

    markdown = _markdown_options(markdown_raw)
    unknown = [ext for ext in markdown.extensions if ext not in extensions]
    if unknown:
        raise InvalidConfigError(
            f"Markdown extensions {', '.join(unknown)} are not site extensions"
        )

    title = site_raw.get("title", DEFAULT_SITE_TITLE)
    if not isinstance(title, str):
        raise InvalidConfigError("'title' must be a string when provided")

    plugins_section = raw.get("plugins")
    plugins: dict[str, dict[str, Any]] = {}
    if isinstance(plugins_section, dict):
        for key, value in plugins_section.items():
            plugins[key] = dict(value) if isinstance(value, dict) else {}

    if production is None:
        production = is_production(environ)

    return SiteConfig(
        root_dir=root_dir,
        routes_dir=_directory(site_raw, "routes_dir", "src/routes", root_dir),
        static_dir=_directory(site_raw, "static_dir", "static", root_dir),
        templates_dir=_directory(site_raw, "templates_dir", "templates", root_dir),
        title=title.strip() or DEFAULT_SITE_TITLE,
        extensions=extensions,
        preprocess=preprocess,
        markdown=markdown,
        kit=_kit_options(kit_raw),
        production=production,
        plugins=plugins,
        source_path=config_path,
    )


def _markdown_options(raw: dict[str, Any]) -> MarkdownOptions:
    highlight_raw = _table(raw, "highlight", label="markdown.highlight")

    theme = highlight_raw.get("theme", DEFAULT_THEME)
    if not isinstance(theme, str) or not theme.strip():
        raise InvalidConfigError("'theme' must be a non-empty string")

    languages = _string_tuple(highlight_raw, "languages", DEFAULT_LANGUAGES)
    highlight = HighlightOptions(
        theme=theme.strip(),
        languages=tuple(lang.lower() for lang in languages),
        strict=_bool(highlight_raw, "strict", False),
    )

    return MarkdownOptions(
        extensions=_extensions(raw, "extensions", DEFAULT_MARKDOWN_EXTENSIONS),
        highlight=highlight,
        plugins=_string_tuple(raw, "plugins", ()),
        math=_bool(raw, "math", False),
    )


def _kit_options(raw: dict[str, Any]) -> KitOptions:
    adapter_raw = dict(_table(raw, "adapter", label="kit.adapter"))
    paths_raw = _table(raw, "paths", label="kit.paths")
    prerender_raw = _table(raw, "prerender", label="kit.prerender")

    name = adapter_raw.pop("name", DEFAULT_ADAPTER)
    pages = adapter_raw.pop("pages", DEFAULT_OUTPUT_DIR)
    assets = adapter_raw.pop("assets", pages)
    fallback = adapter_raw.pop("fallback", None)
    for key, value in (("name", name), ("pages", pages), ("assets", assets)):
        if not isinstance(value, str) or not value.strip():
            raise InvalidConfigError(f"'{key}' must be a non-empty string")
    if fallback is not None and not isinstance(fallback, str):
        raise InvalidConfigError("'fallback' must be a string when provided")

    adapter = AdapterOptions(
        name=name.strip(),
        pages=pages.strip(),
        assets=assets.strip(),
        fallback=(fallback or "").strip() or None,
        precompress=_bool(adapter_raw, "precompress", False),
        strict=_bool(adapter_raw, "strict", True),
        options={
            k: v for k, v in adapter_raw.items() if k not in ("precompress", "strict")
        },
    )

    base = paths_raw.get("base", "")
    if not isinstance(base, str):
        raise InvalidConfigError("'base' must be a string when provided")
    if base.strip() and not base.strip().startswith("/"):
        raise InvalidConfigError("'base' must start with '/' when provided")

    prerender = PrerenderOptions(
        entries=_string_tuple(prerender_raw, "entries", ("*",)),
        crawl=_bool(prerender_raw, "crawl", True),
        handle_http_error=_policy(prerender_raw, "handle_http_error", "fail"),
        handle_missing_id=_policy(prerender_raw, "handle_missing_id", "warn"),
    )

    return KitOptions(adapter=adapter, base_path=base, prerender=prerender)


def _table(
    raw: dict[str, Any], key: str, *, label: str | None = None
) -> dict[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidConfigError(f"'{label or key}' must be a table")
    return value


def _string_tuple(
    raw: dict[str, Any], key: str, default: tuple[str, ...]
) -> tuple[str, ...]:
    value = raw.get(key)
    if value is None:
        return default
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InvalidConfigError(f"'{key}' must be a list of strings")
    items = tuple(v.strip() for v in value)
    if any(not item for item in items):
        raise InvalidConfigError(f"'{key}' must not contain empty values")
    return items


def _extensions(
    raw: dict[str, Any], key: str, default: tuple[str, ...]
) -> tuple[str, ...]:
    items = _string_tuple(raw, key, default)
    bad = [item for item in items if not item.startswith(".")]
    if bad:
        raise InvalidConfigError(f"'{key}' entries must start with '.': {bad}")
    return tuple(item.lower() for item in items)


def _bool(raw: Mapping[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    if not isinstance(value, bool):
        raise InvalidConfigError(f"'{key}' must be a boolean")
    return value


def _policy(raw: dict[str, Any], key: str, default: str) -> str:
    value = raw.get(key, default)
    if value not in POLICIES:
        raise InvalidConfigError(f"'{key}' must be one of {', '.join(POLICIES)}")
    return value


def _directory(raw: dict[str, Any], key: str, default: str, root_dir: Path) -> Path:
    value = raw.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise InvalidConfigError(f"'{key}' must be a non-empty string")
    path = Path(value.strip()).expanduser()
    return path if path.is_absolute() else (root_dir / path).resolve()


def bootstrap_config_file(path: Path) -> bool:
    """Create a default config file if missing.

    Returns True when the file was created, False if it already existed.
    """

    if path.exists():
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    languages = ", ".join(f'"{lang}"' for lang in DEFAULT_LANGUAGES)
    default_content = (
        "[site]\n"
        f'title = "{DEFAULT_SITE_TITLE}"\n'
        'extensions = [".html", ".md"]\n'
        'preprocess = ["frontmatter", "markdown"]\n'
        "\n"
        "[markdown]\n"
        'extensions = [".md"]\n'
        "math = true\n"
        "\n"
        "[markdown.highlight]\n"
        f'theme = "{DEFAULT_THEME}"\n'
        f"languages = [{languages}]\n"
        "\n"
        "[kit.adapter]\n"
        'name = "static"\n'
        "\n"
        "[kit.paths]\n"
        'base = ""\n'
        "\n"
        "[kit.prerender]\n"
        'handle_missing_id = "warn"\n'
    )
    path.write_text(default_content, encoding="utf-8")
    return True
