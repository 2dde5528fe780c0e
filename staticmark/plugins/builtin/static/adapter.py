"""Static file output for rendered pages."""

from __future__ import annotations

import gzip
import logging
import shutil
from importlib import resources
from pathlib import Path

from staticmark.config import SiteConfig
from staticmark.errors import AdapterError
from staticmark.plugins import AdaptResult, SiteBuild, WarnFunc

from .config import PRECOMPRESS_SUFFIXES, StaticAdapterConfig, resolve_adapter_config

log = logging.getLogger(__name__)

TEMPLATE_PACKAGE = "staticmark.templates"
DEFAULT_ASSETS = ("styles.css",)


class StaticAdapter:
    """Write a site build as plain files ready for any static host."""

    def __init__(
        self, options: StaticAdapterConfig, *, protected: tuple[Path, ...] = ()
    ) -> None:
        self.options = options
        self.protected = tuple(path.resolve() for path in protected)

    def write(self, build: SiteBuild) -> AdaptResult:
        options = self.options
        if options.strict:
            self._check_complete(build)

        # Parents first so a nested assets dir is recreated after its parent.
        directories = {options.pages_dir, options.assets_dir}
        for directory in sorted(directories, key=lambda path: len(path.parts)):
            self._clear(directory)

        result = AdaptResult(
            pages_dir=options.pages_dir, assets_dir=options.assets_dir
        )

        for page in build.pages:
            target = options.pages_dir / page.output_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(page.html, encoding="utf-8")
            result.written.append(target)

        if options.static_dir.is_dir():
            shutil.copytree(options.static_dir, options.assets_dir, dirs_exist_ok=True)
            result.written.extend(
                options.assets_dir / path.relative_to(options.static_dir)
                for path in sorted(options.static_dir.rglob("*"))
                if path.is_file()
            )

        for name in DEFAULT_ASSETS:
            target = options.assets_dir / name
            if target.exists():
                continue
            data = resources.files(TEMPLATE_PACKAGE).joinpath(name).read_text("utf-8")
            target.write_text(data, encoding="utf-8")
            result.written.append(target)

        if options.fallback:
            if build.fallback_html is None:
                raise AdapterError("A fallback page was configured but not rendered.")
            target = options.pages_dir / options.fallback
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(build.fallback_html, encoding="utf-8")
            result.written.append(target)

        if options.precompress:
            result.written.extend(self._precompress(result.written))

        log.debug("Wrote %d files to %s", len(result.written), options.pages_dir)
        return result

    def _check_complete(self, build: SiteBuild) -> None:
        # A preprocessor that rewrites a route leaves the source route unrendered.
        rendered = {page.route for page in build.pages}
        missing = sorted(set(build.expected_routes) - rendered)
        if missing:
            raise AdapterError(
                "The following routes were not prerendered: " + ", ".join(missing)
            )

    def _clear(self, directory: Path) -> None:
        for protected in self.protected:
            if directory == protected or directory in protected.parents:
                raise AdapterError(
                    f"Refusing to clear '{directory}': it contains site sources."
                )
        if directory.exists():
            if not directory.is_dir():
                raise AdapterError(f"Output path '{directory}' is not a directory.")
            shutil.rmtree(directory)
        directory.mkdir(parents=True)

    def _precompress(self, files: list[Path]) -> list[Path]:
        compressed: list[Path] = []
        for path in files:
            if path.suffix not in PRECOMPRESS_SUFFIXES:
                continue
            target = path.with_name(path.name + ".gz")
            with path.open("rb") as src, target.open("wb") as raw:
                with gzip.GzipFile(filename="", mode="wb", fileobj=raw, mtime=0) as dst:
                    shutil.copyfileobj(src, dst)
            compressed.append(target)
        return compressed


def adapt_static(
    build: SiteBuild,
    config: SiteConfig,
    *,
    warn: WarnFunc | None = None,
) -> AdaptResult:
    protected = (
        config.root_dir,
        config.routes_dir,
        config.static_dir,
        config.templates_dir,
    )
    adapter = StaticAdapter(resolve_adapter_config(config), protected=protected)
    try:
        return adapter.write(build)
    except AdapterError:
        raise
    except OSError as exc:
        raise AdapterError(f"Static adapter failed: {exc}") from exc


__all__ = ["StaticAdapter", "adapt_static"]
