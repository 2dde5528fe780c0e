"""Build services for Staticmark."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from ..config import SiteConfig
from ..documents import Document, collect_documents
from ..errors import AdapterError, BuildError
from ..highlight import check_languages
from ..pipeline import available_preprocessors, build_pipeline
from ..plugins import (
    AdapterContribution,
    AdaptResult,
    PluginRegistrationError,
    RenderedPage,
    SiteBuild,
    WarnFunc,
    load_adapter_contributions,
)
from ..prerender import PrerenderReport, prerender
from ..render import Renderer

log = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildResult:
    """Summary of a finished build."""

    pages: int
    output_dir: Path
    base_path: str
    report: PrerenderReport
    adapted: AdaptResult


def _load_adapter_registry(config: SiteConfig) -> dict[str, AdapterContribution]:
    try:
        return load_adapter_contributions(config)
    except PluginRegistrationError as exc:
        raise AdapterError(str(exc)) from exc


def get_adapter(config: SiteConfig) -> AdapterContribution:
    """Return the adapter named by ``config.kit.adapter.name``."""

    adapters = _load_adapter_registry(config)
    name = config.kit.adapter.name
    contribution = adapters.get(name.lower())
    if contribution is None:
        available = ", ".join(sorted(adapters))
        if available:
            raise AdapterError(f"Unknown adapter: {name}. Available: {available}.")
        raise AdapterError("No adapter plugins are available.")
    return contribution


def get_adapter_descriptions(config: SiteConfig) -> list[tuple[str, str]]:
    """Return tuples of ``(adapter_id, description)`` for available adapters."""

    registry = _load_adapter_registry(config)
    return sorted(
        ((name, contrib.description) for name, contrib in registry.items()),
        key=lambda item: item[0],
    )


def get_preprocessor_descriptions(config: SiteConfig) -> list[tuple[str, str]]:
    """Return tuples of ``(preprocessor_id, description)`` for preprocessors."""

    registry = available_preprocessors(config)
    return sorted(
        ((name, contrib.description) for name, contrib in registry.items()),
        key=lambda item: item[0],
    )


def with_destination(config: SiteConfig, destination: Path) -> SiteConfig:
    """Return ``config`` with pages and assets redirected to ``destination``."""

    target = str(destination.expanduser().resolve())
    adapter = replace(config.kit.adapter, pages=target, assets=target)
    return replace(config, kit=replace(config.kit, adapter=adapter))


def render_documents(
    config: SiteConfig,
    documents: list[Document],
    *,
    renderer: Renderer | None = None,
    warn: WarnFunc | None = None,
) -> list[RenderedPage]:
    """Preprocess and render ``documents`` in order."""

    pipeline = build_pipeline(config)
    renderer = renderer or Renderer(config)
    return [renderer.render(pipeline.run(doc, warn=warn)) for doc in documents]


def build_site(config: SiteConfig, *, warn: WarnFunc | None = None) -> BuildResult:
    """Collect, preprocess, render, check and write the whole site."""

    documents = collect_documents(config)
    adapter = get_adapter(config)
    renderer = Renderer(config)
    base_path = renderer.base_path
    log.debug(
        "Building %d documents (production=%s, base=%r)",
        len(documents),
        config.production,
        base_path,
    )

    pages = render_documents(config, documents, renderer=renderer, warn=warn)
    report = prerender(pages, config.kit.prerender, base_path=base_path, warn=warn)

    fallback_html = renderer.render_fallback() if config.kit.adapter.fallback else None
    site = SiteBuild(
        pages=tuple(pages),
        expected_routes=tuple(doc.route for doc in documents),
        fallback_html=fallback_html,
    )

    try:
        adapted = adapter.handler(site, config, warn=warn)
    except BuildError:
        raise
    except Exception as exc:
        raise AdapterError(
            f"Adapter '{adapter.adapter_id}' raised an unexpected error: {exc}"
        ) from exc

    return BuildResult(
        pages=len(pages),
        output_dir=adapted.pages_dir,
        base_path=base_path,
        report=report,
        adapted=adapted,
    )


def check_site(config: SiteConfig) -> list[tuple[str, str]]:
    """Return ``(src_uri, lang)`` code blocks the highlighter cannot handle."""

    documents = [
        doc
        for doc in collect_documents(config)
        if doc.extension in config.markdown.extensions
    ]
    return check_languages(documents, config.markdown.highlight)


__all__ = [
    "BuildResult",
    "build_site",
    "check_site",
    "get_adapter",
    "get_adapter_descriptions",
    "get_preprocessor_descriptions",
    "render_documents",
    "with_destination",
]
