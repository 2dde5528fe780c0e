"""Pluggy integration for the built-in markdown preprocessor."""

from __future__ import annotations

from staticmark.config import SiteConfig
from staticmark.highlight import build_highlighter
from staticmark.plugins import BootstrapContext, PreprocessorContribution, hookimpl

from .converter import PREPROCESSOR_ID, preprocess_markdown

PLUGIN_ID = "staticmark-builtin-markdown"


@hookimpl
def bootstrap(context: BootstrapContext) -> None:
    """Resolve the highlighter up front so a bad theme or language fails early."""

    if PREPROCESSOR_ID in context.config.preprocess:
        build_highlighter(context.config.markdown.highlight)


@hookimpl
def preprocessors(config: SiteConfig) -> tuple[PreprocessorContribution, ...]:
    """Expose the markdown transform for the configured markdown extensions."""

    contribution = PreprocessorContribution(
        preprocessor_id=PREPROCESSOR_ID,
        handler=preprocess_markdown,
        description="Markdown with template components and highlighted code",
        extensions=config.markdown.extensions,
    )
    return (contribution,)


__all__ = ["PLUGIN_ID", "bootstrap", "preprocessors"]
