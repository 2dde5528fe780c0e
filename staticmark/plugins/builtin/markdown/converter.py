"""Markdown to template-source conversion for the built-in preprocessor."""

from __future__ import annotations

import logging
from dataclasses import replace

from bs4 import BeautifulSoup
from markdown import Markdown

from staticmark.config import MarkdownOptions, SiteConfig
from staticmark.documents import Document
from staticmark.errors import UnsupportedLanguageError
from staticmark.highlight import build_highlighter, escape_template
from staticmark.plugins import WarnFunc

from .extension import ComponentExtension, HighlightCallback, HighlightExtension

log = logging.getLogger(__name__)

PREPROCESSOR_ID = "markdown"
BASE_EXTENSIONS = ("tables", "attr_list", "md_in_html")
MATH_EXTENSION = "pymdownx.arithmatex"


def make_highlight_callback(
    options: MarkdownOptions,
    *,
    source: str = "<string>",
    warn: WarnFunc | None = None,
) -> HighlightCallback:
    """Return the per-document callback turning a code block into markup."""

    highlighter = build_highlighter(options.highlight)
    strict = options.highlight.strict

    def highlight(code: str, lang: str | None) -> str:
        try:
            markup = highlighter.highlight(code, lang)
        except UnsupportedLanguageError as exc:
            if strict:
                raise
            if warn is not None:
                warn(f"{source}: {exc} Rendering as plain text.")
            markup = highlighter.plain(code, lang)
        return escape_template(markup)

    return highlight


def build_markdown(options: MarkdownOptions, highlight: HighlightCallback) -> Markdown:
    """Create a Markdown instance with the site's extension list."""

    extensions: list[object] = [
        *BASE_EXTENSIONS,
        *options.plugins,
        HighlightExtension(highlight),
        ComponentExtension(math=options.math),
    ]
    extension_configs: dict[str, dict[str, object]] = {}
    if options.math:
        extensions.append(MATH_EXTENSION)
        extension_configs[MATH_EXTENSION] = {"generic": True}
    return Markdown(extensions=extensions, extension_configs=extension_configs)


def convert_markdown(
    text: str,
    options: MarkdownOptions,
    *,
    source: str = "<string>",
    warn: WarnFunc | None = None,
) -> str:
    """Convert markdown ``text`` into template source."""

    callback = make_highlight_callback(options, source=source, warn=warn)
    md = build_markdown(options, callback)
    return md.convert(text)


def first_heading(html: str) -> str | None:
    heading = BeautifulSoup(html, "html.parser").find("h1")
    if heading is None:
        return None
    # Collapse whitespace left between inline tags such as <em>.
    return " ".join(heading.get_text().split()) or None


def preprocess_markdown(
    document: Document,
    config: SiteConfig,
    *,
    warn: WarnFunc | None = None,
) -> Document:
    log.debug("Converting %s from markdown", document.src_uri)
    html = convert_markdown(
        document.content,
        config.markdown,
        source=document.src_uri,
        warn=warn,
    )
    metadata = dict(document.metadata)
    if "title" not in metadata:
        title = first_heading(html)
        if title is not None:
            metadata["title"] = title
    return replace(document, content=html, metadata=metadata)


__all__ = [
    "MATH_EXTENSION",
    "PREPROCESSOR_ID",
    "build_markdown",
    "convert_markdown",
    "first_heading",
    "make_highlight_callback",
    "preprocess_markdown",
]
