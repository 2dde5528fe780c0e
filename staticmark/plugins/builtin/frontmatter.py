"""Built-in front matter preprocessor for Staticmark."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

import yaml

from ...config import SiteConfig
from ...documents import Document
from ...errors import PreprocessError
from .. import PreprocessorContribution, WarnFunc, hookimpl

PLUGIN_ID = "staticmark-builtin-frontmatter"
PREPROCESSOR_ID = "frontmatter"
FRONTMATTER_DELIM = "---"


def split_front_matter(raw: str) -> tuple[dict[str, Any], str]:
    """Split a leading YAML block from ``raw``.

    Returns ``(metadata, body)``. Text without an opening delimiter on the
    first line, or without a closing one, is returned unchanged with empty
    metadata.
    """

    lines = raw.splitlines()
    if not lines or lines[0].strip() != FRONTMATTER_DELIM:
        return {}, raw

    closing_index = None
    for index in range(1, len(lines)):
        if lines[index].strip() == FRONTMATTER_DELIM:
            closing_index = index
            break
    if closing_index is None:
        return {}, raw

    metadata_block = "\n".join(lines[1:closing_index])
    body = "\n".join(lines[closing_index + 1 :]).lstrip("\n")
    if raw.endswith("\n") and body:
        body += "\n"

    try:
        loaded = yaml.safe_load(metadata_block)
    except yaml.YAMLError as exc:
        raise PreprocessError(f"Malformed front matter: {exc}") from exc

    if loaded is None:
        return {}, body
    if not isinstance(loaded, dict):
        raise PreprocessError("Front matter must be a YAML mapping")
    return loaded, body


def _preprocess(
    document: Document,
    config: SiteConfig,
    *,
    warn: WarnFunc | None = None,
) -> Document:
    metadata, body = split_front_matter(document.content)
    merged = dict(document.metadata)
    merged.update(metadata)
    return replace(document, content=body, metadata=merged)


@hookimpl
def preprocessors(config: SiteConfig) -> tuple[PreprocessorContribution, ...]:
    """Expose the front matter splitter for every site extension."""

    contribution = PreprocessorContribution(
        preprocessor_id=PREPROCESSOR_ID,
        handler=_preprocess,
        description="YAML front matter into page metadata",
    )
    return (contribution,)


__all__ = ["PLUGIN_ID", "PREPROCESSOR_ID", "preprocessors", "split_front_matter"]
