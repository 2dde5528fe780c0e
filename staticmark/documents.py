"""Discovery of source documents and their routes."""

from __future__ import annotations

import logging
import os
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import SiteConfig
from .errors import DocumentError

log = logging.getLogger(__name__)

INDEX_STEM = "index"


@dataclass(slots=True)
class Document:
    """A source file travelling through the preprocessing pipeline."""

    source_path: Path
    src_uri: str
    extension: str
    route: str
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def output_path(self) -> str:
        """Posix path of the page relative to the pages directory."""

        return posixpath.join(self.route.strip("/"), "index.html").lstrip("/")

    @property
    def layout(self) -> str:
        value = self.metadata.get("layout")
        if isinstance(value, str) and value.strip():
            return value.strip()
        return "layout.html"


def route_for(src_uri: str) -> str:
    """Map a source path such as ``posts/hello.md`` to ``/posts/hello/``.

    ``index`` files map to their directory: ``index.md`` is ``/`` and
    ``posts/index.md`` is ``/posts/``.
    """

    parent, filename = posixpath.split(src_uri)
    stem = posixpath.splitext(filename)[0]
    parts = [part for part in parent.split("/") if part]
    if stem != INDEX_STEM:
        parts.append(stem)
    if not parts:
        return "/"
    return "/" + "/".join(parts) + "/"


def _is_partial(name: str) -> bool:
    return name.startswith((".", "_"))


def _file_sort_key(name: str) -> tuple[bool, str]:
    return (os.path.splitext(name)[0] != INDEX_STEM, name)


def collect_documents(config: SiteConfig) -> list[Document]:
    """Walk the routes directory and return documents sorted by ``src_uri``."""

    routes_dir = config.routes_dir
    if not routes_dir.is_dir():
        raise DocumentError(f"Routes directory not found: {routes_dir}")

    documents: list[Document] = []
    by_route: dict[str, Document] = {}
    for source_dir, dirnames, filenames in os.walk(routes_dir, followlinks=True):
        dirnames[:] = sorted(d for d in dirnames if not _is_partial(d))
        relative_dir = os.path.relpath(source_dir, routes_dir)

        for filename in sorted(filenames, key=_file_sort_key):
            if _is_partial(filename):
                continue
            extension = os.path.splitext(filename)[1].lower()
            if extension not in config.extensions:
                log.debug("Skipping %s: extension not configured", filename)
                continue

            src_uri = Path(relative_dir, filename).as_posix()
            if src_uri.startswith("./"):
                src_uri = src_uri[2:]
            source_path = Path(source_dir) / filename
            try:
                content = source_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise DocumentError(f"Unable to read {source_path}: {exc}") from exc

            document = Document(
                source_path=source_path,
                src_uri=src_uri,
                extension=extension,
                route=route_for(src_uri),
                content=content,
            )
            previous = by_route.setdefault(document.route, document)
            if previous is not document:
                raise DocumentError(
                    f"'{previous.src_uri}' and '{document.src_uri}' both map to "
                    f"route '{document.route}'."
                )
            documents.append(document)

    documents.sort(key=lambda doc: doc.src_uri)
    return documents


__all__ = ["Document", "collect_documents", "route_for"]
