"""Template compilation of preprocessed documents into full pages."""

from __future__ import annotations

import logging
from typing import Any

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    TemplateError,
    select_autoescape,
)
from markupsafe import Markup

from .config import SiteConfig
from .documents import Document
from .errors import RenderError
from .plugins import RenderedPage

log = logging.getLogger(__name__)

DEFAULT_LAYOUT = "layout.html"
DEFAULT_LANG = "en"
KATEX_URL = "https://cdn.jsdelivr.net/npm/katex@0.16.11/dist"


def join_url(base_path: str, path: str) -> str:
    """Prefix a site-absolute ``path`` with ``base_path``.

    Relative paths, fragments and URLs with a scheme or host are returned
    unchanged.
    """

    if not path.startswith("/") or path.startswith("//"):
        return path
    return f"{base_path}{path}"


class Renderer:
    """Compile document bodies as templates and wrap them in a layout."""

    def __init__(self, config: SiteConfig, *, base_path: str | None = None) -> None:
        self.config = config
        self.base_path = config.base_path if base_path is None else base_path
        self._env = Environment(
            loader=ChoiceLoader(
                [
                    FileSystemLoader(str(config.templates_dir)),
                    PackageLoader("staticmark", "templates"),
                ]
            ),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.globals.update(
            site=self._site_context(),
            base=self.base_path,
            url=self.url,
        )

    def url(self, path: str) -> str:
        return join_url(self.base_path, path)

    def render(self, document: Document) -> RenderedPage:
        """Render ``document`` into a complete HTML page."""

        page = dict(document.metadata)
        page.setdefault("route", document.route)
        page.setdefault("url", self.url(document.route))

        try:
            body_template = self._env.from_string(document.content)
            body = body_template.render(page=page)
            layout = self._env.get_template(document.layout)
            html = layout.render(page=page, content=Markup(body))
        except TemplateError as exc:
            raise RenderError(f"Failed to render '{document.src_uri}': {exc}") from exc

        log.debug("Rendered %s -> %s", document.src_uri, document.output_path)
        return RenderedPage(
            route=document.route,
            output_path=document.output_path,
            html=html,
            src_uri=document.src_uri,
        )

    def render_fallback(self) -> str:
        """Render the layout with no content, used as an SPA fallback page."""

        try:
            layout = self._env.get_template(DEFAULT_LAYOUT)
            return layout.render(page={}, content=Markup(""))
        except TemplateError as exc:
            raise RenderError(f"Failed to render fallback page: {exc}") from exc

    def _site_context(self) -> dict[str, Any]:
        return {
            "title": self.config.title,
            "lang": DEFAULT_LANG,
            "base": self.base_path,
            "math": self.config.markdown.math,
            "katex_url": KATEX_URL,
            "production": self.config.production,
        }


__all__ = ["DEFAULT_LAYOUT", "Renderer", "join_url"]
