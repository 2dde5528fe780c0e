"""Build-time crawl of rendered pages checking internal links and anchors."""

from __future__ import annotations

import logging
import posixpath
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Sequence
from urllib.parse import unquote, urljoin, urlsplit

from bs4 import BeautifulSoup

from .config import PrerenderOptions
from .errors import PrerenderError
from .plugins import RenderedPage, WarnFunc

log = logging.getLogger(__name__)

ALL_ROUTES = "*"


@dataclass(slots=True, frozen=True)
class PrerenderIssue:
    """A broken internal link found while crawling."""

    source: str
    href: str
    target: str
    fragment: str | None = None

    @property
    def message(self) -> str:
        if self.fragment is not None:
            return (
                f'No element with id "{self.fragment}" on {self.target} '
                f"(linked from {self.source} as {self.href})"
            )
        return f"404 {self.target} (linked from {self.source} as {self.href})"


@dataclass(slots=True)
class PrerenderReport:
    routes: list[str] = field(default_factory=list)
    http_errors: list[PrerenderIssue] = field(default_factory=list)
    missing_ids: list[PrerenderIssue] = field(default_factory=list)


@dataclass(slots=True)
class _ParsedPage:
    links: list[str]
    ids: set[str]


def _parse(html: str) -> _ParsedPage:
    """Collect anchor targets and element ids from a rendered page."""

    soup = BeautifulSoup(html, "html.parser")
    links = [
        anchor["href"].strip()
        for anchor in soup.find_all("a", href=True)
        if anchor["href"].strip()
    ]
    ids = {element["id"] for element in soup.find_all(id=True)}
    ids.update(anchor["name"] for anchor in soup.find_all("a", attrs={"name": True}))
    return _ParsedPage(links=links, ids=ids)


def normalize_route(path: str) -> str | None:
    """Map a URL path to a route, or ``None`` for non-page assets."""

    if not path.startswith("/"):
        path = "/" + path
    if path.endswith("/index.html"):
        return path[: -len("index.html")]
    if path.endswith("/"):
        return path
    extension = posixpath.splitext(path)[1]
    if extension and extension != ".html":
        return None
    if extension == ".html":
        path = path[: -len(".html")]
    return path + "/"


def resolve_link(
    href: str, source_route: str, base_path: str
) -> tuple[str, str] | None:
    """Resolve ``href`` found on ``source_route`` to ``(route, fragment)``.

    Returns ``None`` for links that are not checked: external URLs, other
    schemes, assets and paths outside the base path.
    """

    parts = urlsplit(href)
    if parts.scheme or parts.netloc:
        return None

    absolute = urlsplit(urljoin(f"{base_path}{source_route}", href))
    path = unquote(absolute.path)
    if base_path:
        if path != base_path and not path.startswith(base_path + "/"):
            return None
        path = path[len(base_path) :] or "/"

    route = normalize_route(path)
    if route is None:
        return None
    return route, unquote(absolute.fragment)


def crawl(
    pages: Sequence[RenderedPage],
    options: PrerenderOptions,
    *,
    base_path: str = "",
) -> PrerenderReport:
    """Visit pages from the configured entries and record broken links."""

    by_route = {page.route: page for page in pages}
    parsed: dict[str, _ParsedPage] = {}
    report = PrerenderReport()

    def parsed_page(route: str) -> _ParsedPage:
        if route not in parsed:
            parsed[route] = _parse(by_route[route].html)
        return parsed[route]

    queue: deque[str] = deque()
    for entry in _expand_entries(options.entries, by_route):
        route = normalize_route(entry) or entry
        if route not in by_route:
            report.http_errors.append(
                PrerenderIssue(source="(entries)", href=entry, target=route)
            )
            continue
        queue.append(route)

    visited: set[str] = set()
    while queue:
        route = queue.popleft()
        if route in visited:
            continue
        visited.add(route)
        report.routes.append(route)

        for href in parsed_page(route).links:
            resolved = resolve_link(href, route, base_path)
            if resolved is None:
                continue
            target, fragment = resolved
            if target not in by_route:
                report.http_errors.append(
                    PrerenderIssue(source=route, href=href, target=target)
                )
                continue
            if fragment and fragment not in parsed_page(target).ids:
                report.missing_ids.append(
                    PrerenderIssue(
                        source=route, href=href, target=target, fragment=fragment
                    )
                )
            if options.crawl and target not in visited:
                queue.append(target)

    log.debug("Prerender visited %d routes", len(report.routes))
    return report


def _expand_entries(
    entries: Iterable[str], by_route: dict[str, RenderedPage]
) -> list[str]:
    expanded: list[str] = []
    for entry in entries:
        if entry == ALL_ROUTES:
            expanded.extend(sorted(by_route))
        else:
            expanded.append(entry)
    return expanded


def apply_policies(
    report: PrerenderReport,
    options: PrerenderOptions,
    *,
    warn: WarnFunc | None = None,
) -> None:
    """Fail, warn or stay silent about each issue according to ``options``.

    Raises
    ------
    PrerenderError
        If any issue falls under a ``fail`` policy. All such issues are listed.
    """

    failures: list[str] = []
    for issues, policy in (
        (report.http_errors, options.handle_http_error),
        (report.missing_ids, options.handle_missing_id),
    ):
        for issue in issues:
            if policy == "fail":
                failures.append(issue.message)
            elif policy == "warn" and warn is not None:
                warn(issue.message)

    if failures:
        raise PrerenderError(
            "Prerendering failed:\n" + "\n".join(f"  - {line}" for line in failures)
        )


def prerender(
    pages: Sequence[RenderedPage],
    options: PrerenderOptions,
    *,
    base_path: str = "",
    warn: WarnFunc | None = None,
) -> PrerenderReport:
    """Crawl ``pages`` and apply the configured error policies."""

    report = crawl(pages, options, base_path=base_path)
    apply_policies(report, options, warn=warn)
    return report


__all__ = [
    "PrerenderIssue",
    "PrerenderReport",
    "apply_policies",
    "crawl",
    "normalize_route",
    "prerender",
    "resolve_link",
]
