"""Type definitions for Staticmark plugin contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Mapping, Protocol

if TYPE_CHECKING:  # pragma: no cover - type check only
    from ..config import SiteConfig
    from ..documents import Document


PluginSettingsGetter = Callable[..., Mapping[str, Any]]
WarnFunc = Callable[[str], None]


class PreprocessHandler(Protocol):
    """Callable transforming a document before template compilation."""

    def __call__(
        self,
        document: "Document",
        config: "SiteConfig",
        *,
        warn: WarnFunc | None = None,
    ) -> "Document":  # pragma: no cover - Protocol
        """Return the transformed document."""


@dataclass(slots=True, frozen=True)
class RenderedPage:
    """A page produced by the renderer, ready for an adapter to write."""

    route: str
    output_path: str
    html: str
    src_uri: str | None = None


@dataclass(slots=True, frozen=True)
class SiteBuild:
    """Everything an adapter needs to write the site."""

    pages: tuple[RenderedPage, ...]
    expected_routes: tuple[str, ...]
    fallback_html: str | None = None


@dataclass(slots=True)
class AdaptResult:
    """Outcome of an adapter run."""

    pages_dir: Path
    assets_dir: Path
    written: list[Path] = field(default_factory=list)


class AdapterHandler(Protocol):
    """Callable responsible for writing rendered pages to deployable files."""

    def __call__(
        self,
        build: SiteBuild,
        config: "SiteConfig",
        *,
        warn: WarnFunc | None = None,
    ) -> AdaptResult:  # pragma: no cover - Protocol
        """Write the build output and return where it went."""


@dataclass(slots=True, frozen=True)
class PreprocessorContribution:
    """Descriptor for a preprocessor provided by a plugin.

    An empty ``extensions`` tuple means the preprocessor applies to every
    extension the site accepts.
    """

    preprocessor_id: str
    handler: PreprocessHandler
    description: str
    extensions: tuple[str, ...] = ()

    def applies_to(self, extension: str) -> bool:
        if not self.extensions:
            return True
        return extension in self.extensions


@dataclass(slots=True, frozen=True)
class AdapterContribution:
    """Descriptor for an output adapter provided by a plugin."""

    adapter_id: str
    handler: AdapterHandler
    description: str


@dataclass(slots=True, frozen=True)
class BootstrapContext:
    """Data handed to plugins before a build starts."""

    config: "SiteConfig"
    get_settings: PluginSettingsGetter
