"""Hook specifications for Staticmark plugins."""

from __future__ import annotations

from collections.abc import Iterable

from staticmark.config import SiteConfig

from ._markers import hookspec
from .types import AdapterContribution, BootstrapContext, PreprocessorContribution


class StaticmarkHookSpec:
    """Collection of pluggy hook specifications."""

    @hookspec
    def bootstrap(self, context: BootstrapContext) -> None:
        """Prepare plugin state from the site configuration before a build."""

    @hookspec
    def preprocessors(
        self, config: SiteConfig
    ) -> Iterable[PreprocessorContribution]:
        """Return document preprocessors provided by the plugin."""

    @hookspec
    def adapters(self, config: SiteConfig) -> Iterable[AdapterContribution]:
        """Return output adapters provided by the plugin."""
