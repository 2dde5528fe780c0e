"""Ordered preprocessing of source documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import SiteConfig
from .documents import Document
from .errors import BuildError, PreprocessError
from .plugins import (
    PluginRegistrationError,
    PreprocessorContribution,
    WarnFunc,
    load_preprocessor_contributions,
)

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Pipeline:
    """Preprocessors resolved in the configured order."""

    config: SiteConfig
    steps: tuple[PreprocessorContribution, ...]

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(step.preprocessor_id for step in self.steps)

    def run(self, document: Document, *, warn: WarnFunc | None = None) -> Document:
        """Apply each preprocessor that handles the document's extension."""

        current = document
        for step in self.steps:
            if not step.applies_to(current.extension):
                continue
            log.debug("Running %s on %s", step.preprocessor_id, current.src_uri)
            try:
                current = step.handler(current, self.config, warn=warn)
            except BuildError as exc:
                raise PreprocessError(
                    f"{step.preprocessor_id} failed on '{document.src_uri}': {exc}"
                ) from exc
            except Exception as exc:
                raise PreprocessError(
                    f"Preprocessor '{step.preprocessor_id}' raised an unexpected "
                    f"error on '{document.src_uri}': {exc}"
                ) from exc
        return current


def available_preprocessors(config: SiteConfig) -> dict[str, PreprocessorContribution]:
    try:
        return load_preprocessor_contributions(config)
    except PluginRegistrationError as exc:
        raise PreprocessError(str(exc)) from exc


def build_pipeline(config: SiteConfig) -> Pipeline:
    """Resolve ``config.preprocess`` into a :class:`Pipeline`.

    Raises
    ------
    PreprocessError
        If a configured preprocessor id is not provided by any plugin.
    """

    contributions = available_preprocessors(config)

    steps: list[PreprocessorContribution] = []
    for preprocessor_id in config.preprocess:
        contribution = contributions.get(preprocessor_id.lower())
        if contribution is None:
            available = ", ".join(sorted(contributions))
            if available:
                raise PreprocessError(
                    f"Unknown preprocessor: {preprocessor_id}. Available: {available}."
                )
            raise PreprocessError("No preprocessor plugins are available.")
        steps.append(contribution)

    return Pipeline(config=config, steps=tuple(steps))


__all__ = ["Pipeline", "available_preprocessors", "build_pipeline"]
