"""Staticmark build error types."""

from __future__ import annotations


class BuildError(RuntimeError):
    """Base error for failures while building the site."""


class DocumentError(BuildError):
    """Raised when source documents cannot be collected."""


class PreprocessError(BuildError):
    """Raised when a preprocessor fails or is unknown."""


class HighlightError(BuildError):
    """Raised when the highlighter cannot be configured or used."""


class UnsupportedLanguageError(HighlightError):
    """Raised when a code block uses a language outside the configured list."""

    def __init__(self, lang: str, supported: tuple[str, ...]) -> None:
        available = ", ".join(supported) or "(none)"
        super().__init__(
            f"Language '{lang}' is not configured for highlighting. "
            f"Configured: {available}."
        )
        self.lang = lang


class RenderError(BuildError):
    """Raised when compiling or rendering a page template fails."""


class PrerenderError(BuildError):
    """Raised when prerender checks fail under the 'fail' policy."""


class AdapterError(BuildError):
    """Raised when an adapter cannot write the build output."""


__all__ = [
    "AdapterError",
    "BuildError",
    "DocumentError",
    "HighlightError",
    "PrerenderError",
    "PreprocessError",
    "RenderError",
    "UnsupportedLanguageError",
]
