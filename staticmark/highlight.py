"""Pygments-backed syntax highlighting for fenced code blocks."""

from __future__ import annotations

import re
from functools import lru_cache
from html import escape
from typing import Iterable

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .config import HighlightOptions
from .documents import Document
from .errors import HighlightError, UnsupportedLanguageError

PLAIN_LANGUAGE = "text"
FENCED_BLOCK_RE = re.compile(
    r"""
    (?P<fence>^(?:~{3,}|`{3,}))[ ]*          # opening fence
    (?:\{?\.?(?P<lang>[\w#.+-]*)\}?)?[ ]*    # optional language
    \n
    (?P<code>.*?)(?<=\n)                     # the code block
    (?P=fence)[ ]*$                          # closing fence
    """,
    re.MULTILINE | re.DOTALL | re.VERBOSE,
)

# Component syntax the template compiler would otherwise evaluate.
_TEMPLATE_ESCAPES = {"{": "&#123;", "}": "&#125;"}


def escape_template(html: str) -> str:
    """Protect highlighted markup from the template compiler.

    Braces are replaced with their HTML character references, which render
    identically in the browser but cannot open a Jinja expression, statement
    or comment.
    """

    return "".join(_TEMPLATE_ESCAPES.get(ch, ch) for ch in html)


class Highlighter:
    """Convert code into themed markup using one fixed theme and language set.

    The style and every lexer are resolved once at construction; calling
    :meth:`highlight` never reconfigures anything.
    """

    def __init__(self, theme: str, languages: Iterable[str]) -> None:
        try:
            style = get_style_by_name(theme)
        except ClassNotFound as exc:
            raise HighlightError(f"Unknown highlight theme '{theme}'") from exc

        self.theme = theme
        self.languages = tuple(languages)
        self._lexers: dict[str, Lexer] = {}
        for name in self.languages:
            try:
                lexer = get_lexer_by_name(name, stripall=False, ensurenl=True)
            except ClassNotFound as exc:
                raise HighlightError(f"Unknown highlight language '{name}'") from exc
            self._lexers[name.lower()] = lexer
            for alias in lexer.aliases:
                self._lexers.setdefault(alias.lower(), lexer)

        self._plain_lexer = TextLexer()
        self._formatter = HtmlFormatter(
            style=style,
            noclasses=True,
            cssclass="highlight",
            wrapcode=True,
        )

    def supports(self, lang: str | None) -> bool:
        if not lang:
            return True
        return lang.lower() in self._lexers

    def highlight(self, code: str, lang: str | None) -> str:
        """Return themed HTML for ``code`` written in ``lang``.

        Raises
        ------
        UnsupportedLanguageError
            If ``lang`` is not one of the configured languages (or an alias).
        """

        if not lang:
            return self._render(code, self._plain_lexer, PLAIN_LANGUAGE)

        lexer = self._lexers.get(lang.lower())
        if lexer is None:
            raise UnsupportedLanguageError(lang, self.languages)
        return self._render(code, lexer, lang.lower())

    def plain(self, code: str, lang: str | None = None) -> str:
        """Render ``code`` without highlighting, in the themed wrapper."""

        return self._render(code, self._plain_lexer, (lang or PLAIN_LANGUAGE).lower())

    def _render(self, code: str, lexer: Lexer, lang: str) -> str:
        markup = pygments_highlight(code, lexer, self._formatter)
        return (
            f'<div class="code-block" data-language="{escape(lang)}">'
            f"{markup.strip()}</div>"
        )


@lru_cache(maxsize=8)
def _cached_highlighter(theme: str, languages: tuple[str, ...]) -> Highlighter:
    return Highlighter(theme, languages)


def build_highlighter(options: HighlightOptions) -> Highlighter:
    """Return the shared highlighter for ``options``."""

    return _cached_highlighter(options.theme, tuple(options.languages))


def reset_highlighter_cache() -> None:
    _cached_highlighter.cache_clear()


def fence_language(match: re.Match[str]) -> str | None:
    """Return the language tag of a :data:`FENCED_BLOCK_RE` match, if any."""

    return match.group("lang") or None


def find_code_languages(text: str) -> list[str]:
    """Return fence language tags used in ``text``, in order of appearance.

    Blocks are found with the same pattern the markdown preprocessor uses,
    so every tag listed here is one the build will try to highlight.
    """

    languages: list[str] = []
    for match in FENCED_BLOCK_RE.finditer(text):
        lang = fence_language(match)
        if lang is not None:
            languages.append(lang)
    return languages


def check_languages(
    documents: Iterable[Document], options: HighlightOptions
) -> list[tuple[str, str]]:
    """Return ``(src_uri, lang)`` pairs whose language is not configured."""

    highlighter = build_highlighter(options)
    missing: list[tuple[str, str]] = []
    for document in documents:
        for lang in find_code_languages(document.content):
            if not highlighter.supports(lang):
                missing.append((document.src_uri, lang))
    return missing


__all__ = [
    "FENCED_BLOCK_RE",
    "Highlighter",
    "build_highlighter",
    "check_languages",
    "escape_template",
    "fence_language",
    "find_code_languages",
    "reset_highlighter_cache",
]
