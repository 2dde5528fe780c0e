"""Python-Markdown extensions for highlighted fences and template components."""

from __future__ import annotations

import re
from typing import Callable

from markdown import Markdown
from markdown.extensions import Extension
from markdown.postprocessors import Postprocessor
from markdown.preprocessors import Preprocessor

from staticmark.highlight import FENCED_BLOCK_RE, escape_template, fence_language

HighlightCallback = Callable[[str, "str | None"], str]

CODE_SPAN_RE = r"(?<!`)(?P<ticks>`+)(?!`)(?:(?!\n\s*\n).)+?(?<!`)(?P=ticks)(?!`)"
MATH_SPAN_RE = r"(?<!\\)\$\$.+?\$\$|(?<![\\$])\$(?!\s)[^$\n]+?(?<!\s)\$"
COMPONENT_RE = r"(?P<component>\{\{.*?\}\}|\{%.*?%\}|\{#.*?#\})"


def _component_pattern(*, skip_math: bool) -> re.Pattern[str]:
    skipped = [CODE_SPAN_RE, MATH_SPAN_RE] if skip_math else [CODE_SPAN_RE]
    return re.compile("|".join([*skipped, COMPONENT_RE]), re.DOTALL)


# One statement or comment filling the whole paragraph, never spanning two.
LONE_STATEMENT_RE = re.compile(
    r"<p>\s*(\{%(?:(?!%\}|</p>).)*%\}|\{#(?:(?!#\}|</p>).)*#\})\s*</p>", re.DOTALL
)
LITERAL_TEXT_RE = re.compile(
    r"(?P<open><code(?:\s[^>]*)?>|<(?P<tag>span|div) class=\"arithmatex\">)"
    r"(?P<body>.*?)"
    r"(?P<close></code>|</(?P=tag)>)",
    re.DOTALL,
)


class HighlightedFencePreprocessor(Preprocessor):
    """Replace fenced code blocks with the markup returned by a callback."""

    def __init__(self, md: Markdown, highlight: HighlightCallback) -> None:
        super().__init__(md)
        self.highlight = highlight

    def run(self, lines: list[str]) -> list[str]:
        def _replace(match: re.Match[str]) -> str:
            markup = self.highlight(match.group("code"), fence_language(match))
            return f"\n{self.md.htmlStash.store(markup)}\n"

        return FENCED_BLOCK_RE.sub(_replace, "\n".join(lines)).split("\n")


class ComponentPreprocessor(Preprocessor):
    """Stash template syntax so Markdown leaves it untouched.

    Code spans (and math spans when math is enabled) are skipped, their
    braces are escaped later instead.
    """

    def __init__(self, md: Markdown, *, skip_math: bool = False) -> None:
        super().__init__(md)
        self.pattern = _component_pattern(skip_math=skip_math)

    def run(self, lines: list[str]) -> list[str]:
        text = "\n".join(lines)

        def _stash(match: re.Match[str]) -> str:
            component = match.group("component")
            if component is None:
                return match.group(0)
            return self.md.htmlStash.store(component)

        return self.pattern.sub(_stash, text).split("\n")


class LiteralTextPostprocessor(Postprocessor):
    """Escape braces in inline code and math so templates never evaluate them."""

    def run(self, text: str) -> str:
        def _escape(match: re.Match[str]) -> str:
            return (
                match.group("open")
                + escape_template(match.group("body"))
                + match.group("close")
            )

        return LITERAL_TEXT_RE.sub(_escape, text)


class LoneStatementPostprocessor(Postprocessor):
    """Drop the paragraph Markdown wraps around a statement on its own line."""

    def run(self, text: str) -> str:
        return LONE_STATEMENT_RE.sub(r"\1", text)


class HighlightExtension(Extension):
    def __init__(self, highlight: HighlightCallback, **kwargs) -> None:
        self.highlight = highlight
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:
        md.registerExtension(self)
        # Before the stock fenced_code preprocessor (25) if it is also enabled.
        md.preprocessors.register(
            HighlightedFencePreprocessor(md, self.highlight),
            "highlighted_fence",
            priority=27,
        )


class ComponentExtension(Extension):
    def __init__(self, **kwargs) -> None:
        self.config = {"math": [False, "Leave $...$ math spans alone"]}
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:
        md.registerExtension(self)
        md.preprocessors.register(
            ComponentPreprocessor(md, skip_math=bool(self.getConfig("math"))),
            "components",
            priority=26,
        )
        # Runs after raw HTML is restored (30) so stashed math is covered too.
        md.postprocessors.register(
            LiteralTextPostprocessor(md), "literal_text", priority=25
        )
        md.postprocessors.register(
            LoneStatementPostprocessor(md), "lone_statements", priority=24
        )


__all__ = [
    "ComponentExtension",
    "HighlightExtension",
]
