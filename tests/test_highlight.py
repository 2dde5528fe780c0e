from __future__ import annotations

import pytest
from staticmark.config import HighlightOptions
from staticmark.errors import HighlightError, UnsupportedLanguageError
from staticmark.highlight import (
    Highlighter,
    build_highlighter,
    escape_template,
    find_code_languages,
)


def test_highlight_produces_themed_markup() -> None:
    highlighter = Highlighter("monokai", ["python"])

    html = highlighter.highlight("def f():\n    return 1\n", "python")

    assert html.startswith('<div class="code-block" data-language="python">')
    assert 'class="highlight"' in html
    assert "<span style=" in html


def test_aliases_of_configured_languages_are_supported() -> None:
    highlighter = Highlighter("monokai", ["javascript", "c++", "typescript"])

    assert highlighter.supports("js")
    assert highlighter.supports("cpp")
    assert highlighter.supports("C++")
    assert highlighter.supports("ts")
    assert not highlighter.supports("python")
    assert highlighter.supports(None)


def test_unconfigured_language_raises() -> None:
    highlighter = Highlighter("monokai", ["python"])

    with pytest.raises(UnsupportedLanguageError) as exc_info:
        highlighter.highlight("fn main() {}", "rust")

    assert exc_info.value.lang == "rust"
    assert "python" in str(exc_info.value)


def test_block_without_language_is_escaped_plain_text() -> None:
    highlighter = Highlighter("monokai", ["python"])

    html = highlighter.highlight("<b>&</b>", None)

    assert 'data-language="text"' in html
    assert "&lt;b&gt;&amp;&lt;/b&gt;" in html


@pytest.mark.parametrize(
    ("theme", "languages"),
    [("no-such-theme", ["python"]), ("monokai", ["no-such-language"])],
)
def test_unknown_theme_or_language_fails_at_construction(
    theme: str, languages: list[str]
) -> None:
    with pytest.raises(HighlightError):
        Highlighter(theme, languages)


def test_build_highlighter_is_cached() -> None:
    options = HighlightOptions(theme="monokai", languages=("python",))

    assert build_highlighter(options) is build_highlighter(options)


def test_escape_template_hides_braces() -> None:
    escaped = escape_template("<code>{{ x }} {% y %} {# z #}</code>")

    assert "{" not in escaped
    assert "}" not in escaped
    assert escaped.startswith("<code>&#123;&#123; x &#125;&#125;")


def test_find_code_languages_ignores_fences_inside_blocks() -> None:
    text = (
        "```python\n"
        "print('x')\n"
        "```\n"
        "\n"
        "````markdown\n"
        "```rust\n"
        "```\n"
        "````\n"
        "\n"
        "~~~\n"
        "plain\n"
        "~~~\n"
        "```c++\n"
        "int x;\n"
        "```\n"
    )

    assert find_code_languages(text) == ["python", "markdown", "c++"]
