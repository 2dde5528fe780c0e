from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from staticmark.highlight import reset_highlighter_cache
from staticmark.plugins import manager as plugin_manager

DEFAULT_CONFIG = """
[site]
title = "Test Blog"

[markdown.highlight]
languages = ["python", "javascript"]

[kit.paths]
base = "/blog"
"""


@pytest.fixture(autouse=True)
def reset_caches() -> None:
    """Ensure plugin discovery and highlighter caches are clean between tests."""

    plugin_manager.reset_plugin_manager_cache()
    reset_highlighter_cache()
    yield
    plugin_manager.reset_plugin_manager_cache()
    reset_highlighter_cache()


def write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
    return path


def write_config(base_dir: Path, content: str = DEFAULT_CONFIG) -> Path:
    return write_file(base_dir / "staticmark.toml", content)


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """A small site with a home page, a post and an HTML page."""

    write_config(tmp_path)
    routes = tmp_path / "src" / "routes"
    write_file(
        routes / "index.md",
        """
        ---
        title: Home
        ---

        # Welcome

        Read [the first post]({{ url('/posts/hello/') }}) or the
        [team]({{ url('/about/') }}#team).
        """,
    )
    write_file(
        routes / "posts" / "hello.md",
        """
        ---
        title: Hello
        tags: [intro]
        ---

        # Hello world

        ```python
        def greet(name):
            return {"name": name}
        ```

        Back [home]({{ url('/') }}#nowhere).
        """,
    )
    write_file(
        routes / "about.html",
        """
        ---
        title: About
        ---
        <h1 id="team">The {{ site.title }} team</h1>
        """,
    )
    write_file(routes / "_draft.md", "# Not published\n")
    return tmp_path
