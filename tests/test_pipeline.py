"""Tests for plugin-driven preprocessing."""

from __future__ import annotations

import types
from pathlib import Path

import pytest
from staticmark.config import SiteConfig, load_config
from staticmark.documents import Document
from staticmark.errors import PreprocessError
from staticmark.pipeline import build_pipeline
from staticmark.plugins import PreprocessorContribution, hookimpl
from staticmark.plugins import manager as plugin_manager

from .conftest import write_config


def _document(src_uri: str, content: str) -> Document:
    extension = Path(src_uri).suffix
    return Document(
        source_path=Path(src_uri),
        src_uri=src_uri,
        extension=extension,
        route="/",
        content=content,
    )


def _install_plugin(monkeypatch, module: types.ModuleType) -> None:
    original_iter = plugin_manager.iter_plugin_modules

    def _combined() -> tuple[object, ...]:
        return original_iter() + (module,)

    monkeypatch.setattr(plugin_manager, "iter_plugin_modules", _combined)
    plugin_manager.reset_plugin_manager_cache()


def _shout_plugin(extensions: tuple[str, ...] = (".md",)) -> types.ModuleType:
    module = types.ModuleType("staticmark_test_shout")

    @hookimpl
    def preprocessors(config: SiteConfig) -> tuple[PreprocessorContribution, ...]:
        def shout(document, config, *, warn=None):
            return Document(
                source_path=document.source_path,
                src_uri=document.src_uri,
                extension=document.extension,
                route=document.route,
                content=document.content.upper(),
                metadata={**document.metadata, "shouted": True},
            )

        return (
            PreprocessorContribution(
                preprocessor_id="shout",
                handler=shout,
                description="Upper-case everything",
                extensions=extensions,
            ),
        )

    module.preprocessors = preprocessors
    return module


def test_default_pipeline_order(tmp_path: Path) -> None:
    config = load_config(write_config(tmp_path, ""))

    pipeline = build_pipeline(config)

    assert pipeline.ids == ("frontmatter", "markdown")


def test_html_documents_skip_markdown(tmp_path: Path) -> None:
    config = load_config(write_config(tmp_path, ""))
    pipeline = build_pipeline(config)

    document = pipeline.run(
        _document("about.html", "---\ntitle: About\n---\n*not markdown*\n")
    )

    assert document.metadata == {"title": "About"}
    assert document.content == "*not markdown*\n"


def test_markdown_document_runs_every_step(tmp_path: Path) -> None:
    config = load_config(write_config(tmp_path, ""))
    pipeline = build_pipeline(config)

    source = "---\nlayout: post.html\n---\n# Hi\n"
    document = pipeline.run(_document("index.md", source))

    assert document.metadata == {"layout": "post.html", "title": "Hi"}
    assert document.layout == "post.html"
    assert "<h1" in document.content


def test_unknown_preprocessor_lists_available(tmp_path: Path) -> None:
    config = load_config(
        write_config(
            tmp_path,
            """
            [site]
            preprocess = ["frontmatter", "mdsvex"]
            """,
        )
    )

    with pytest.raises(PreprocessError) as excinfo:
        build_pipeline(config)

    message = str(excinfo.value)
    assert "Unknown preprocessor: mdsvex" in message
    assert "frontmatter, markdown" in message


def test_custom_preprocessor_runs_in_configured_order(
    tmp_path: Path, monkeypatch
) -> None:
    _install_plugin(monkeypatch, _shout_plugin())
    config = load_config(
        write_config(
            tmp_path,
            """
            [site]
            preprocess = ["frontmatter", "shout", "markdown"]
            """,
        )
    )

    pipeline = build_pipeline(config)
    markdown_doc = pipeline.run(_document("index.md", "---\ntitle: x\n---\nhello\n"))
    html_doc = pipeline.run(_document("about.html", "hello"))

    assert pipeline.ids == ("frontmatter", "shout", "markdown")
    assert markdown_doc.content == "<p>HELLO</p>"
    assert markdown_doc.metadata["shouted"] is True
    assert html_doc.content == "hello"


def test_duplicate_preprocessor_ids_are_rejected(tmp_path: Path, monkeypatch) -> None:
    module = types.ModuleType("staticmark_test_duplicate")

    @hookimpl
    def preprocessors(config: SiteConfig) -> tuple[PreprocessorContribution, ...]:
        return (
            PreprocessorContribution(
                preprocessor_id="Markdown",
                handler=lambda document, config, *, warn=None: document,
                description="Shadows the built-in",
            ),
        )

    module.preprocessors = preprocessors
    _install_plugin(monkeypatch, module)
    config = load_config(write_config(tmp_path, ""))

    with pytest.raises(PreprocessError, match="Duplicate preprocessor"):
        build_pipeline(config)


def test_unexpected_plugin_error_is_wrapped(tmp_path: Path, monkeypatch) -> None:
    module = types.ModuleType("staticmark_test_failing")

    @hookimpl
    def preprocessors(config: SiteConfig) -> tuple[PreprocessorContribution, ...]:
        def explode(document, config, *, warn=None):
            raise KeyError("boom")

        return (
            PreprocessorContribution(
                preprocessor_id="explode",
                handler=explode,
                description="Always fails",
            ),
        )

    module.preprocessors = preprocessors
    _install_plugin(monkeypatch, module)
    config = load_config(
        write_config(
            tmp_path,
            """
            [site]
            preprocess = ["explode"]
            """,
        )
    )
    pipeline = build_pipeline(config)

    with pytest.raises(PreprocessError) as excinfo:
        pipeline.run(_document("posts/a.md", "text"))

    assert "'explode'" in str(excinfo.value)
    assert "posts/a.md" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, KeyError)


def test_front_matter_error_names_step_and_file(tmp_path: Path) -> None:
    config = load_config(write_config(tmp_path, ""))
    pipeline = build_pipeline(config)

    with pytest.raises(PreprocessError, match="frontmatter failed on 'bad.md'"):
        pipeline.run(_document("bad.md", "---\n- a\n- list\n---\nbody\n"))
