"""Built-in markdown preprocessor plugin for Staticmark."""

from __future__ import annotations

from .converter import (
    MATH_EXTENSION,
    PREPROCESSOR_ID,
    build_markdown,
    convert_markdown,
    preprocess_markdown,
)
from .plugin import PLUGIN_ID, bootstrap, preprocessors

__all__ = [
    "MATH_EXTENSION",
    "PLUGIN_ID",
    "PREPROCESSOR_ID",
    "bootstrap",
    "build_markdown",
    "convert_markdown",
    "preprocess_markdown",
    "preprocessors",
]
