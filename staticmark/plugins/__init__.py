"""Staticmark plugin infrastructure based on pluggy."""

from __future__ import annotations

from ._markers import ENTRY_POINT_GROUP, PLUGIN_NAMESPACE, hookimpl, hookspec
from .config import build_settings_getter
from .manager import (
    PluginRegistrationError,
    get_plugin_manager,
    load_adapter_contributions,
    load_preprocessor_contributions,
    reset_plugin_manager_cache,
    run_bootstrap,
)
from .types import (
    AdapterContribution,
    AdaptResult,
    BootstrapContext,
    PreprocessorContribution,
    RenderedPage,
    SiteBuild,
    WarnFunc,
)

__all__ = [
    "AdaptResult",
    "AdapterContribution",
    "BootstrapContext",
    "ENTRY_POINT_GROUP",
    "PLUGIN_NAMESPACE",
    "PluginRegistrationError",
    "PreprocessorContribution",
    "RenderedPage",
    "SiteBuild",
    "WarnFunc",
    "build_settings_getter",
    "get_plugin_manager",
    "hookimpl",
    "hookspec",
    "load_adapter_contributions",
    "load_preprocessor_contributions",
    "reset_plugin_manager_cache",
    "run_bootstrap",
]
