"""Helpers for creating and working with the Staticmark plugin manager."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from functools import lru_cache
from typing import Iterable as TypingIterable
from typing import Tuple, TypeVar

import pluggy

from ..config import SiteConfig
from ._markers import ENTRY_POINT_GROUP, PLUGIN_NAMESPACE
from .spec import StaticmarkHookSpec
from .types import AdapterContribution, BootstrapContext, PreprocessorContribution

_Contribution = TypeVar("_Contribution", PreprocessorContribution, AdapterContribution)


class PluginRegistrationError(RuntimeError):
    """Raised when a plugin fails validation or registration."""


def create_plugin_manager(*, load_entry_points: bool = True) -> pluggy.PluginManager:
    """Instantiate a pluggy ``PluginManager`` configured for Staticmark."""

    manager = pluggy.PluginManager(PLUGIN_NAMESPACE)
    manager.add_hookspecs(StaticmarkHookSpec)

    if load_entry_points:
        load_plugin_entry_points(manager)

    return manager


def register_modules(
    manager: pluggy.PluginManager,
    modules: Sequence[object],
) -> None:
    """Register in-process plugin modules with the manager."""

    for module in modules:
        try:
            manager.register(module)
        except (pluggy.PluginValidationError, ValueError) as exc:
            raise PluginRegistrationError(str(exc)) from exc


def load_plugin_entry_points(
    manager: pluggy.PluginManager,
    *,
    group: str = ENTRY_POINT_GROUP,
) -> None:
    """Load plugin entry points via ``importlib.metadata`` integration."""

    manager.load_setuptools_entrypoints(group)


def iter_preprocessor_contributions(
    manager: pluggy.PluginManager, config: SiteConfig
) -> Iterator[PreprocessorContribution]:
    """Yield preprocessor contributions from all registered plugins."""

    # pluggy calls implementations last-registered first; keep registration order.
    for contributions in reversed(manager.hook.preprocessors(config=config)):
        if not contributions:
            continue
        yield from _ensure_iterable(contributions, PreprocessorContribution)


def iter_adapter_contributions(
    manager: pluggy.PluginManager, config: SiteConfig
) -> Iterator[AdapterContribution]:
    """Yield adapter contributions from all registered plugins."""

    for contributions in reversed(manager.hook.adapters(config=config)):
        if not contributions:
            continue
        yield from _ensure_iterable(contributions, AdapterContribution)


def run_bootstrap_hooks(
    manager: pluggy.PluginManager,
    context: BootstrapContext,
) -> list[Exception]:
    """Execute bootstrap hooks, collecting exceptions per plugin."""

    hook_caller = manager.hook.bootstrap
    hook_impls = list(hook_caller.get_hookimpls())
    if not hook_impls:
        return []

    plugins_in_order = [impl.plugin for impl in hook_impls]
    errors: list[Exception] = []

    for plugin in plugins_in_order:
        others = [p for p in plugins_in_order if p is not plugin]
        subset = manager.subset_hook_caller("bootstrap", others)
        try:
            subset(context=context)
        except Exception as exc:
            errors.append(exc)

    return errors


def iter_plugin_modules() -> Tuple[object, ...]:
    """Return plugin modules bundled with Staticmark."""

    return _builtin_plugin_modules()


@lru_cache(maxsize=1)
def _builtin_plugin_modules() -> Tuple[object, ...]:
    from .builtin import BUILTIN_PLUGINS

    return BUILTIN_PLUGINS


@lru_cache(maxsize=1)
def _build_plugin_manager() -> pluggy.PluginManager:
    manager = create_plugin_manager()
    register_modules(manager, iter_plugin_modules())
    return manager


def get_plugin_manager() -> pluggy.PluginManager:
    """Return the cached plugin manager instance."""

    return _build_plugin_manager()


def reset_plugin_manager_cache() -> None:
    """Clear cached plugin manager so future calls rebuild state."""

    _build_plugin_manager.cache_clear()
    _builtin_plugin_modules.cache_clear()


def load_preprocessor_contributions(
    config: SiteConfig,
) -> dict[str, PreprocessorContribution]:
    """Collect preprocessor contributions keyed by lower-cased id."""

    contributions = iter_preprocessor_contributions(get_plugin_manager(), config)
    return _index_by_id(
        contributions, lambda item: item.preprocessor_id, kind="preprocessor"
    )


def load_adapter_contributions(config: SiteConfig) -> dict[str, AdapterContribution]:
    """Collect adapter contributions keyed by lower-cased id."""

    contributions = iter_adapter_contributions(get_plugin_manager(), config)
    return _index_by_id(contributions, lambda item: item.adapter_id, kind="adapter")


def _index_by_id(
    contributions: TypingIterable[_Contribution],
    get_id: Callable[[_Contribution], str],
    *,
    kind: str,
) -> dict[str, _Contribution]:
    indexed: dict[str, _Contribution] = {}
    for contribution in contributions:
        key = get_id(contribution).lower()
        if key in indexed:
            raise PluginRegistrationError(
                f"Duplicate {kind} detected: '{get_id(contribution)}'."
            )
        indexed[key] = contribution
    return indexed


def run_bootstrap(context: BootstrapContext) -> list[Exception]:
    """Execute bootstrap hooks using the shared plugin manager."""

    manager = get_plugin_manager()
    return run_bootstrap_hooks(manager, context)


def _ensure_iterable(
    contributions: object,
    kind: type[_Contribution],
) -> TypingIterable[_Contribution]:
    """Normalize hook return values to a concrete iterable of contributions."""

    if isinstance(contributions, kind):
        return (contributions,)

    if not isinstance(contributions, Iterable) or isinstance(
        contributions, (str, bytes)
    ):
        raise PluginRegistrationError(
            "Plugin hook did not return an iterable contribution collection."
        )

    normalized: list[_Contribution] = []
    for item in contributions:
        if not isinstance(item, kind):
            raise PluginRegistrationError(
                f"Contributions must be {kind.__name__} instances."
            )
        normalized.append(item)
    return tuple(normalized)


__all__ = [
    "PluginRegistrationError",
    "create_plugin_manager",
    "get_plugin_manager",
    "iter_adapter_contributions",
    "iter_plugin_modules",
    "iter_preprocessor_contributions",
    "load_adapter_contributions",
    "load_plugin_entry_points",
    "load_preprocessor_contributions",
    "register_modules",
    "reset_plugin_manager_cache",
    "run_bootstrap",
    "run_bootstrap_hooks",
]
