"""
Hook Manager.

Manages hooks for the extension system, allowing extensions to register
callbacks that are executed at named points in the application.

Callbacks run in ascending priority order (lower numbers first); callbacks
registered with the same priority run in registration order. A callback
that raises is logged and skipped, the remaining callbacks still run.

Hooks fired from synchronous code (``run``, ``run_first``, ``run_last``)
only call plain callbacks; a coroutine returned there is closed and logged.
Hooks fired from async code use ``run_async``, which awaits coroutine
callbacks. The built-in hooks fire as follows:

    run_async   BeforeRequest, AfterResponse, ConfigurationChanged, RoutesRegister
    run         ExtensionLoaded, ExtensionDisabled
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Callable, Dict, List

from islamwiki.core.logging_config import get_logger

logger = get_logger(__name__)

HookCallback = Callable[..., Any]

DEFAULT_PRIORITY = 10


@dataclass(order=True)
class _RegisteredHook:
    priority: int
    sequence: int
    callback: HookCallback = field(compare=False)


class HookManager:
    """Registry of prioritized callbacks keyed by hook name."""

    def __init__(self) -> None:
        self._hooks: Dict[str, List[_RegisteredHook]] = {}
        self._sequence = count()

    def register(self, hook_name: str, callback: HookCallback, priority: int = DEFAULT_PRIORITY) -> None:
        """
        Register a callback for a hook.

        Args:
            hook_name: The name of the hook
            callback: The callback to invoke when the hook runs
            priority: Lower numbers run first
        """
        entries = self._hooks.setdefault(hook_name, [])
        entries.append(_RegisteredHook(priority, next(self._sequence), callback))
        entries.sort()

    def unregister(self, hook_name: str, callback: HookCallback) -> bool:
        """
        Remove every registration of ``callback`` from a hook.

        Returns:
            True if at least one registration was removed
        """
        entries = self._hooks.get(hook_name)
        if not entries:
            return False
        remaining = [entry for entry in entries if entry.callback != callback]
        removed = len(remaining) != len(entries)
        if remaining:
            self._hooks[hook_name] = remaining
        else:
            del self._hooks[hook_name]
        return removed

    def _call(self, hook_name: str, entry: _RegisteredHook, args: tuple, kwargs: dict) -> Any:
        try:
            return entry.callback(*args, **kwargs)
        except Exception as e:
            logger.error(f"Hook error in {hook_name}: {e}", exc_info=True)
            return None

    def _call_sync(self, hook_name: str, entry: _RegisteredHook, args: tuple, kwargs: dict) -> Any:
        result = self._call(hook_name, entry, args, kwargs)
        if inspect.iscoroutine(result):
            result.close()
            logger.warning(f"Async callback for {hook_name} was not awaited; fire the hook with run_async")
            return None
        return result

    def run(self, hook_name: str, *args: Any, **kwargs: Any) -> List[Any]:
        """
        Run every callback of a hook.

        Args:
            hook_name: The name of the hook
            *args: Positional arguments passed to each callback
            **kwargs: Keyword arguments passed to each callback

        Returns:
            The non-None results in execution order
        """
        results = []
        for entry in list(self._hooks.get(hook_name, [])):
            result = self._call_sync(hook_name, entry, args, kwargs)
            if result is not None:
                results.append(result)
        return results

    def run_first(self, hook_name: str, *args: Any, **kwargs: Any) -> Any:
        """Run callbacks until one returns a non-None result and return it."""
        for entry in list(self._hooks.get(hook_name, [])):
            result = self._call_sync(hook_name, entry, args, kwargs)
            if result is not None:
                return result
        return None

    def run_last(self, hook_name: str, *args: Any, **kwargs: Any) -> Any:
        """Run every callback and return the last non-None result."""
        last_result = None
        for entry in list(self._hooks.get(hook_name, [])):
            result = self._call_sync(hook_name, entry, args, kwargs)
            if result is not None:
                last_result = result
        return last_result

    async def run_async(self, hook_name: str, *args: Any, **kwargs: Any) -> List[Any]:
        """
        Run every callback of a hook, awaiting coroutine callbacks.

        Errors raised while awaiting are logged like synchronous errors.

        Returns:
            The non-None results in execution order
        """
        results = []
        for entry in list(self._hooks.get(hook_name, [])):
            result = self._call(hook_name, entry, args, kwargs)
            if inspect.isawaitable(result):
                try:
                    result = await result
                except Exception as e:
                    logger.error(f"Hook error in {hook_name}: {e}", exc_info=True)
                    result = None
            if result is not None:
                results.append(result)
        return results

    def has_hook(self, hook_name: str) -> bool:
        return bool(self._hooks.get(hook_name))

    def get_hooks(self) -> List[str]:
        return list(self._hooks.keys())

    def get_hook_callbacks(self, hook_name: str) -> List[HookCallback]:
        return [entry.callback for entry in self._hooks.get(hook_name, [])]

    def clear_hook(self, hook_name: str) -> None:
        self._hooks.pop(hook_name, None)

    def clear_all_hooks(self) -> None:
        self._hooks = {}

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about registered hooks.

        Returns:
            ``total_hooks``, ``total_callbacks`` and per-hook callback counts
            and priorities
        """
        stats: Dict[str, Any] = {"total_hooks": len(self._hooks), "total_callbacks": 0, "hooks": {}}
        for hook_name, entries in self._hooks.items():
            stats["total_callbacks"] += len(entries)
            stats["hooks"][hook_name] = {
                "callbacks": len(entries),
                "priorities": [entry.priority for entry in entries],
            }
        return stats

