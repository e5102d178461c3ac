"""
Service container.

A small dependency container used to share application services (settings,
hook manager, extension manager, configuration manager, router) between the
router, controllers and extensions. Services are keyed by any hashable value,
usually the service class or a short string alias.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

from .errors import ServiceNotFoundError

ServiceFactory = Callable[["Container"], Any]
"""
ServiceFactory:
    A callable that receives the container and returns the service instance.
"""


@dataclass
class _Binding:
    factory: ServiceFactory
    shared: bool


class Container:
    """
    Registry of service factories and shared instances.

    Shared bindings are built once on first ``get`` and cached; non-shared
    bindings are rebuilt on every ``get``. ``make`` always runs the factory
    when one is registered.
    """

    def __init__(self) -> None:
        self._bindings: Dict[Hashable, _Binding] = {}
        self._instances: Dict[Hashable, Any] = {}
        self._aliases: Dict[Hashable, Hashable] = {}

    def bind(self, key: Hashable, factory: Optional[ServiceFactory] = None, shared: bool = False) -> None:
        """
        Register a factory for a service key.

        Args:
            key: The service key.
            factory: Callable receiving the container. When omitted, ``key``
                must be a class and is instantiated with the container.
            shared: Whether the built instance is cached.
        """
        if factory is None:
            if not isinstance(key, type):
                raise TypeError(f"A factory is required for non-class key {key!r}")
            cls = key
            factory = lambda container: cls(container)  # noqa: E731
        self._instances.pop(key, None)
        self._bindings[key] = _Binding(factory=factory, shared=shared)

    def singleton(self, key: Hashable, factory: Optional[ServiceFactory] = None) -> None:
        self.bind(key, factory, shared=True)

    def instance(self, key: Hashable, value: Any) -> Any:
        """Register an already built service instance."""
        self._instances[key] = value
        return value

    def alias(self, key: Hashable, alias: Hashable) -> None:
        self._aliases[alias] = key

    def _resolve_key(self, key: Hashable) -> Hashable:
        seen = set()
        while key in self._aliases and key not in seen:
            seen.add(key)
            key = self._aliases[key]
        return key

    def has(self, key: Hashable) -> bool:
        key = self._resolve_key(key)
        return key in self._instances or key in self._bindings

    def get(self, key: Hashable) -> Any:
        """
        Resolve a service.

        Args:
            key: The service key or one of its aliases.

        Returns:
            The service instance.

        Raises:
            ServiceNotFoundError: If nothing is bound for the key.
        """
        key = self._resolve_key(key)
        if key in self._instances:
            return self._instances[key]
        binding = self._bindings.get(key)
        if binding is None:
            raise ServiceNotFoundError(key)
        value = binding.factory(self)
        if binding.shared:
            self._instances[key] = value
        return value

    def make(self, key: Hashable) -> Any:
        """Build a fresh instance, ignoring any cached shared instance."""
        key = self._resolve_key(key)
        binding = self._bindings.get(key)
        if binding is None:
            return self.get(key)
        return binding.factory(self)
