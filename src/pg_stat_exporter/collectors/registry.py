# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Collector Registry - explicit collector registration and enablement.

Collectors are registered by name together with their default enablement
and a factory taking ``ModelCollectorSettings``. Registration is explicit:
``register_builtin_collectors`` is called once during process start instead
of relying on import-time side effects.

Example Usage:
    ```python
    from pg_stat_exporter.collectors.registry import (
        get_collector_registry,
        register_builtin_collectors,
    )

    registry = get_collector_registry()
    register_builtin_collectors(registry)

    collectors = registry.create_enabled(
        ModelCollectorSettings(reset_after_read=True),
        overrides={"stat_statements": True},
    )
    ```
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pg_stat_exporter.collectors.stat_statements import (
    register_stat_statements_collector,
)
from pg_stat_exporter.errors import RegistryError

if TYPE_CHECKING:
    from pg_stat_exporter.models import ModelCollectorSettings
    from pg_stat_exporter.protocols import ProtocolCollector

CollectorFactory = Callable[["ModelCollectorSettings"], "ProtocolCollector"]


@dataclass(frozen=True)
class ModelCollectorRegistration:
    """A registered collector: name, default enablement and factory."""

    name: str
    default_enabled: bool
    factory: CollectorFactory


class CollectorRegistry:
    """Thread-safe registry of collector factories.

    Registering an existing name overwrites the previous registration, so
    calling ``register_builtin_collectors`` twice is harmless.

    Example:
        >>> registry = CollectorRegistry()
        >>> registry.register("stat_statements", False, create_stat_statements_collector)
        >>> registry.list_names()
        ['stat_statements']
        >>> registry.resolve_enabled({"stat_statements": True})
        {'stat_statements': True}
    """

    def __init__(self) -> None:
        self._registry: dict[str, ModelCollectorRegistration] = {}
        self._lock: threading.Lock = threading.Lock()

    def register(
        self,
        name: str,
        default_enabled: bool,
        factory: CollectorFactory,
    ) -> None:
        """Register a collector factory under ``name``.

        Raises:
            RegistryError: If the name is empty.
        """
        if not name:
            raise RegistryError("Collector name must be a non-empty string")
        with self._lock:
            self._registry[name] = ModelCollectorRegistration(
                name=name, default_enabled=default_enabled, factory=factory
            )

    def get(self, name: str) -> ModelCollectorRegistration:
        """Get the registration for ``name``.

        Raises:
            RegistryError: If no collector is registered under ``name``.
        """
        with self._lock:
            registration = self._registry.get(name)

        if registration is None:
            registered = self.list_names()
            raise RegistryError(
                f"No collector registered with name: {name!r}. "
                f"Registered collectors: {registered}",
                collector_name=name,
                registered_collectors=registered,
            )
        return registration

    def list_names(self) -> list[str]:
        """List registered collector names, sorted alphabetically."""
        with self._lock:
            return sorted(self._registry.keys())

    def is_registered(self, name: str) -> bool:
        with self._lock:
            return name in self._registry

    def unregister(self, name: str) -> bool:
        """Remove a registration. Returns False if it was not registered."""
        with self._lock:
            if name in self._registry:
                del self._registry[name]
                return True
            return False

    def clear(self) -> None:
        with self._lock:
            self._registry.clear()

    def resolve_enabled(
        self, overrides: Mapping[str, bool] | None = None
    ) -> dict[str, bool]:
        """Resolve effective enablement for every registered collector.

        Args:
            overrides: Explicit enable (True) / disable (False) per name.

        Returns:
            Mapping of collector name to effective enablement, in name order.

        Raises:
            RegistryError: If an override names an unregistered collector.
        """
        overrides = overrides or {}
        with self._lock:
            registrations = dict(self._registry)

        unknown = sorted(set(overrides) - set(registrations))
        if unknown:
            raise RegistryError(
                f"Unknown collector(s) in overrides: {', '.join(unknown)}. "
                f"Registered collectors: {sorted(registrations)}",
                unknown_collectors=unknown,
            )

        return {
            name: overrides.get(name, registrations[name].default_enabled)
            for name in sorted(registrations)
        }

    def create_enabled(
        self,
        settings: ModelCollectorSettings,
        overrides: Mapping[str, bool] | None = None,
    ) -> list[ProtocolCollector]:
        """Instantiate every enabled collector with ``settings``."""
        enabled = self.resolve_enabled(overrides)
        return [
            self.get(name).factory(settings)
            for name, is_enabled in enabled.items()
            if is_enabled
        ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._registry)

    def __contains__(self, name: str) -> bool:
        return self.is_registered(name)


def register_builtin_collectors(registry: CollectorRegistry) -> None:
    """Registration hook for the collectors shipped with this package."""
    register_stat_statements_collector(registry)


# Module-level singleton (lazy initialized)
_collector_registry: CollectorRegistry | None = None
_singleton_lock: threading.Lock = threading.Lock()


def get_collector_registry() -> CollectorRegistry:
    """Get the process-wide collector registry."""
    global _collector_registry  # noqa: PLW0603
    if _collector_registry is None:
        with _singleton_lock:
            # Double-check locking pattern
            if _collector_registry is None:
                _collector_registry = CollectorRegistry()
    return _collector_registry


__all__ = [
    "CollectorFactory",
    "CollectorRegistry",
    "ModelCollectorRegistration",
    "get_collector_registry",
    "register_builtin_collectors",
]
