# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for CollectorRegistry and the builtin registration hook."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock

import pytest

from pg_stat_exporter.collectors import (
    CollectorRegistry,
    StatStatementsCollector,
    get_collector_registry,
    register_builtin_collectors,
)
from pg_stat_exporter.errors import RegistryError
from pg_stat_exporter.models import ModelCollectorSettings


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


class TestCollectorRegistryRegistration:
    """Tests for register / get / unregister."""

    def test_register_and_get(self, registry: CollectorRegistry) -> None:
        factory = MagicMock()

        registry.register("database", True, factory)

        registration = registry.get("database")
        assert registration.name == "database"
        assert registration.default_enabled is True
        assert registration.factory is factory

    def test_register_empty_name_raises(self, registry: CollectorRegistry) -> None:
        with pytest.raises(RegistryError):
            registry.register("", True, MagicMock())

    def test_get_unknown_raises_with_registered_names(
        self, registry: CollectorRegistry
    ) -> None:
        registry.register("database", True, MagicMock())

        with pytest.raises(RegistryError) as exc_info:
            registry.get("missing")

        assert exc_info.value.context["collector_name"] == "missing"
        assert exc_info.value.context["registered_collectors"] == ["database"]

    def test_register_same_name_overwrites(self, registry: CollectorRegistry) -> None:
        registry.register("database", True, MagicMock())
        registry.register("database", False, MagicMock())

        assert len(registry) == 1
        assert registry.get("database").default_enabled is False

    def test_list_names_sorted(self, registry: CollectorRegistry) -> None:
        registry.register("zeta", True, MagicMock())
        registry.register("alpha", True, MagicMock())

        assert registry.list_names() == ["alpha", "zeta"]

    def test_unregister(self, registry: CollectorRegistry) -> None:
        registry.register("database", True, MagicMock())

        assert registry.unregister("database") is True
        assert registry.unregister("database") is False
        assert "database" not in registry

    def test_clear(self, registry: CollectorRegistry) -> None:
        registry.register("database", True, MagicMock())

        registry.clear()

        assert len(registry) == 0

    def test_concurrent_registration(self, registry: CollectorRegistry) -> None:
        def register_many(prefix: str) -> None:
            for i in range(100):
                registry.register(f"{prefix}_{i}", False, MagicMock())

        threads = [
            threading.Thread(target=register_many, args=(f"t{n}",)) for n in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(registry) == 400


class TestCollectorRegistryEnablement:
    """Tests for resolve_enabled and create_enabled."""

    def test_defaults_apply_without_overrides(self, registry: CollectorRegistry) -> None:
        registry.register("database", True, MagicMock())
        registry.register("stat_statements", False, MagicMock())

        assert registry.resolve_enabled() == {
            "database": True,
            "stat_statements": False,
        }

    def test_overrides_win_over_defaults(self, registry: CollectorRegistry) -> None:
        registry.register("database", True, MagicMock())
        registry.register("stat_statements", False, MagicMock())

        enabled = registry.resolve_enabled({"database": False, "stat_statements": True})

        assert enabled == {"database": False, "stat_statements": True}

    def test_unknown_override_raises(self, registry: CollectorRegistry) -> None:
        registry.register("database", True, MagicMock())

        with pytest.raises(RegistryError) as exc_info:
            registry.resolve_enabled({"typo": True})

        assert exc_info.value.context["unknown_collectors"] == ["typo"]

    def test_create_enabled_only_builds_enabled(
        self, registry: CollectorRegistry
    ) -> None:
        enabled_factory = MagicMock(return_value="enabled-collector")
        disabled_factory = MagicMock()
        registry.register("database", True, enabled_factory)
        registry.register("stat_statements", False, disabled_factory)
        settings = ModelCollectorSettings()

        collectors = registry.create_enabled(settings)

        assert collectors == ["enabled-collector"]
        enabled_factory.assert_called_once_with(settings)
        disabled_factory.assert_not_called()


class TestBuiltinCollectors:
    """Tests for the builtin registration hook and the process registry."""

    def test_register_builtin_collectors(self, registry: CollectorRegistry) -> None:
        register_builtin_collectors(registry)

        assert registry.list_names() == ["stat_statements"]
        assert registry.resolve_enabled() == {"stat_statements": False}

    def test_register_builtin_collectors_is_idempotent(
        self, registry: CollectorRegistry
    ) -> None:
        register_builtin_collectors(registry)
        register_builtin_collectors(registry)

        assert len(registry) == 1

    def test_enabled_stat_statements_uses_settings(
        self, registry: CollectorRegistry
    ) -> None:
        register_builtin_collectors(registry)

        [collector] = registry.create_enabled(
            ModelCollectorSettings(reset_after_read=True),
            overrides={"stat_statements": True},
        )

        assert isinstance(collector, StatStatementsCollector)
        assert collector.reset_after_read is True

    def test_get_collector_registry_is_singleton(self) -> None:
        assert get_collector_registry() is get_collector_registry()
