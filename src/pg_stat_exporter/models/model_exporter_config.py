# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Exporter Configuration Model."""

import os

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pg_stat_exporter.errors import ConfigurationError
from pg_stat_exporter.models.model_collector_settings import ModelCollectorSettings
from pg_stat_exporter.models.model_postgres_connection_config import (
    ModelPostgresConnectionConfig,
)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def parse_bool(name: str, value: str) -> bool:
    """Parse a boolean environment value.

    Raises:
        ConfigurationError: If the value is not a recognised boolean.
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Invalid boolean for {name}: expected one of "
        f"{', '.join(sorted(_TRUE_VALUES | _FALSE_VALUES - {''}))}",
        variable=name,
    )


def parse_collector_overrides(value: str) -> dict[str, bool]:
    """Parse a comma list of collector names into enable/disable overrides.

    ``name`` enables a collector, ``-name`` disables it.

    Example:
        >>> parse_collector_overrides("stat_statements, -database")
        {'stat_statements': True, 'database': False}
    """
    overrides: dict[str, bool] = {}
    for item in value.split(","):
        name = item.strip()
        if not name:
            continue
        if name.startswith("-"):
            overrides[name[1:]] = False
        else:
            overrides[name] = True
    return overrides


class ModelExporterConfig(BaseModel):
    """Top-level exporter configuration.

    Attributes:
        listen_port: Port serving /metrics
        scrape_interval: Seconds between scrape cycles
        scrape_timeout: Per-collector deadline for one cycle, seconds
        collector_overrides: Explicit enable (True) / disable (False) per collector
        collector_settings: Construction-time collector policy
        connection: Database connection and pool settings
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    listen_port: int = Field(default=9187, ge=0, le=65535)
    scrape_interval: float = Field(default=15.0, gt=0)
    scrape_timeout: float = Field(default=10.0, gt=0)
    collector_overrides: dict[str, bool] = Field(default_factory=dict)
    collector_settings: ModelCollectorSettings = Field(
        default_factory=ModelCollectorSettings
    )
    connection: ModelPostgresConnectionConfig = Field(
        default_factory=ModelPostgresConnectionConfig
    )

    @classmethod
    def from_environment(cls) -> "ModelExporterConfig":
        """Create configuration from PG_STAT_EXPORTER_* and POSTGRES_* variables.

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        reset_after_read = parse_bool(
            "PG_STAT_EXPORTER_RESET_AFTER_READ",
            os.getenv("PG_STAT_EXPORTER_RESET_AFTER_READ", "false"),
        )
        try:
            collector_settings = ModelCollectorSettings(
                reset_after_read=reset_after_read,
                statement_label=os.getenv("PG_STAT_EXPORTER_STATEMENT_LABEL", "query"),
            )
            return cls.model_validate(
                {
                    "listen_port": os.getenv("PG_STAT_EXPORTER_LISTEN_PORT", "9187"),
                    "scrape_interval": os.getenv(
                        "PG_STAT_EXPORTER_SCRAPE_INTERVAL", "15.0"
                    ),
                    "scrape_timeout": os.getenv(
                        "PG_STAT_EXPORTER_SCRAPE_TIMEOUT", "10.0"
                    ),
                    "collector_overrides": parse_collector_overrides(
                        os.getenv("PG_STAT_EXPORTER_COLLECTORS", "")
                    ),
                    "collector_settings": collector_settings,
                    "connection": ModelPostgresConnectionConfig.from_environment(),
                }
            )
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            raise ConfigurationError(
                f"Invalid exporter configuration: {', '.join(fields)}",
                invalid_fields=fields,
            ) from e


__all__ = [
    "ModelExporterConfig",
    "parse_bool",
    "parse_collector_overrides",
]
