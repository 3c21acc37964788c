# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""PostgreSQL Connection Configuration Model."""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

from pg_stat_exporter.errors import ConfigurationError


class ModelPostgresConnectionConfig(BaseModel):
    """PostgreSQL connection and pool configuration.

    When ``dsn`` is set it takes precedence over the discrete host, port,
    database, user and password fields.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    dsn: Optional[SecretStr] = Field(default=None)
    host: str = Field(default="localhost")
    port: int = Field(default=5432, ge=1, le=65535)
    database: str = Field(default="postgres")
    user: str = Field(default="postgres")
    password: SecretStr = Field(default=SecretStr(""))

    # Pool configuration
    min_connections: int = Field(default=1, ge=0)
    max_connections: int = Field(default=4, ge=1)
    command_timeout: float = Field(default=30.0, gt=0)

    ssl_mode: str = Field(default="prefer")

    @classmethod
    def from_environment(cls) -> "ModelPostgresConnectionConfig":
        """Create configuration from POSTGRES_* environment variables.

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        raw: dict[str, object] = {
            "host": os.getenv("POSTGRES_HOST", "localhost"),
            "port": os.getenv("POSTGRES_PORT", "5432"),
            "database": os.getenv("POSTGRES_DATABASE", "postgres"),
            "user": os.getenv("POSTGRES_USER", "postgres"),
            "password": os.getenv("POSTGRES_PASSWORD", ""),
            "min_connections": os.getenv("POSTGRES_MIN_CONNECTIONS", "1"),
            "max_connections": os.getenv("POSTGRES_MAX_CONNECTIONS", "4"),
            "command_timeout": os.getenv("POSTGRES_COMMAND_TIMEOUT", "30.0"),
            "ssl_mode": os.getenv("POSTGRES_SSL_MODE", "prefer"),
        }
        dsn = os.getenv("POSTGRES_DSN")
        if dsn:
            raw["dsn"] = dsn
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            # Field names only; the values may contain credentials
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            raise ConfigurationError(
                f"Invalid PostgreSQL configuration: {', '.join(fields)}",
                invalid_fields=fields,
            ) from e

    def to_pool_kwargs(self) -> dict[str, object]:
        """Build keyword arguments for asyncpg.create_pool."""
        kwargs: dict[str, object] = {
            "min_size": self.min_connections,
            "max_size": self.max_connections,
            "command_timeout": self.command_timeout,
        }
        if self.dsn is not None:
            kwargs["dsn"] = self.dsn.get_secret_value()
        else:
            kwargs.update(
                {
                    "host": self.host,
                    "port": self.port,
                    "database": self.database,
                    "user": self.user,
                    "password": self.password.get_secret_value(),
                }
            )
        if self.ssl_mode != "disable":
            kwargs["ssl"] = self.ssl_mode
        return kwargs


__all__ = ["ModelPostgresConnectionConfig"]
