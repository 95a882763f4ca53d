"""Runtime settings read from ``RIFTCHESS_*`` environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from riftchess.core.rifts import DEFAULT_MAX_ATTEMPTS

ENV_PREFIX = "RIFTCHESS_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """An environment variable holds an unusable value."""


@dataclass(frozen=True, slots=True)
class Settings:
    """Server and game settings."""

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    seed: int | None = None  # None → unseeded dice
    rift_attempts: int = DEFAULT_MAX_ATTEMPTS
    cors_origins: tuple[str, ...] = field(default=("*",))

    def __post_init__(self) -> None:
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level!r}")
        if not 0 < self.port < 65536:
            raise ConfigError(f"Port out of range: {self.port}")
        if self.rift_attempts < 1:
            raise ConfigError("Rift attempts must be positive")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        def get(name: str) -> str | None:
            raw = env.get(ENV_PREFIX + name)
            return raw.strip() if raw is not None and raw.strip() else None

        if (host := get("HOST")) is not None:
            values["host"] = host
        if (port := get("PORT")) is not None:
            values["port"] = _to_int("PORT", port)
        if (level := get("LOG_LEVEL")) is not None:
            values["log_level"] = level.upper()
        if (seed := get("SEED")) is not None:
            values["seed"] = _to_int("SEED", seed)
        if (attempts := get("RIFT_ATTEMPTS")) is not None:
            values["rift_attempts"] = _to_int("RIFT_ATTEMPTS", attempts)
        if (origins := get("CORS_ORIGINS")) is not None:
            values["cors_origins"] = tuple(
                o.strip() for o in origins.split(",") if o.strip()
            )
        return cls(**values)

    def override(self, **changes: Any) -> Settings:
        """Copy with every non-``None`` value of *changes* applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _to_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None
