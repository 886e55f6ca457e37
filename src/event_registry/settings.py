from __future__ import annotations

import os
from dataclasses import dataclass, asdict

from dotenv import load_dotenv

ERROR_POLICIES = ("propagate", "isolate")

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass
class RegistrySettings:
    """Runtime knobs for an EventRegistry instance."""

    history_enabled: bool = True
    history_limit: int = 1000  # <= 0 keeps every entry
    error_policy: str = "propagate"  # or "isolate"
    log_level: str = "INFO"

    def __post_init__(self):
        if self.error_policy not in ERROR_POLICIES:
            raise ValueError(f"error_policy must be one of {ERROR_POLICIES}, got {self.error_policy!r}")
        self.log_level = self.log_level.strip().upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {self.log_level!r}")

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_env(cls, env_file: str | None = ".env") -> "RegistrySettings":
        """Build settings from EVENT_REGISTRY_* variables.

        A dotenv file is loaded first when present; variables already set in
        the process environment win.
        """
        if env_file:
            load_dotenv(env_file, override=False)

        defaults = cls()
        history = os.getenv("EVENT_REGISTRY_HISTORY")
        limit = os.getenv("EVENT_REGISTRY_HISTORY_LIMIT")
        try:
            history_limit = int(limit) if limit else defaults.history_limit
        except ValueError:
            raise ValueError(f"EVENT_REGISTRY_HISTORY_LIMIT must be an integer, got {limit!r}") from None

        return cls(
            history_enabled=_parse_bool("EVENT_REGISTRY_HISTORY", history) if history else defaults.history_enabled,
            history_limit=history_limit,
            error_policy=os.getenv("EVENT_REGISTRY_ERROR_POLICY", defaults.error_policy).strip().lower(),
            log_level=os.getenv("EVENT_REGISTRY_LOG_LEVEL", defaults.log_level),
        )
