"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from .errors import ConfigError


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class StorageConfig(BaseModel):
    data_dir: str = "data"
    ledger_file: str = "trades.json"
    snapshot_dir: str = "snapshots"  # Relative to data_dir
    cooldown_file: str = "cooldown.json"  # Relative to data_dir


class AccountConfig(BaseModel):
    start_balance: float = 100_000.0  # Account currency (JPY)
    target_balance: float = 1_000_000.0


class DisciplineConfig(BaseModel):
    consecutive_loss_limit: int = 3  # 0 disables the guard
    cooldown_minutes: int = 30


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "console"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables
    (``FXJOURNAL_ACCOUNT__START_BALANCE=250000``).
    """

    storage: StorageConfig = Field(default_factory=StorageConfig)
    account: AccountConfig = Field(default_factory=AccountConfig)
    discipline: DisciplineConfig = Field(default_factory=DisciplineConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "FXJOURNAL_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional; a missing file
            falls back to defaults).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            try:
                with open(path, "rb") as f:
                    data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(data.get(key), dict):
            data[key] = {**data[key], **value}
        else:
            data[key] = value

    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
