"""abstract-logic — Application configuration.

Configuration is loaded from (in order of increasing priority):
    1. Built-in defaults (this file)
    2. Environment variables prefixed with ABSTRACT_LOGIC_
    3. User config:   ~/.abstract-logic/config.yaml
    4. An explicit config file passed to ``Settings.load()``

Example file::

    logging:
      level: debug
    modules:
      Orders: shop.logic.orders:OrderLogic
      Stock: shop.logic.stock:StockLogic
    logic:
      Orders:
        max_quantity: 10
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseModel):
    level: Literal["debug", "info", "warning", "error", "critical"] = "info"
    format: Literal["json", "console"] = "console"
    file: Path | None = None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ABSTRACT_LOGIC_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    modules: dict[str, str] = Field(
        default_factory=dict,
        description="Registry name → dotted logic class path ('pkg.module:Class').",
    )
    logic: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Registry name → config fragment handed to that logic module.",
    )

    @classmethod
    def load(cls, config_file: Path | None = None) -> "Settings":
        """Load settings from file + environment variables."""
        data: dict[str, Any] = {}

        candidates = [Path.home() / ".abstract-logic" / "config.yaml"]
        if config_file:
            candidates.append(Path(config_file))

        for path in candidates:
            if path.exists():
                import yaml  # lazy import — only needed when a file exists

                with path.open() as f:
                    loaded = yaml.safe_load(f) or {}
                    data.update(loaded)

        return cls(**data)


# Module-level singleton — replaced by ``Settings.load()`` at startup.
_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def override_settings(settings: Settings) -> None:
    """Replace the module-level singleton. Used in tests."""
    global _settings
    _settings = settings
