"""Configuration module - environment-driven settings."""

from riskgate.common.config.settings import (
    Config,
    Environment,
    LogLevel,
    LedgerStorageType,
    get_config,
    reset_config,
)

__all__ = [
    "Config",
    "Environment",
    "LogLevel",
    "LedgerStorageType",
    "get_config",
    "reset_config",
]
