"""Configuration management - Centralized configuration for RiskGate.

Provides environment-aware configuration with sensible defaults.
All configuration is loaded from environment variables with fallbacks.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from riskgate.common.constants import RecoveryConstants
from riskgate.common.exceptions import ConfigurationError


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LedgerStorageType(str, Enum):
    """Ledger storage backend types."""
    MEMORY = "memory"
    FILE = "file"


def _get_project_root() -> Path:
    """Get the project root directory."""
    # settings.py -> config -> common -> riskgate -> src -> project_root
    current = Path(__file__).resolve()
    return current.parent.parent.parent.parent.parent


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    return int(raw)


def _optional_path(name: str) -> Optional[Path]:
    raw = os.getenv(name)
    return Path(raw) if raw else None


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Config:
    """Central configuration object for RiskGate.

    All settings can be overridden via environment variables prefixed with RISKGATE_.

    Example:
        RISKGATE_ENVIRONMENT=production
        RISKGATE_LEDGER_STORAGE_TYPE=file
        RISKGATE_LEDGER_DIR=/var/lib/riskgate/ledger
    """

    # Core settings
    environment: Environment = field(
        default_factory=lambda: Environment(
            os.getenv("RISKGATE_ENVIRONMENT", "development")
        )
    )
    debug: bool = field(default_factory=lambda: _flag("RISKGATE_DEBUG"))
    log_level: LogLevel = field(
        default_factory=lambda: LogLevel(os.getenv("RISKGATE_LOG_LEVEL", "INFO"))
    )

    # Paths
    project_root: Path = field(default_factory=_get_project_root)

    # API settings
    api_host: str = field(
        default_factory=lambda: os.getenv("RISKGATE_API_HOST", "0.0.0.0")
    )
    api_port: int = field(
        default_factory=lambda: int(os.getenv("RISKGATE_API_PORT", "8000"))
    )

    # Ledger settings
    ledger_storage_type: LedgerStorageType = field(
        default_factory=lambda: LedgerStorageType(
            os.getenv("RISKGATE_LEDGER_STORAGE_TYPE", "memory")
        )
    )
    ledger_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("RISKGATE_LEDGER_DIR", "./data/ledger")
        )
    )
    ledger_fsync: bool = field(default_factory=lambda: _flag("RISKGATE_LEDGER_FSYNC"))

    # Scoring settings
    risk_policy_file: Optional[Path] = field(
        default_factory=lambda: _optional_path("RISKGATE_RISK_POLICY_FILE")
    )
    local_timezone: str = field(
        default_factory=lambda: os.getenv("RISKGATE_LOCAL_TIMEZONE", "UTC")
    )
    jitter_seed: Optional[int] = field(
        default_factory=lambda: _optional_int("RISKGATE_JITTER_SEED")
    )

    # Directory / recovery settings
    otp_ttl_seconds: int = field(
        default_factory=lambda: int(
            os.getenv("RISKGATE_OTP_TTL_SECONDS", str(RecoveryConstants.CODE_TTL_SECONDS))
        )
    )
    otp_max_attempts: int = field(
        default_factory=lambda: int(
            os.getenv("RISKGATE_OTP_MAX_ATTEMPTS", str(RecoveryConstants.MAX_FAILED_ATTEMPTS))
        )
    )
    reveal_unknown_identities: bool = field(
        default_factory=lambda: _flag("RISKGATE_REVEAL_UNKNOWN_IDENTITIES")
    )

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.ledger_storage_type == LedgerStorageType.FILE:
            self.ledger_dir.mkdir(parents=True, exist_ok=True)

        if self.risk_policy_file is not None and not self.risk_policy_file.exists():
            raise ConfigurationError(
                "RISKGATE_RISK_POLICY_FILE points to a missing file",
                details={"path": str(self.risk_policy_file)},
            )

        try:
            ZoneInfo(self.local_timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(
                f"Unknown RISKGATE_LOCAL_TIMEZONE: {self.local_timezone}"
            ) from e

        if self.otp_ttl_seconds <= 0:
            raise ConfigurationError("RISKGATE_OTP_TTL_SECONDS must be positive")

        if self.otp_max_attempts <= 0:
            raise ConfigurationError("RISKGATE_OTP_MAX_ATTEMPTS must be positive")

        # Warn about debug in production
        if self.environment == Environment.PRODUCTION and self.debug:
            import warnings
            warnings.warn(
                "Debug mode is enabled in production environment",
                RuntimeWarning,
                stacklevel=2
            )

    @property
    def timezone(self) -> ZoneInfo:
        """Zone used to derive the local hour of an attempt."""
        return ZoneInfo(self.local_timezone)

    @property
    def config_dir(self) -> Path:
        """Get the config directory path."""
        return self.project_root / "config"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The global configuration singleton.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
