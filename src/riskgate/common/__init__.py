"""Common utilities - logging, config, exceptions."""

from riskgate.common.logging import get_logger, mask_identity
from riskgate.common.config import Config, get_config, reset_config
from riskgate.common.exceptions import (
    RiskGateException,
    ConfigurationError,
    InvalidCredentials,
    IdentityUnknown,
    IdentityAlreadyRegistered,
    RiskBlocked,
    LedgerUnavailable,
    LedgerIntegrityError,
    InvalidVerificationCode,
    NotificationFailed,
    InvalidStateTransition,
)

__all__ = [
    # Logging
    "get_logger",
    "mask_identity",
    # Config
    "Config",
    "get_config",
    "reset_config",
    # Exceptions
    "RiskGateException",
    "ConfigurationError",
    "InvalidCredentials",
    "IdentityUnknown",
    "IdentityAlreadyRegistered",
    "RiskBlocked",
    "LedgerUnavailable",
    "LedgerIntegrityError",
    "InvalidVerificationCode",
    "NotificationFailed",
    "InvalidStateTransition",
]
