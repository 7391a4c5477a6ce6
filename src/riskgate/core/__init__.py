"""Core types."""

from riskgate.core.types import (
    RiskLevel,
    AttemptOutcome,
    AttemptState,
    DeliveryStatus,
)

__all__ = [
    "RiskLevel",
    "AttemptOutcome",
    "AttemptState",
    "DeliveryStatus",
]
