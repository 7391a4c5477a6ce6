"""Data layer - schemas."""

from riskgate.data.schemas import (
    AttemptAttributes,
    EnvironmentAttributes,
    RiskAssessment,
    LedgerEntry,
    AuthOutcome,
)

__all__ = [
    "AttemptAttributes",
    "EnvironmentAttributes",
    "RiskAssessment",
    "LedgerEntry",
    "AuthOutcome",
]
