"""Data schemas - canonical Pydantic definitions."""

from riskgate.data.schemas.attempt import AttemptAttributes, EnvironmentAttributes
from riskgate.data.schemas.risk_assessment import RiskAssessment
from riskgate.data.schemas.ledger_entry import LedgerEntry
from riskgate.data.schemas.auth_outcome import AuthOutcome

__all__ = [
    "AttemptAttributes",
    "EnvironmentAttributes",
    "RiskAssessment",
    "LedgerEntry",
    "AuthOutcome",
]
