"""RiskGate - login risk evaluation engine."""

__version__ = "0.1.0"
__author__ = "RiskGate Team"

# Core exports
from riskgate.core.types import RiskLevel, AttemptOutcome, AttemptState
from riskgate.data.schemas import (
    AttemptAttributes,
    EnvironmentAttributes,
    RiskAssessment,
    LedgerEntry,
    AuthOutcome,
)
from riskgate.engine import RiskScorer, RiskClassifier, RiskPolicy, FixedJitter, RandomJitter
from riskgate.ledger import AttemptLedger, InMemoryLedger, FileLedger
from riskgate.orchestration import Authenticator, RecoveryFlow

__all__ = [
    "RiskLevel",
    "AttemptOutcome",
    "AttemptState",
    "AttemptAttributes",
    "EnvironmentAttributes",
    "RiskAssessment",
    "LedgerEntry",
    "AuthOutcome",
    "RiskScorer",
    "RiskClassifier",
    "RiskPolicy",
    "FixedJitter",
    "RandomJitter",
    "AttemptLedger",
    "InMemoryLedger",
    "FileLedger",
    "Authenticator",
    "RecoveryFlow",
]
