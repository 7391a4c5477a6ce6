"""Orchestration - attempt lifecycle and account recovery."""

from riskgate.orchestration.state import AttemptStateMachine, TRANSITIONS
from riskgate.orchestration.authenticator import Authenticator, FLAGGED_WARNING, utc_now
from riskgate.orchestration.recovery import RecoveryFlow, PendingCode

__all__ = [
    "AttemptStateMachine",
    "TRANSITIONS",
    "Authenticator",
    "FLAGGED_WARNING",
    "utc_now",
    "RecoveryFlow",
    "PendingCode",
]
