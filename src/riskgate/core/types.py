"""Core types and enums."""

from enum import Enum


class RiskLevel(str, Enum):
    """Coarse risk bucket derived from a score."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AttemptOutcome(str, Enum):
    """Gating decision recorded for a scored attempt."""
    ALLOWED = "allowed"
    FLAGGED = "flagged"
    BLOCKED = "blocked"


class AttemptState(str, Enum):
    """States of a single authentication attempt."""
    PENDING = "pending"
    CREDENTIAL_CHECK = "credential_check"
    REJECTED = "rejected"
    SCORING = "scoring"
    DECISION = "decision"
    BLOCKED = "blocked"
    SESSION_GRANTED = "session_granted"

    @property
    def is_terminal(self) -> bool:
        return self in (
            AttemptState.REJECTED,
            AttemptState.BLOCKED,
            AttemptState.SESSION_GRANTED,
        )


class DeliveryStatus(str, Enum):
    """Result of an out-of-band notification."""
    DELIVERED = "delivered"
    FAILED = "failed"
