"""AuthOutcome schema - what the session/UI layer consumes."""

from typing import Optional, Tuple

from pydantic import BaseModel, Field

from riskgate.core.types import AttemptOutcome, AttemptState, RiskLevel


class AuthOutcome(BaseModel):
    """Successful result of an authentication attempt.

    Only allowed and flagged attempts produce an AuthOutcome; blocked
    attempts raise RiskBlocked instead.
    """
    identity: str
    score: int = Field(..., ge=0, le=100)
    level: RiskLevel
    outcome: AttemptOutcome
    session_established: bool
    warning: Optional[str] = Field(default=None, description="Set for flagged attempts")
    contributing_factors: Tuple[str, ...] = Field(default=())
    entry_id: int
    state: AttemptState = AttemptState.SESSION_GRANTED

    model_config = {"frozen": True}
