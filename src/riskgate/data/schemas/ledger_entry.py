"""LedgerEntry schema - canonical definition."""

from typing import Tuple

from pydantic import BaseModel, Field

from riskgate.core.types import AttemptOutcome, RiskLevel
from riskgate.data.schemas.attempt import AttemptAttributes


class LedgerEntry(BaseModel):
    """A recorded authentication attempt.

    Created exactly once per scored attempt. Never updated, never deleted.
    """
    entry_id: int = Field(..., ge=1, description="Monotonically increasing identifier")
    attributes: AttemptAttributes = Field(..., description="Attempt attributes")
    score: int = Field(..., ge=0, le=100, description="Risk score at decision time")
    level: RiskLevel = Field(..., description="Risk level at decision time")
    outcome: AttemptOutcome = Field(..., description="Gating decision")
    contributing_factors: Tuple[str, ...] = Field(default=())

    model_config = {"frozen": True}

    @property
    def identity(self) -> str:
        return self.attributes.identity

    @property
    def timestamp(self):
        return self.attributes.timestamp
