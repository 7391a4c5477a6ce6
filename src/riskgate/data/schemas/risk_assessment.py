"""RiskAssessment schema - canonical definition."""

from typing import Tuple

from pydantic import BaseModel, Field

from riskgate.core.types import RiskLevel


class RiskAssessment(BaseModel):
    """Output of the scoring engine for one attempt.

    Score is clamped into [0, 100]; level is derived from the score by
    the classifier. Factors are listed in evaluation order.
    """
    score: int = Field(..., ge=0, le=100, description="Risk score (0-100)")
    level: RiskLevel = Field(..., description="Risk level derived from score")
    contributing_factors: Tuple[str, ...] = Field(
        default=(), description="Human-readable reasons the score is non-zero"
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "score": 64,
                "level": "medium",
                "contributing_factors": ["New device detected", "New IP address"],
            }
        }
    }
