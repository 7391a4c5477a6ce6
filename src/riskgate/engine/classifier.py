"""Decision Classifier - maps a score to a risk level and an outcome.

The thresholds come from the RiskPolicy; no other threshold table
exists in the system.
"""

from typing import Optional, Tuple

from riskgate.common.constants import RiskConstants
from riskgate.core.types import AttemptOutcome, RiskLevel
from riskgate.engine.policy import DEFAULT_POLICY, RiskPolicy


OUTCOME_BY_LEVEL = {
    RiskLevel.LOW: AttemptOutcome.ALLOWED,
    RiskLevel.MEDIUM: AttemptOutcome.FLAGGED,
    RiskLevel.HIGH: AttemptOutcome.BLOCKED,
}


class RiskClassifier:
    """Deterministic, total over [0, 100]."""

    def __init__(self, policy: Optional[RiskPolicy] = None):
        self.policy = policy or DEFAULT_POLICY

    def classify(self, score: int) -> RiskLevel:
        """Map a score to its risk level.

        Raises:
            ValueError: If score is not an integer in [0, 100]
        """
        if isinstance(score, bool) or not isinstance(score, int):
            raise ValueError(f"score must be an int, got {type(score).__name__}")
        if not RiskConstants.SCORE_MIN <= score <= RiskConstants.SCORE_MAX:
            raise ValueError(f"score {score} outside [0, 100]")

        thresholds = self.policy.thresholds
        if score >= thresholds.high:
            return RiskLevel.HIGH
        if score >= thresholds.medium:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    @staticmethod
    def outcome_for(level: RiskLevel) -> AttemptOutcome:
        """Gating outcome for a level. Only meaningful after credentials passed."""
        return OUTCOME_BY_LEVEL[level]

    def decide(self, score: int) -> Tuple[RiskLevel, AttemptOutcome]:
        level = self.classify(score)
        return level, self.outcome_for(level)


_default_classifier = RiskClassifier()


def classify(score: int) -> RiskLevel:
    """Classify with the default policy."""
    return _default_classifier.classify(score)
