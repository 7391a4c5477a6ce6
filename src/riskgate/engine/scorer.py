"""Risk Scoring Engine - additive factor model over an identity's history.

Compares the current attempt with the identity's prior attempts:
- device and network address never seen before
- local hour inside the nocturnal window
- attempt arriving shortly after the previous one

A first-ever attempt cannot be "new" relative to nothing, so the
history-based factors require at least one prior entry.

The engine is stateless apart from its injected jitter source and is
safe to call from many threads at once.
"""

import logging
from datetime import tzinfo
from typing import List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from riskgate.common.constants import FactorNames, RiskConstants
from riskgate.data.schemas.attempt import AttemptAttributes
from riskgate.data.schemas.ledger_entry import LedgerEntry
from riskgate.data.schemas.risk_assessment import RiskAssessment
from riskgate.engine.classifier import RiskClassifier
from riskgate.engine.jitter import JitterSource, RandomJitter
from riskgate.engine.policy import DEFAULT_POLICY, RiskPolicy


logger = logging.getLogger(__name__)


def clamp_score(value: int) -> int:
    return max(RiskConstants.SCORE_MIN, min(RiskConstants.SCORE_MAX, value))


class RiskScorer:
    """Scores an attempt against the identity's ledger history.

    Constraints:
    - Never mutates or retains the history it is given
    - No I/O
    - Jitter is the only non-deterministic input
    """

    def __init__(
        self,
        policy: Optional[RiskPolicy] = None,
        jitter: Optional[JitterSource] = None,
        timezone: Optional[tzinfo] = None,
        classifier: Optional[RiskClassifier] = None,
    ):
        """Initialize the scorer.

        Args:
            policy: Weights and windows. Defaults to the production policy.
            jitter: Entropy source. Defaults to an unseeded RandomJitter.
            timezone: Zone used to derive the local hour. Defaults to UTC.
            classifier: Level classifier. Built from ``policy`` if omitted.
        """
        self.policy = policy or DEFAULT_POLICY
        self.jitter = jitter if jitter is not None else RandomJitter()
        self.timezone = timezone or ZoneInfo("UTC")
        self.classifier = classifier or RiskClassifier(self.policy)

    def score(
        self,
        attempt: AttemptAttributes,
        history: Sequence[LedgerEntry],
    ) -> RiskAssessment:
        """Score an attempt.

        Args:
            attempt: Attributes of the current attempt
            history: Prior entries of the same identity, oldest first

        Returns:
            RiskAssessment with clamped score, level and fired factors

        Raises:
            ValueError: If history contains another identity's entries or
                the jitter source returns a value outside [0, jitter_max)
        """
        for entry in history:
            if entry.identity != attempt.identity:
                raise ValueError(
                    "history contains entries for a different identity"
                )

        fired = self._evaluate_factors(attempt, history)

        jitter_max = self.policy.jitter_max
        jitter = self.jitter.draw(jitter_max)
        # A zero cap means no jitter at all
        if jitter < 0 or jitter >= max(jitter_max, 1):
            raise ValueError(f"jitter {jitter} outside [0, {jitter_max})")

        raw_score = sum(weight for _, weight in fired) + jitter
        final_score = clamp_score(raw_score)
        level = self.classifier.classify(final_score)

        logger.debug(
            "Scored attempt",
            extra={
                "history_length": len(history),
                "factors": [name for name, _ in fired],
                "jitter": jitter,
                "score": final_score,
            }
        )

        return RiskAssessment(
            score=final_score,
            level=level,
            contributing_factors=tuple(name for name, _ in fired),
        )

    def _evaluate_factors(
        self,
        attempt: AttemptAttributes,
        history: Sequence[LedgerEntry],
    ) -> List[Tuple[str, int]]:
        """Evaluate the additive factors in their fixed order."""
        weights = self.policy.weights
        fired: List[Tuple[str, int]] = []

        if history:
            known_devices = {e.attributes.device_signature for e in history}
            if attempt.device_signature not in known_devices:
                fired.append((FactorNames.NEW_DEVICE, weights.new_device))

            known_addresses = {e.attributes.network_address for e in history}
            if attempt.network_address not in known_addresses:
                fired.append((FactorNames.NEW_NETWORK, weights.new_network))

        if self.policy.unusual_hours.contains(self.local_hour(attempt)):
            fired.append((FactorNames.UNUSUAL_HOUR, weights.unusual_hour))

        if history:
            elapsed = attempt.timestamp - history[-1].timestamp
            # Negative elapsed time (clock skew) counts as a burst too
            if elapsed.total_seconds() < self.policy.velocity_window_seconds:
                fired.append((FactorNames.VELOCITY, weights.velocity))

        return fired

    def local_hour(self, attempt: AttemptAttributes) -> int:
        return attempt.timestamp.astimezone(self.timezone).hour
