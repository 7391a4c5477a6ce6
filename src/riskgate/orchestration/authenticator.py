"""Authentication Orchestrator - the only place attempts are decided.

Lifecycle of one attempt:
1. Verify the secret with the credential directory
2. Stamp the caller's environment with identity and current time
3. Snapshot the identity's history
4. Score against that history
5. Classify the score into level and outcome
6. Append the attempt to the ledger, blocked attempts included
7. Grant a session, or refuse with RiskBlocked

Steps 2 to 6 run inside the identity's ledger lock so two concurrent
attempts for one identity always see each other.

Error Handling:
- Credential failures never touch the ledger or the engine
- Ledger failures abort the attempt; no session is granted
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from riskgate.collaborators.directory import CredentialDirectory
from riskgate.common.exceptions import IdentityUnknown, InvalidCredentials, RiskBlocked
from riskgate.common.logging import mask_identity
from riskgate.core.types import AttemptOutcome, AttemptState
from riskgate.data.schemas.attempt import AttemptAttributes, EnvironmentAttributes
from riskgate.data.schemas.auth_outcome import AuthOutcome
from riskgate.engine.classifier import RiskClassifier
from riskgate.engine.scorer import RiskScorer
from riskgate.ledger.store import AttemptLedger
from riskgate.orchestration.state import AttemptStateMachine


logger = logging.getLogger(__name__)

FLAGGED_WARNING = (
    "Unusual activity detected on this sign-in. "
    "If this wasn't you, secure your account."
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Authenticator:
    """Coordinates credential check, scoring, decision and ledger append."""

    def __init__(
        self,
        directory: CredentialDirectory,
        ledger: AttemptLedger,
        scorer: Optional[RiskScorer] = None,
        classifier: Optional[RiskClassifier] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the orchestrator.

        Args:
            directory: Credential directory collaborator
            ledger: Attempt ledger (injected, never a global)
            scorer: Risk scorer. Created with defaults if not provided.
            classifier: Classifier. Shares the scorer's policy if not provided.
            clock: Source of the attempt timestamp
        """
        self.directory = directory
        self.ledger = ledger
        self.scorer = scorer or RiskScorer()
        self.classifier = classifier or self.scorer.classifier
        self.clock = clock

    def attempt(
        self,
        identity: str,
        secret: str,
        attributes: EnvironmentAttributes,
    ) -> AuthOutcome:
        """Evaluate one authentication attempt.

        Args:
            identity: Identity key (email address)
            secret: Caller-supplied secret
            attributes: Resolved environment of the attempt

        Returns:
            AuthOutcome for allowed and flagged attempts

        Raises:
            InvalidCredentials: Secret mismatch; nothing recorded
            IdentityUnknown: Directory reports an unregistered identity
            RiskBlocked: High risk; the attempt is recorded, no session
            LedgerUnavailable: History could not be read or written
        """
        machine = AttemptStateMachine()
        machine.advance(AttemptState.CREDENTIAL_CHECK)

        try:
            matched = self.directory.verify(identity, secret)
        except IdentityUnknown:
            machine.advance(AttemptState.REJECTED)
            logger.info("Attempt rejected: unknown identity")
            raise

        if matched is None:
            machine.advance(AttemptState.REJECTED)
            logger.info(
                "Attempt rejected: invalid credentials",
                extra={"identity": mask_identity(identity)},
            )
            raise InvalidCredentials()

        machine.advance(AttemptState.SCORING)

        with self.ledger.lock(matched):
            # Stamped under the lock so ledger order matches timestamp order
            attempt = AttemptAttributes.from_environment(matched, attributes, self.clock())
            history = self.ledger.history(matched)
            assessment = self.scorer.score(attempt, history)

            machine.advance(AttemptState.DECISION)
            level, outcome = self.classifier.decide(assessment.score)

            entry = self.ledger.append(
                attempt,
                score=assessment.score,
                level=level,
                outcome=outcome,
                contributing_factors=assessment.contributing_factors,
            )

        logger.info(
            "Attempt decided",
            extra={
                "identity": mask_identity(matched),
                "entry_id": entry.entry_id,
                "score": assessment.score,
                "level": level.value,
                "outcome": outcome.value,
            }
        )

        if outcome == AttemptOutcome.BLOCKED:
            machine.advance(AttemptState.BLOCKED)
            raise RiskBlocked(
                score=assessment.score,
                contributing_factors=assessment.contributing_factors,
                entry_id=entry.entry_id,
            )

        machine.advance(AttemptState.SESSION_GRANTED)
        return AuthOutcome(
            identity=matched,
            score=assessment.score,
            level=level,
            outcome=outcome,
            session_established=True,
            warning=FLAGGED_WARNING if outcome == AttemptOutcome.FLAGGED else None,
            contributing_factors=assessment.contributing_factors,
            entry_id=entry.entry_id,
            state=machine.state,
        )
