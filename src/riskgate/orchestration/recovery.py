"""Account Recovery - one-time code verification.

A user locked out by a risk block (or a forgotten secret) proves control
of the identity through an out-of-band code. A verified attempt is
recorded with zero risk so that its device and address become known
history for later scoring.
"""

import hmac
import logging
import random
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from riskgate.collaborators.directory import CredentialDirectory
from riskgate.collaborators.notifier import Notifier
from riskgate.common.constants import FactorNames, RecoveryConstants
from riskgate.common.exceptions import (
    IdentityUnknown,
    InvalidVerificationCode,
    NotificationFailed,
)
from riskgate.common.logging import mask_identity
from riskgate.core.types import AttemptOutcome, AttemptState, DeliveryStatus, RiskLevel
from riskgate.data.schemas.attempt import AttemptAttributes, EnvironmentAttributes
from riskgate.data.schemas.auth_outcome import AuthOutcome
from riskgate.ledger.store import AttemptLedger
from riskgate.orchestration.authenticator import utc_now


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingCode:
    code: str
    expires_at: datetime
    failures: int = 0


class RecoveryFlow:
    """Issues and verifies one-time codes."""

    def __init__(
        self,
        directory: CredentialDirectory,
        notifier: Notifier,
        ledger: AttemptLedger,
        ttl_seconds: int = RecoveryConstants.CODE_TTL_SECONDS,
        max_attempts: int = RecoveryConstants.MAX_FAILED_ATTEMPTS,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.directory = directory
        self.notifier = notifier
        self.ledger = ledger
        self.ttl = timedelta(seconds=ttl_seconds)
        self.max_attempts = max_attempts
        self._rng = rng or random.SystemRandom()
        self.clock = clock
        self._pending: Dict[str, PendingCode] = {}
        self._lock = threading.Lock()

    def _generate_code(self) -> str:
        return str(self._rng.randint(RecoveryConstants.CODE_MIN, RecoveryConstants.CODE_MAX))

    def request_code(self, identity: str) -> datetime:
        """Send a fresh code to the identity, replacing any pending one.

        Returns:
            Expiry time of the issued code

        Raises:
            IdentityUnknown: If the identity is not registered
            NotificationFailed: If the notifier could not deliver
        """
        if not self.directory.exists(identity):
            raise IdentityUnknown(identity)

        code = self._generate_code()
        expires_at = self.clock() + self.ttl

        status = self.notifier.send(
            identity,
            {
                "kind": "one_time_code",
                "code": code,
                "message": f"Your verification code is: {code}",
            },
        )
        if status != DeliveryStatus.DELIVERED:
            logger.warning(
                "Verification code delivery failed",
                extra={"identity": mask_identity(identity)},
            )
            raise NotificationFailed(
                "Could not deliver verification code",
                details={"status": status.value},
            )

        with self._lock:
            self._pending[identity] = PendingCode(code=code, expires_at=expires_at)

        logger.info(
            "Verification code issued",
            extra={"identity": mask_identity(identity)},
        )
        return expires_at

    def verify_code(
        self,
        identity: str,
        code: str,
        attributes: EnvironmentAttributes,
    ) -> AuthOutcome:
        """Check a code and record a verified attempt.

        Codes are single use. A wrong code counts as a failure; after
        ``max_attempts`` failures the pending code is discarded.

        Raises:
            InvalidVerificationCode: If no code is pending, it expired, or it differs
            LedgerUnavailable: If the verified attempt could not be recorded
        """
        now = self.clock()
        with self._lock:
            pending = self._pending.get(identity)
            if pending is None:
                raise InvalidVerificationCode()
            if now >= pending.expires_at:
                del self._pending[identity]
                raise InvalidVerificationCode("Verification code expired")
            if not hmac.compare_digest(pending.code, code):
                failures = pending.failures + 1
                if failures >= self.max_attempts:
                    del self._pending[identity]
                    logger.warning(
                        "Verification code discarded after repeated failures",
                        extra={"identity": mask_identity(identity)},
                    )
                    raise InvalidVerificationCode(
                        "Too many incorrect codes. Request a new one."
                    )
                self._pending[identity] = replace(pending, failures=failures)
                raise InvalidVerificationCode()
            del self._pending[identity]

        attempt = AttemptAttributes.from_environment(identity, attributes, now)
        entry = self.ledger.append(
            attempt,
            score=0,
            level=RiskLevel.LOW,
            outcome=AttemptOutcome.ALLOWED,
            contributing_factors=(FactorNames.VERIFIED_BY_CODE,),
        )

        logger.info(
            "Identity verified by one-time code",
            extra={"identity": mask_identity(identity), "entry_id": entry.entry_id},
        )

        return AuthOutcome(
            identity=identity,
            score=0,
            level=RiskLevel.LOW,
            outcome=AttemptOutcome.ALLOWED,
            session_established=True,
            contributing_factors=entry.contributing_factors,
            entry_id=entry.entry_id,
            state=AttemptState.SESSION_GRANTED,
        )

    def has_pending(self, identity: str) -> bool:
        with self._lock:
            return identity in self._pending
