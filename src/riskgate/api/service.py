"""RiskGate Service - wires the core to the HTTP shell.

This service owns the collaborators the core consumes (directory,
geolocation, notifier) and the session tokens the core does not manage.

Design principles:
- Clean separation between API and domain logic
- Environment fields derived from the request unless supplied
- Core errors propagate; the gateway maps them to status codes
"""

import logging
import secrets
import threading
from datetime import datetime
from typing import Callable, Dict, Optional

from riskgate.api.schemas import (
    EnvironmentOverrides,
    HistoryEntryResponse,
    HistoryResponse,
    LoginRequest,
    LoginResponse,
    RecoveryCodeRequest,
    RecoveryCodeResponse,
    RecoveryVerifyRequest,
    SignupRequest,
    SignupResponse,
)
from riskgate.collaborators import (
    GeoResolver,
    InMemoryCredentialDirectory,
    LoggingNotifier,
    Notifier,
    StaticGeoResolver,
    parse_user_agent,
)
from riskgate.common.config import Config, get_config
from riskgate.common.logging import mask_identity
from riskgate.data.schemas import AuthOutcome, EnvironmentAttributes
from riskgate.engine import RandomJitter, RiskScorer, load_risk_policy
from riskgate.ledger import AttemptLedger, create_ledger
from riskgate.orchestration import Authenticator, RecoveryFlow, utc_now


logger = logging.getLogger(__name__)


class SessionStore:
    """Opaque bearer tokens for granted sessions."""

    def __init__(self) -> None:
        self._sessions: Dict[str, str] = {}
        self._lock = threading.Lock()

    def create(self, identity: str) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._sessions[token] = identity
        return token

    def identity_for(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        with self._lock:
            return self._sessions.get(token)

    def revoke(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None


class RiskGateService:
    """Service for signup, login, history and recovery.

    Orchestrates:
    1. Environment resolution from the HTTP request
    2. The authentication orchestrator and recovery flow
    3. Session token issuance for granted attempts
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        directory: Optional[InMemoryCredentialDirectory] = None,
        ledger: Optional[AttemptLedger] = None,
        scorer: Optional[RiskScorer] = None,
        notifier: Optional[Notifier] = None,
        resolver: Optional[GeoResolver] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the service.

        Args:
            config: Settings. Uses the global configuration if not provided.
            directory: Credential directory. Created if not provided.
            ledger: Attempt ledger. Built from config if not provided.
            scorer: Risk scorer. Built from config and risk policy if not provided.
            notifier: Code notifier. Logs mock deliveries if not provided.
            resolver: Geolocation resolver. Static table if not provided.
            clock: Time source shared by login and recovery.
        """
        self.config = config or get_config()
        self.directory = directory or InMemoryCredentialDirectory(
            reveal_unknown_identities=self.config.reveal_unknown_identities
        )
        self.ledger = ledger or create_ledger(self.config)
        if scorer is None:
            scorer = RiskScorer(
                policy=load_risk_policy(self.config.risk_policy_file),
                jitter=RandomJitter(seed=self.config.jitter_seed),
                timezone=self.config.timezone,
            )
        self.scorer = scorer
        self.resolver = resolver or StaticGeoResolver()
        self.authenticator = Authenticator(
            directory=self.directory,
            ledger=self.ledger,
            scorer=self.scorer,
            clock=clock,
        )
        self.recovery = RecoveryFlow(
            directory=self.directory,
            notifier=notifier or LoggingNotifier(),
            ledger=self.ledger,
            ttl_seconds=self.config.otp_ttl_seconds,
            max_attempts=self.config.otp_max_attempts,
            clock=clock,
        )
        self.sessions = SessionStore()

    def resolve_environment(
        self,
        overrides: EnvironmentOverrides,
        client_host: Optional[str],
        user_agent: Optional[str],
    ) -> EnvironmentAttributes:
        """Fill in environment fields the caller did not supply."""
        resolved = self.resolver.resolve(overrides.network_address or client_host)
        return EnvironmentAttributes(
            network_address=resolved.network_address,
            device_signature=overrides.device_signature or parse_user_agent(user_agent),
            location=overrides.location or resolved.location,
        )

    def _login_response(self, outcome: AuthOutcome) -> LoginResponse:
        return LoginResponse(
            email=outcome.identity,
            score=outcome.score,
            level=outcome.level.value,
            outcome=outcome.outcome.value,
            session_established=outcome.session_established,
            warning=outcome.warning,
            contributing_factors=list(outcome.contributing_factors),
            session_token=self.sessions.create(outcome.identity),
        )

    def signup(self, request: SignupRequest) -> SignupResponse:
        """Register an identity and open a session for it."""
        self.directory.register(request.email, request.password, display_name=request.name)
        logger.info("Identity registered", extra={"identity": mask_identity(request.email)})
        return SignupResponse(
            email=request.email,
            name=request.name,
            session_token=self.sessions.create(request.email),
        )

    def login(
        self,
        request: LoginRequest,
        client_host: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> LoginResponse:
        """Evaluate a login. Raises the core's errors for refused attempts."""
        environment = self.resolve_environment(request, client_host, user_agent)
        outcome = self.authenticator.attempt(request.email, request.password, environment)
        return self._login_response(outcome)

    def logout(self, token: str) -> bool:
        return self.sessions.revoke(token)

    def history(self, identity: str, limit: Optional[int] = None) -> HistoryResponse:
        """Attempt history for an identity, newest first."""
        entries = list(reversed(self.ledger.history(identity)))
        total = len(entries)
        if limit is not None:
            entries = entries[:limit]
        return HistoryResponse(
            email=identity,
            total=total,
            entries=[
                HistoryEntryResponse(
                    entry_id=e.entry_id,
                    timestamp=e.timestamp,
                    location=e.attributes.location,
                    network_address=e.attributes.network_address,
                    device_signature=e.attributes.device_signature,
                    score=e.score,
                    level=e.level.value,
                    outcome=e.outcome.value,
                    contributing_factors=list(e.contributing_factors),
                )
                for e in entries
            ],
        )

    def request_recovery(self, request: RecoveryCodeRequest) -> RecoveryCodeResponse:
        expires_at = self.recovery.request_code(request.email)
        return RecoveryCodeResponse(email=request.email, expires_at=expires_at)

    def verify_recovery(
        self,
        request: RecoveryVerifyRequest,
        client_host: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> LoginResponse:
        environment = self.resolve_environment(request, client_host, user_agent)
        outcome = self.recovery.verify_code(request.email, request.code, environment)
        return self._login_response(outcome)
