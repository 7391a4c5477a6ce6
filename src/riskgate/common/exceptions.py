"""Custom exceptions for RiskGate.

Provides a hierarchy of exceptions for different error types.
All RiskGate exceptions inherit from RiskGateException.

Expected, user-facing outcomes of an authentication attempt (rejected
credentials, risk blocks, recovery failures) are modelled as exceptions
so the orchestrator can terminate an attempt at the step where it fails.
"""

from typing import Any, Dict, Optional


class RiskGateException(Exception):
    """Base exception for all RiskGate errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: str = "RISKGATE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(RiskGateException):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIG_ERROR", details=details)


class InvalidCredentials(RiskGateException):
    """Raised when the secret does not match the stored credential.

    Never carries a score: scoring is not reached on this path.
    """

    def __init__(
        self,
        message: str = "Invalid credentials. Please sign up or check your password.",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code="INVALID_CREDENTIALS", details=details)


class IdentityUnknown(RiskGateException):
    """Raised when the directory has no such identity and chooses to say so."""

    def __init__(self, identity: str, details: Optional[Dict[str, Any]] = None):
        self.identity = identity
        super().__init__(
            "No account is registered for this identity",
            code="IDENTITY_UNKNOWN",
            details=details,
        )


class IdentityAlreadyRegistered(RiskGateException):
    """Raised when signing up an identity that already exists."""

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(
            "An account is already registered for this identity",
            code="IDENTITY_EXISTS",
        )


class RiskBlocked(RiskGateException):
    """Raised when valid credentials are refused because risk is high.

    The attempt has already been recorded in the ledger.
    """

    def __init__(
        self,
        score: int,
        contributing_factors: tuple = (),
        entry_id: Optional[int] = None,
    ):
        self.score = score
        self.contributing_factors = tuple(contributing_factors)
        self.entry_id = entry_id
        super().__init__(
            "Login blocked due to high risk activity.",
            code="RISK_BLOCKED",
            details={
                "score": score,
                "contributing_factors": list(self.contributing_factors),
            },
        )


class LedgerUnavailable(RiskGateException):
    """Raised when the attempt ledger cannot be read or appended."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="LEDGER_UNAVAILABLE", details=details)


class LedgerIntegrityError(RiskGateException):
    """Raised when a stored ledger hash chain does not verify."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="LEDGER_INTEGRITY", details=details)


class InvalidVerificationCode(RiskGateException):
    """Raised when a recovery code is wrong, expired or was never issued."""

    def __init__(self, message: str = "Invalid or expired verification code"):
        super().__init__(message, code="INVALID_CODE")


class NotificationFailed(RiskGateException):
    """Raised when the notifier reports a failed delivery."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="NOTIFICATION_FAILED", details=details)


class InvalidStateTransition(RiskGateException):
    """Raised when the attempt state machine is driven out of order."""

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Illegal attempt state transition {current} -> {target}",
            code="INVALID_STATE",
            details={"from": current, "to": target},
        )
