"""API Schemas - Request/Response models for the API Gateway.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class EnvironmentOverrides(BaseModel):
    """Optional environment fields.

    When omitted, the gateway derives them from the request: the device
    signature from the User-Agent header and the address/location from
    the client host via the geolocation resolver.
    """
    device_signature: Optional[str] = Field(default=None, min_length=1)
    network_address: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = Field(default=None, min_length=1)


class SignupRequest(BaseModel):
    """Request body for POST /signup."""
    name: Optional[str] = Field(default=None, max_length=200)
    email: str = Field(..., pattern=EMAIL_PATTERN, description="Identity key")
    password: str = Field(..., min_length=1)


class LoginRequest(EnvironmentOverrides):
    """Request body for POST /login."""
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "alice@example.com",
                "password": "correct horse battery staple",
            }
        }
    }


class RecoveryCodeRequest(BaseModel):
    """Request body for POST /recovery/request."""
    email: str = Field(..., pattern=EMAIL_PATTERN)


class RecoveryVerifyRequest(EnvironmentOverrides):
    """Request body for POST /recovery/verify."""
    email: str = Field(..., pattern=EMAIL_PATTERN)
    code: str = Field(..., pattern=r"^\d{6}$")


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class SignupResponse(BaseModel):
    email: str
    name: Optional[str] = None
    session_token: str


class LoginResponse(BaseModel):
    """Response for a granted session (allowed or flagged)."""
    email: str
    score: int = Field(..., ge=0, le=100)
    level: Literal["low", "medium", "high"]
    outcome: Literal["allowed", "flagged", "blocked"]
    session_established: bool
    warning: Optional[str] = None
    contributing_factors: List[str] = Field(default_factory=list)
    session_token: str


class HistoryEntryResponse(BaseModel):
    entry_id: int
    timestamp: datetime
    location: str
    network_address: str
    device_signature: str
    score: int
    level: Literal["low", "medium", "high"]
    outcome: Literal["allowed", "flagged", "blocked"]
    contributing_factors: List[str] = Field(default_factory=list)


class HistoryResponse(BaseModel):
    """Attempt history, newest first."""
    email: str
    total: int
    entries: List[HistoryEntryResponse]


class RecoveryCodeResponse(BaseModel):
    email: str
    expires_at: datetime


class LogoutResponse(BaseModel):
    status: Literal["logged_out"] = "logged_out"


class ErrorResponse(BaseModel):
    """Standard error response body."""
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
    request_id: Optional[str] = None
