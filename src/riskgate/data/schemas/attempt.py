"""Attempt schemas - canonical definition."""

from pydantic import AwareDatetime, BaseModel, Field


class EnvironmentAttributes(BaseModel):
    """Caller-supplied environment of an authentication attempt.

    Resolved by the surrounding application (geolocation lookup,
    user-agent parsing) before the attempt reaches the core.
    """
    network_address: str = Field(..., min_length=1, description="Client network address")
    device_signature: str = Field(..., min_length=1, description="Coarse client fingerprint")
    location: str = Field(..., min_length=1, description="Coarse location label")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "network_address": "203.0.113.7",
                "device_signature": "Chrome on Windows",
                "location": "Lisbon, Portugal",
            }
        }
    }


class AttemptAttributes(BaseModel):
    """Attributes of a single authentication attempt.

    Input to scoring. Immutable once constructed. The timestamp must be
    timezone-aware; naive timestamps are rejected at construction.
    """
    identity: str = Field(..., min_length=1, description="Identity key (email address)")
    network_address: str = Field(..., min_length=1, description="Client network address")
    device_signature: str = Field(..., min_length=1, description="Coarse client fingerprint")
    location: str = Field(..., min_length=1, description="Coarse location label")
    timestamp: AwareDatetime = Field(..., description="UTC instant of the attempt")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "identity": "alice@example.com",
                "network_address": "203.0.113.7",
                "device_signature": "Chrome on Windows",
                "location": "Lisbon, Portugal",
                "timestamp": "2026-01-25T14:30:05Z",
            }
        }
    }

    @classmethod
    def from_environment(
        cls,
        identity: str,
        environment: EnvironmentAttributes,
        timestamp,
    ) -> "AttemptAttributes":
        """Stamp caller-supplied environment with identity and time."""
        return cls(
            identity=identity,
            network_address=environment.network_address,
            device_signature=environment.device_signature,
            location=environment.location,
            timestamp=timestamp,
        )
