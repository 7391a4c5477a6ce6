"""Risk Policy - the single source of scoring weights and level thresholds.

Every component that needs a weight, a time window or a level threshold
reads it from a RiskPolicy. Defaults match the production table; a YAML
file can override them for a deployment.
"""

from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from riskgate.common.constants import RiskConstants
from riskgate.common.exceptions import ConfigurationError


class FactorWeights(BaseModel):
    """Fixed point contributions of each additive factor."""
    new_device: int = Field(default=RiskConstants.NEW_DEVICE_WEIGHT, ge=0)
    new_network: int = Field(default=RiskConstants.NEW_NETWORK_WEIGHT, ge=0)
    unusual_hour: int = Field(default=RiskConstants.UNUSUAL_HOUR_WEIGHT, ge=0)
    velocity: int = Field(default=RiskConstants.VELOCITY_WEIGHT, ge=0)

    model_config = {"frozen": True}


class HourWindow(BaseModel):
    """Half-open window [start, end) of local hours."""
    start: int = Field(default=RiskConstants.UNUSUAL_HOUR_START, ge=0, le=23)
    end: int = Field(default=RiskConstants.UNUSUAL_HOUR_END, ge=1, le=24)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> "HourWindow":
        if self.start >= self.end:
            raise ValueError("unusual_hours.start must be before unusual_hours.end")
        return self

    def contains(self, hour: int) -> bool:
        return self.start <= hour < self.end


class LevelThresholds(BaseModel):
    """Inclusive lower bounds of the medium and high levels."""
    medium: int = Field(default=RiskConstants.MEDIUM_THRESHOLD, ge=1, le=100)
    high: int = Field(default=RiskConstants.HIGH_THRESHOLD, ge=1, le=100)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> "LevelThresholds":
        if self.medium >= self.high:
            raise ValueError("thresholds.medium must be below thresholds.high")
        return self


class RiskPolicy(BaseModel):
    """Complete scoring and classification policy."""
    version: str = Field(default=RiskConstants.POLICY_VERSION)
    weights: FactorWeights = Field(default_factory=FactorWeights)
    unusual_hours: HourWindow = Field(default_factory=HourWindow)
    velocity_window_seconds: float = Field(
        default=RiskConstants.VELOCITY_WINDOW_SECONDS, gt=0
    )
    jitter_max: int = Field(default=RiskConstants.JITTER_MAX, ge=0)
    thresholds: LevelThresholds = Field(default_factory=LevelThresholds)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "version": "1.0.0",
                "weights": {
                    "new_device": 40,
                    "new_network": 20,
                    "unusual_hour": 15,
                    "velocity": 10,
                },
                "unusual_hours": {"start": 0, "end": 5},
                "velocity_window_seconds": 60,
                "jitter_max": 10,
                "thresholds": {"medium": 40, "high": 70},
            }
        }
    }


DEFAULT_POLICY = RiskPolicy()


def load_risk_policy(policy_file: Optional[Union[str, Path]] = None) -> RiskPolicy:
    """Load and validate a risk policy from YAML.

    Args:
        policy_file: Path to a YAML policy. ``None`` returns the default policy.

    Returns:
        Validated RiskPolicy

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    if policy_file is None:
        return DEFAULT_POLICY

    path = Path(policy_file)
    if not path.exists():
        raise ConfigurationError(
            f"Risk policy file not found: {path}", details={"path": str(path)}
        )

    try:
        with open(path, "r") as f:
            raw_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Could not read risk policy file: {path}", details={"error": str(e)}
        ) from e

    if raw_config is None:
        return DEFAULT_POLICY

    try:
        return RiskPolicy.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid risk policy in {path}", details={"errors": e.errors()}
        ) from e
