"""Risk engine - scoring, classification, policy and jitter."""

from riskgate.engine.policy import (
    RiskPolicy,
    FactorWeights,
    HourWindow,
    LevelThresholds,
    DEFAULT_POLICY,
    load_risk_policy,
)
from riskgate.engine.jitter import JitterSource, RandomJitter, FixedJitter
from riskgate.engine.classifier import RiskClassifier, OUTCOME_BY_LEVEL, classify
from riskgate.engine.scorer import RiskScorer, clamp_score

__all__ = [
    "RiskPolicy",
    "FactorWeights",
    "HourWindow",
    "LevelThresholds",
    "DEFAULT_POLICY",
    "load_risk_policy",
    "JitterSource",
    "RandomJitter",
    "FixedJitter",
    "RiskClassifier",
    "OUTCOME_BY_LEVEL",
    "classify",
    "RiskScorer",
    "clamp_score",
]
