"""
Estimation domain package.

Public API:
- Domain models: QuantityRule, ZoneRule, Zone, EstimationResult, RuleStatus
- Policy: EstimationPolicy, default_policy
- Engine: DeliveryDateEstimator
- Recompute loop: RecomputeScheduler, EstimateRequest, EstimateState
"""
from .models import (
    EstimateSource,
    EstimationResult,
    NumericOffset,
    QuantityRule,
    RuleStatus,
    TextOffset,
    Zone,
    ZoneRule,
)
from .offsets import day_label, normalize_offset
from .policy import EstimationPolicy, default_policy
from .estimator import DeliveryDateEstimator
from .scheduler import EstimateRequest, EstimateState, RecomputeScheduler

__all__ = [
    "EstimateSource",
    "EstimationResult",
    "NumericOffset",
    "QuantityRule",
    "RuleStatus",
    "TextOffset",
    "Zone",
    "ZoneRule",
    "day_label",
    "normalize_offset",
    "EstimationPolicy",
    "default_policy",
    "DeliveryDateEstimator",
    "EstimateRequest",
    "EstimateState",
    "RecomputeScheduler",
]
