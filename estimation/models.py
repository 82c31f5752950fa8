"""
Purpose: Domain models for the delivery-date Estimation capability.
What it does:
- Defines core data structures:
- QuantityRule (franchise_id, status, min/max quantity range, delivery offset)
- ZoneRule (franchise_id, zone_id, status, cutoff time, before/after offsets)
- Zone (id, name) for name based zone lookups
- EstimationResult (delivery_date, delivery_day_label, is_fallback)

Defines enums/constants:
- RuleStatus = Active | Inactive
- EstimateSource = QUANTITY | ZONE | FALLBACK

The stored offset columns may hold numbers or free text ("Same Day", "2 days").
They are carried as a tagged union (NumericOffset | TextOffset) and only
turned into plain integers by estimation.offsets.

Rule: No data store calls, no estimation logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class RuleStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class EstimateSource(Enum):
    QUANTITY = "QUANTITY"
    ZONE = "ZONE"
    FALLBACK = "FALLBACK"


@dataclass(frozen=True)
class NumericOffset:
    days: int


@dataclass(frozen=True)
class TextOffset:
    text: str


OffsetValue = Union[NumericOffset, TextOffset]


@dataclass(frozen=True)
class QuantityRule:
    """
    Delivery offset for orders whose quantity falls in [min_quantity, max_quantity].
    A rule without a max_quantity is invalid and never matches.
    """
    franchise_id: str
    min_quantity: int
    max_quantity: Optional[int]
    delivery_offset: Optional[OffsetValue] = None
    status: RuleStatus = RuleStatus.ACTIVE
    id: Optional[str] = None

    @property
    def width(self) -> Optional[int]:
        if self.max_quantity is None:
            return None
        return self.max_quantity - self.min_quantity

    def covers(self, quantity: int) -> bool:
        if self.max_quantity is None:
            return False
        return self.min_quantity <= quantity <= self.max_quantity


@dataclass(frozen=True)
class ZoneRule:
    """
    Cutoff based delivery offsets for one zone of a franchise.
    cutoff_time is a local wall clock "HH:MM[:SS]" with no timezone.
    """
    franchise_id: str
    zone_id: str
    cutoff_time: Optional[str]
    before_cutoff_offset: Optional[OffsetValue] = None
    after_cutoff_offset: Optional[OffsetValue] = None
    status: RuleStatus = RuleStatus.ACTIVE
    id: Optional[str] = None


@dataclass(frozen=True)
class Zone:
    id: str
    name: str


@dataclass(frozen=True)
class EstimationResult:
    """
    Output of the estimator. Embedded into an order at submission time,
    never persisted on its own.
    """
    delivery_date: datetime  # local midnight
    delivery_day_label: Optional[str]
    is_fallback: bool

    # Diagnostics
    offset_days: int = 0
    source: EstimateSource = EstimateSource.FALLBACK

    @classmethod
    def fallback(cls, today: datetime) -> EstimationResult:
        return cls(
            delivery_date=today,
            delivery_day_label=None,
            is_fallback=True,
            offset_days=0,
            source=EstimateSource.FALLBACK,
        )
