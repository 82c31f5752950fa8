"""
Purpose: Central configuration for delivery-date estimation (single source of truth).
What it does:

Stores all tunable defaults:

DEFAULT_BEFORE_CUTOFF_DAYS = 1

DEFAULT_AFTER_CUTOFF_DAYS = 2

UNPARSEABLE_QUANTITY_OFFSET_DAYS = 0

RECOMPUTE_DEBOUNCE_SEC = 0.5

Rule: No logic here, just parameters so behavior can be tuned without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional


@dataclass(frozen=True)
class EstimationPolicy:
    """
    Central configuration for the delivery-date estimator and its scheduler.

    Notes:
    - Zone offsets that are missing or unreadable fall back to the
      before/after cutoff defaults.
    - Quantity offsets that are missing or unreadable fall back to
      quantity_offset_default_days.
    - local_tz decides what "local time" means for cutoffs and for "today".
      None means the machine's local timezone.
    """

    # --- Zone cutoff defaults ---
    default_before_cutoff_days: int = 1
    default_after_cutoff_days: int = 2

    # --- Quantity rules ---
    quantity_offset_default_days: int = 0

    # --- Recompute scheduling ---
    # Quiet period after the last keystroke before re-estimating.
    debounce_seconds: float = 0.5

    # --- Time ---
    local_tz: Optional[tzinfo] = None

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup if you want.
        """
        if self.default_before_cutoff_days < 0:
            raise ValueError("default_before_cutoff_days must be >= 0")

        if self.default_after_cutoff_days < 0:
            raise ValueError("default_after_cutoff_days must be >= 0")

        if self.quantity_offset_default_days < 0:
            raise ValueError("quantity_offset_default_days must be >= 0")

        if self.debounce_seconds < 0:
            raise ValueError("debounce_seconds must be >= 0")


def default_policy() -> EstimationPolicy:
    """
    Convenience factory for the default policy.
    """
    p = EstimationPolicy()
    p.validate()
    return p
