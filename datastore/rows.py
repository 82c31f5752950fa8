"""
Purpose: Row -> domain model conversion at the data store boundary.
What it does:
- quantity_rule_from_row / zone_rule_from_row / zone_from_row
- Wraps offset columns in the NumericOffset | TextOffset union
- Turns unusable max_quantity values into None (the estimator skips those rules)

Shared by the REST repository and the CSV fixture loader so both read rows
the same way.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from estimation.models import QuantityRule, RuleStatus, Zone, ZoneRule
from estimation.offsets import offset_from_raw

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def optional_int(raw: Any) -> Optional[int]:
    """
    int-like column value -> int, anything else -> None.
    Accepts numeric strings ("20") and whole floats (20.0, as pandas gives for
    columns with blanks).
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if raw != raw or not raw.is_integer():
            return None
        return int(raw)
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def optional_str(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    if isinstance(raw, float) and raw != raw:
        return None
    text = str(raw).strip()
    return text or None


def _status(raw: Any) -> RuleStatus:
    text = (optional_str(raw) or "").lower()
    if text == RuleStatus.ACTIVE.value.lower():
        return RuleStatus.ACTIVE
    return RuleStatus.INACTIVE


def quantity_rule_from_row(row: Row) -> QuantityRule:
    min_quantity = optional_int(row.get("min_quantity"))
    if min_quantity is None:
        logger.warning("Quantity rule %s has no usable min_quantity, treating as 0", row.get("id"))
        min_quantity = 0

    return QuantityRule(
        id=optional_str(row.get("id")),
        franchise_id=optional_str(row.get("franchise_id")) or "",
        status=_status(row.get("status")),
        min_quantity=min_quantity,
        max_quantity=optional_int(row.get("max_quantity")),
        delivery_offset=offset_from_raw(row.get("delivery_offset_days")),
    )


def zone_rule_from_row(row: Row) -> ZoneRule:
    return ZoneRule(
        id=optional_str(row.get("id")),
        franchise_id=optional_str(row.get("franchise_id")) or "",
        zone_id=optional_str(row.get("zone_id")) or "",
        status=_status(row.get("status")),
        cutoff_time=optional_str(row.get("cutoff_time")),
        before_cutoff_offset=offset_from_raw(row.get("before_cutoff_offset_days")),
        after_cutoff_offset=offset_from_raw(row.get("after_cutoff_offset_days")),
    )


def zone_from_row(row: Row) -> Zone:
    return Zone(
        id=optional_str(row.get("id")) or "",
        name=optional_str(row.get("name")) or "",
    )
