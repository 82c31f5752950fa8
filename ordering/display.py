"""
Purpose: The customer-facing delivery line for estimates and stored orders.
What it does:
- describe_estimate: the line under the quantity field while ordering
- delivery_display_text: the line on an order card
    future-dated order      -> "Delivery: 21 Oct, 2026"
    label stored            -> "Delivery: 1 day"
    neither                 -> "Delivery updates will be sent to your email soon."
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from estimation.clock import parse_order_timestamp, to_local
from estimation.models import EstimationResult

PENDING_MESSAGE = "Delivery updates will be sent to your email soon."

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def format_day(value: Union[date, datetime]) -> str:
    return f"{value.day} {MONTHS[value.month - 1]}, {value.year}"


def describe_estimate(result: Optional[EstimationResult]) -> Optional[str]:
    """
    None while there is no estimate (blank quantity).
    """
    if result is None:
        return None
    if result.is_fallback or not result.delivery_day_label:
        return PENDING_MESSAGE
    return f"Delivery: {result.delivery_day_label} ({format_day(result.delivery_date)})"


def delivery_display_text(order_date: Optional[Union[str, datetime]],
                          delivery_day_label: Optional[str],
                          today: date,
                          local_tz=None) -> str:
    if order_date:
        local_order_day = to_local(parse_order_timestamp(order_date), local_tz).date()
        if local_order_day > today:
            return f"Delivery: {format_day(local_order_day)}"

    if delivery_day_label:
        return f"Delivery: {delivery_day_label}"

    return PENDING_MESSAGE
