"""
Purpose: Order submission (the one place the estimate is persisted).
What it does:
- validates the draft (positive whole quantity, a customer, a logo for special events)
- awaits ONE final estimate from the customer's final quantity/zone context;
  independent of any debounced recomputation still in flight on the screen
- builds the `orders` row and writes it once through an OrderWriter

The estimate is never recomputed after the order exists.
"""

from __future__ import annotations

import logging
import random
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol

from estimation.estimator import DeliveryDateEstimator
from estimation.models import EstimationResult
from estimation.scheduler import parse_quantity
from .models import CustomerContext, OrderDraft, OrderStatus

logger = logging.getLogger(__name__)

SPECIAL_EVENT_AMOUNT = 150


class InvalidOrderError(ValueError):
    """Raised when a draft cannot be submitted."""
    pass


class OrderWriter(Protocol):

    def insert_order(self, row: Dict[str, Any]) -> Dict[str, Any]:
        ...


def generate_order_name(now: Optional[datetime] = None) -> str:
    """
    ORD-<epoch milliseconds>-<random 0..999999>
    """
    millis = int((now.timestamp() if now else time.time()) * 1000)
    return f"ORD-{millis}-{random.randrange(1000000)}"


def to_utc_iso(value: datetime) -> str:
    """
    ISO-8601 in UTC with a trailing Z, millisecond precision.
    """
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def build_order_row(customer: CustomerContext,
                    draft: OrderDraft,
                    quantity: int,
                    estimate: EstimationResult,
                    now: datetime,
                    ) -> Dict[str, Any]:
    """
    The `orders` row. delivery_day_date is None for fallback estimates.
    """
    return {
        "order_name": generate_order_name(now),
        "customer_id": customer.customer_id,
        "quantity": quantity,
        "po_number": draft.po_number.strip() or None,
        "delivery_address": customer.delivery_address or None,
        "special_instructions": draft.special_instructions.strip() or None,
        "special_event_logo": draft.special_event_logo_url if draft.special_event else None,
        "special_event_amount": SPECIAL_EVENT_AMOUNT if draft.special_event else None,
        "order_date": to_utc_iso(now),
        "delivery_date": to_utc_iso(estimate.delivery_date),
        "delivery_day_date": None if estimate.is_fallback else estimate.delivery_day_label,
        "status": OrderStatus.PROCESSING.value,
    }


def validate_draft(customer: Optional[CustomerContext], draft: OrderDraft) -> int:
    """
    Returns the parsed quantity or raises InvalidOrderError.
    """
    if customer is None or not customer.customer_id:
        raise InvalidOrderError("Customer information not found. Please login again.")

    quantity = parse_quantity(draft.quantity)
    if quantity is None:
        raise InvalidOrderError("Quantity must be a valid positive number")

    if draft.special_event and not draft.special_event_logo_url:
        raise InvalidOrderError("Logo is required for Special Event")

    return quantity


async def submit_order(customer: Optional[CustomerContext],
                       draft: OrderDraft,
                       estimator: DeliveryDateEstimator,
                       writer: OrderWriter,
                       *,
                       now: Optional[datetime] = None,
                       ) -> Dict[str, Any]:
    """
    Validate, estimate once, write once. Returns the stored row.

    Estimation problems never block the order (the estimator degrades to a
    fallback). A failing write propagates to the caller.
    """
    quantity = validate_draft(customer, draft)
    now = now or datetime.now(timezone.utc)

    estimate = await estimator.estimate_async(
        customer.franchise_id,
        quantity,
        now,
        customer.zone_id,
        customer.zone_name,
        now=now,
    )

    row = build_order_row(customer, draft, quantity, estimate, now)
    stored = writer.insert_order(row)
    logger.info("Order %s created for customer %s (delivery %s)",
                row["order_name"], customer.customer_id, row["delivery_day_date"] or "pending")
    return stored
