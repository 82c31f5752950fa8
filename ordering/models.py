"""
Purpose: Domain models for order submission.
What it does:
- CustomerContext: what the order screen loads once for the signed-in customer
  (franchise and zone feed the estimator, address goes on the order)
- OrderDraft: the form fields the customer fills in
- OrderStatus: the status a fresh order is written with

Rule: models only.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    PROCESSING = "Processing"


@dataclass(frozen=True)
class CustomerContext:
    customer_id: str
    franchise_id: Optional[str] = None
    zone_id: Optional[str] = None
    zone_name: Optional[str] = None
    delivery_address: Optional[str] = None


@dataclass
class OrderDraft:
    quantity: str
    po_number: str = ""
    special_instructions: str = ""

    # Custom-logo coconuts for a special event
    special_event: bool = False
    special_event_logo_url: Optional[str] = None
