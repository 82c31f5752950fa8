"""
Purpose: Customer context reads and the order write.
What it does:
- SupabaseCustomerRepository.fetch_customer_context(customer_id):
  one row of `customers` -> CustomerContext (delivery_zone is the zone id,
  zoneCity the zone name, delivery_address may be a JSON list of addresses)
- SupabaseOrderWriter.insert_order(row): one row into `orders`
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from ordering.models import CustomerContext
from .rows import optional_str
from .supabase_client import SupabaseRestClient

logger = logging.getLogger(__name__)


def _format_address(address: Dict[str, Any]) -> str:
    parts = [address.get("street"), address.get("city"), address.get("state"), address.get("zipCode")]
    return ", ".join(str(p) for p in parts if p)


def selected_address(raw: Any) -> Optional[str]:
    """
    The customer's chosen delivery address as one line.

    `delivery_address` is stored as plain text, as {"address": ...}, or as a
    list of address objects (JSON text or already decoded) where one may be
    flagged isSelected. Without a selected one the first is used.
    """
    if not raw:
        return None

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return raw

    if isinstance(raw, dict):
        return raw.get("address") or None

    if not isinstance(raw, list) or not raw:
        return None

    addresses = [a for a in raw if isinstance(a, dict)]
    selected = next((a for a in addresses if a.get("isSelected") is True), None)
    if selected:
        return _format_address(selected)

    if addresses and addresses[0] is raw[0] and addresses[0].get("street"):
        return _format_address(addresses[0])
    return None


class SupabaseCustomerRepository:

    customers_table = "customers"

    def __init__(self, client: SupabaseRestClient):
        self.client = client

    def fetch_customer_context(self, customer_id: str) -> Optional[CustomerContext]:
        rows = self.client.select(
            self.customers_table,
            {"id": self.client.eq(customer_id)},
            columns="id,franchise_id,delivery_zone,zoneCity,delivery_address",
            limit=1,
        )
        if not rows:
            logger.warning("No customer row for %s", customer_id)
            return None

        row = rows[0]
        return CustomerContext(
            customer_id=str(row.get("id")),
            franchise_id=optional_str(row.get("franchise_id")),
            zone_id=optional_str(row.get("delivery_zone")),
            zone_name=optional_str(row.get("zoneCity")),
            delivery_address=selected_address(row.get("delivery_address")),
        )


class SupabaseOrderWriter:

    orders_table = "orders"

    def __init__(self, client: SupabaseRestClient):
        self.client = client

    def insert_order(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.insert(self.orders_table, row)
