"""
Purpose: RuleRepository backed by the hosted REST data store.
What it does:
- delivery_quantity_rules: all Active rows of a franchise
- delivery_zone_rules: the Active row of a franchise for one zone id
- zones: case-insensitive substring lookup of a zone id by name

Every failure surfaces as DataAccessError (raised by SupabaseRestClient).
"""

from __future__ import annotations

from typing import List, Optional

from estimation.models import QuantityRule, RuleStatus, ZoneRule
from .rows import quantity_rule_from_row, zone_rule_from_row, zone_from_row
from .supabase_client import SupabaseRestClient


class SupabaseRuleRepository:

    quantity_rules_table = "delivery_quantity_rules"
    zone_rules_table = "delivery_zone_rules"
    zones_table = "zones"

    def __init__(self, client: SupabaseRestClient):
        self.client = client

    def fetch_active_quantity_rules(self, franchise_id: str) -> List[QuantityRule]:
        rows = self.client.select(
            self.quantity_rules_table,
            {
                "franchise_id": self.client.eq(franchise_id),
                "status": self.client.eq(RuleStatus.ACTIVE.value),
            },
            order="id",
        )
        return [quantity_rule_from_row(row) for row in rows]

    def fetch_active_zone_rule(self, franchise_id: str, zone_id: str) -> Optional[ZoneRule]:
        rows = self.client.select(
            self.zone_rules_table,
            {
                "franchise_id": self.client.eq(franchise_id),
                "zone_id": self.client.eq(zone_id),
                "status": self.client.eq(RuleStatus.ACTIVE.value),
            },
            limit=1,
        )
        if not rows:
            return None
        return zone_rule_from_row(rows[0])

    def resolve_zone_id_by_name(self, name_substring: str) -> Optional[str]:
        name_substring = name_substring.strip()
        if not name_substring:
            return None

        rows = self.client.select(
            self.zones_table,
            {"name": self.client.ilike_contains(name_substring)},
            columns="id,name",
            order="id",
            limit=1,
        )
        if not rows:
            return None
        return zone_from_row(rows[0]).id or None
