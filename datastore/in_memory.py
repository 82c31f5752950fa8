"""
Purpose: In-memory RuleRepository for tests and the simulation script.
What it does:
- Holds QuantityRule / ZoneRule / Zone lists
- Applies the same filters the REST repository asks the store for
  (franchise, Active status, string compared zone id, substring name match)
- Records every call in `calls` so tests can assert what was (not) fetched
- Optional `fail_with` to simulate an unreachable store
- from_csv: loads the three tables from CSV files with pandas
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pandas as pd

from estimation.models import QuantityRule, RuleStatus, Zone, ZoneRule
from .repository import DataAccessError
from .rows import quantity_rule_from_row, zone_rule_from_row, zone_from_row


@dataclass
class InMemoryRuleRepository:
    quantity_rules: List[QuantityRule] = field(default_factory=list)
    zone_rules: List[ZoneRule] = field(default_factory=list)
    zones: List[Zone] = field(default_factory=list)

    # Set to make every fetch raise, e.g. DataAccessError("offline")
    fail_with: Optional[Exception] = None

    calls: List[Tuple[str, tuple]] = field(default_factory=list)

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, args))
        if self.fail_with is not None:
            raise self.fail_with

    def calls_to(self, name: str) -> List[tuple]:
        return [args for call_name, args in self.calls if call_name == name]

    # --- RuleRepository ---

    def fetch_active_quantity_rules(self, franchise_id: str) -> List[QuantityRule]:
        self._record("fetch_active_quantity_rules", franchise_id)
        return [
            rule for rule in self.quantity_rules
            if rule.franchise_id == franchise_id and rule.status == RuleStatus.ACTIVE
        ]

    def fetch_active_zone_rule(self, franchise_id: str, zone_id: str) -> Optional[ZoneRule]:
        self._record("fetch_active_zone_rule", franchise_id, zone_id)
        for rule in self.zone_rules:
            if (
                rule.franchise_id == franchise_id
                and str(rule.zone_id) == str(zone_id)
                and rule.status == RuleStatus.ACTIVE
            ):
                return rule
        return None

    def resolve_zone_id_by_name(self, name_substring: str) -> Optional[str]:
        self._record("resolve_zone_id_by_name", name_substring)
        needle = name_substring.strip().lower()
        if not needle:
            return None
        for zone in self.zones:
            if needle in zone.name.lower():
                return zone.id
        return None

    # --- Loading ---

    @classmethod
    def from_csv(cls,
                 quantity_rules_path: str,
                 zone_rules_path: Optional[str] = None,
                 zones_path: Optional[str] = None,
                 ) -> InMemoryRuleRepository:
        """
        Load fixture tables. Columns follow the store's tables
        (see sampledata/*.csv). Every column is read as text so offsets such
        as "Same Day" and "2" go through the same parsing as live rows.
        """
        def read_rows(path: Optional[str]) -> List[dict]:
            if not path:
                return []
            df = pd.read_csv(path, dtype=str)
            df = df.astype(object).where(pd.notna(df), None)
            return df.to_dict(orient="records")

        return cls(
            quantity_rules=[quantity_rule_from_row(r) for r in read_rows(quantity_rules_path)],
            zone_rules=[zone_rule_from_row(r) for r in read_rows(zone_rules_path)],
            zones=[zone_from_row(r) for r in read_rows(zones_path)],
        )


def unreachable_repository(message: str = "data store unreachable") -> InMemoryRuleRepository:
    return InMemoryRuleRepository(fail_with=DataAccessError(message))
