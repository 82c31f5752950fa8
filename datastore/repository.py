"""
Purpose: The read contract the estimator consumes.
What it does:
- Defines RuleRepository (structural typing, any object with these methods works):
   - fetch_active_quantity_rules(franchise_id) -> List[QuantityRule]
   - fetch_active_zone_rule(franchise_id, zone_id) -> Optional[ZoneRule]
   - resolve_zone_id_by_name(name_substring) -> Optional[str]
- Defines DataAccessError, the one exception implementations raise for
  transport/storage failures.

Rule: contract only. Implementations live in supabase_rules.py and in_memory.py.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Protocol

if TYPE_CHECKING:
    from estimation.models import QuantityRule, ZoneRule


class DataAccessError(Exception):
    """Raised when the data store cannot be reached or returns an unusable answer."""
    pass


class RuleRepository(Protocol):

    def fetch_active_quantity_rules(self, franchise_id: str) -> List[QuantityRule]:
        ...

    def fetch_active_zone_rule(self, franchise_id: str, zone_id: str) -> Optional[ZoneRule]:
        ...

    def resolve_zone_id_by_name(self, name_substring: str) -> Optional[str]:
        ...
