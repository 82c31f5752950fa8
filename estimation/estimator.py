"""
Purpose: The delivery-date estimation engine (single entry point).
What it does:

Given (franchise_id, quantity, order_timestamp, zone_id, zone_name) decides
how many days until delivery:

- quantity rules are checked FIRST; if any matches, zone rules are never fetched
- overlapping quantity ranges: the narrowest (max - min) wins, equal widths
  go to the lowest min_quantity, then to fetch order
- otherwise the zone rule (by zone id, or by zone name -> zone id) decides by
  cutoff time: orders at or after the cutoff get the "after" offset
- otherwise fallback: today, no label, is_fallback=True

Never raises for bad rule data or an unreachable store: malformed rules are
skipped and logged, DataAccessError degrades to the fallback result.

Rule: the estimator is stateless. Safe to call concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import List, Optional, Sequence, Union

from datastore.repository import DataAccessError, RuleRepository
from .clock import add_days, local_midnight, minutes_since_midnight, parse_cutoff_minutes, parse_order_timestamp
from .models import EstimateSource, EstimationResult, QuantityRule, RuleStatus, ZoneRule
from .offsets import day_label, normalize_offset
from .policy import EstimationPolicy, default_policy

logger = logging.getLogger(__name__)

Timestamp = Union[str, datetime]


def select_quantity_rule(rules: Sequence[QuantityRule], quantity: int) -> Optional[QuantityRule]:
    """
    Pick the quantity rule for `quantity`.

    Rules without a usable max_quantity never match. Among matching rules the
    narrowest range wins; equal widths resolve to the lowest min_quantity and
    then to the order the rules were fetched in.
    """
    matching: List[QuantityRule] = []
    for rule in rules:
        if rule.status != RuleStatus.ACTIVE:
            continue
        if rule.max_quantity is None:
            logger.warning("Skipping quantity rule %s: missing or invalid max_quantity", rule.id)
            continue
        if rule.covers(quantity):
            matching.append(rule)

    if not matching:
        return None

    # min() keeps the first of equal keys, which gives the fetch-order tie-break
    return min(matching, key=lambda rule: (rule.width, rule.min_quantity))


def is_after_cutoff(order_timestamp: Timestamp, cutoff_time: str, policy: EstimationPolicy) -> bool:
    """
    The cutoff minute itself counts as "after".
    """
    cutoff_minutes = parse_cutoff_minutes(cutoff_time)
    order_minutes = minutes_since_midnight(parse_order_timestamp(order_timestamp), policy.local_tz)
    return order_minutes >= cutoff_minutes


class DeliveryDateEstimator:
    """
    Rule evaluation over a RuleRepository.

    estimate() is synchronous (the repository does blocking I/O);
    estimate_async() runs it on a worker thread for use from an event loop.
    """

    def __init__(self, repository: RuleRepository, policy: Optional[EstimationPolicy] = None):
        self.repository = repository
        self.policy = policy or default_policy()
        self.policy.validate()

    def estimate(self,
                 franchise_id: Optional[str],
                 quantity: int,
                 order_timestamp: Optional[Timestamp] = None,
                 zone_id: Optional[str] = None,
                 zone_name: Optional[str] = None,
                 *,
                 now: Optional[datetime] = None,
                 ) -> EstimationResult:
        """
        Returns the EstimationResult for one order context.

        Parameters
        ----------
        franchise_id:
            Franchise whose rules apply. Missing -> fallback.
        quantity:
            Order quantity (cases).
        order_timestamp:
            When the order is placed. ISO strings without an offset are UTC.
            Defaults to `now`.
        zone_id / zone_name:
            Customer zone. zone_name is only used when zone_id finds no rule.
        now:
            Current time, decides "today". Defaults to the wall clock.
        """
        today = local_midnight(now, self.policy.local_tz)
        if order_timestamp is None:
            order_timestamp = now or datetime.now(today.tzinfo)

        if not franchise_id:
            return EstimationResult.fallback(today)

        try:
            result = self._estimate_from_quantity(franchise_id, quantity, today)
            if result is not None:
                return result

            if zone_id or zone_name:
                result = self._estimate_from_zone(franchise_id, order_timestamp, zone_id, zone_name, today)
                if result is not None:
                    return result
        except DataAccessError as e:
            logger.warning("Delivery rules unavailable for franchise %s, using fallback: %s", franchise_id, e)
            return EstimationResult.fallback(today)

        logger.debug("No delivery rule matched franchise=%s quantity=%s zone=%s/%s",
                     franchise_id, quantity, zone_id, zone_name)
        return EstimationResult.fallback(today)

    async def estimate_async(self,
                             franchise_id: Optional[str],
                             quantity: int,
                             order_timestamp: Optional[Timestamp] = None,
                             zone_id: Optional[str] = None,
                             zone_name: Optional[str] = None,
                             *,
                             now: Optional[datetime] = None,
                             ) -> EstimationResult:
        return await asyncio.to_thread(
            self.estimate,
            franchise_id,
            quantity,
            order_timestamp,
            zone_id,
            zone_name,
            now=now,
        )

    # --- Quantity path ---

    def _estimate_from_quantity(self, franchise_id: str, quantity: int, today: datetime) -> Optional[EstimationResult]:
        rules = self.repository.fetch_active_quantity_rules(franchise_id)
        rule = select_quantity_rule(rules, quantity)
        if rule is None:
            return None

        offset_days = normalize_offset(rule.delivery_offset, self.policy.quantity_offset_default_days)
        logger.debug("Quantity rule %s [%s, %s] matched quantity %s -> %d day(s)",
                     rule.id, rule.min_quantity, rule.max_quantity, quantity, offset_days)
        return self._result(today, offset_days, EstimateSource.QUANTITY)

    # --- Zone path ---

    def _find_zone_rule(self, franchise_id: str, zone_id: Optional[str], zone_name: Optional[str]) -> Optional[ZoneRule]:
        if zone_id:
            rule = self.repository.fetch_active_zone_rule(franchise_id, str(zone_id))
            if rule is not None:
                return rule

        if zone_name:
            resolved_id = self.repository.resolve_zone_id_by_name(zone_name)
            if resolved_id and str(resolved_id) != str(zone_id or ""):
                return self.repository.fetch_active_zone_rule(franchise_id, str(resolved_id))

        return None

    def _estimate_from_zone(self,
                            franchise_id: str,
                            order_timestamp: Timestamp,
                            zone_id: Optional[str],
                            zone_name: Optional[str],
                            today: datetime,
                            ) -> Optional[EstimationResult]:
        rule = self._find_zone_rule(franchise_id, zone_id, zone_name)
        if rule is None or not (rule.cutoff_time or "").strip():
            return None

        try:
            after = is_after_cutoff(order_timestamp, rule.cutoff_time, self.policy)
        except ValueError as e:
            logger.warning("Skipping zone rule %s: %s", rule.id, e)
            return None

        if after:
            offset_days = normalize_offset(rule.after_cutoff_offset, self.policy.default_after_cutoff_days)
        else:
            offset_days = normalize_offset(rule.before_cutoff_offset, self.policy.default_before_cutoff_days)

        logger.debug("Zone rule %s (cutoff %s, %s) -> %d day(s)",
                     rule.id, rule.cutoff_time, "after" if after else "before", offset_days)
        return self._result(today, offset_days, EstimateSource.ZONE)

    def _result(self, today: datetime, offset_days: int, source: EstimateSource) -> EstimationResult:
        return EstimationResult(
            delivery_date=add_days(today, offset_days, self.policy.local_tz),
            delivery_day_label=day_label(offset_days),
            is_fallback=False,
            offset_days=offset_days,
            source=source,
        )
