from datetime import datetime, timezone
import time

import pytest

from datastore.in_memory import InMemoryRuleRepository
from estimation.models import NumericOffset, QuantityRule, RuleStatus, TextOffset, Zone, ZoneRule
from estimation.policy import EstimationPolicy


@pytest.fixture
def utc_policy():
    return EstimationPolicy(local_tz=timezone.utc)


@pytest.fixture
def now():
    # Monday morning, UTC
    return datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def today(now):
    return now.replace(hour=0, minute=0)


@pytest.fixture
def rule_repository():
    """
    F1: one narrow band inside a wide band, one rule without max_quantity,
    one inactive rule, two zones with cutoffs. Nothing matches above 100.
    """
    return InMemoryRuleRepository(
        quantity_rules=[
            QuantityRule("F1", 10, 20, TextOffset("1 day"), id="q_10_20"),
            QuantityRule("F1", 0, 100, NumericOffset(2), id="q_0_100"),
            QuantityRule("F1", 50, 60, TextOffset("3"), id="q_50_60"),
            QuantityRule("F1", 101, None, TextOffset("Same Day"), id="q_no_max"),
            QuantityRule("F1", 101, 1000, NumericOffset(0), status=RuleStatus.INACTIVE, id="q_inactive"),
            QuantityRule("F2", 1, 1000, NumericOffset(5), id="q_other_franchise"),
        ],
        zone_rules=[
            ZoneRule("F1", "Z-NORTH", "14:00", NumericOffset(1), NumericOffset(2), id="z_north"),
            ZoneRule("F1", "Z-SOUTH", "11:30:00", None, None, id="z_south"),
            ZoneRule("F1", "Z-EAST", "16:00", TextOffset("Same Day"), TextOffset("garbage"), id="z_east"),
            ZoneRule("F1", "Z-WEST", "", NumericOffset(1), NumericOffset(1), id="z_no_cutoff"),
            ZoneRule("F1", "Z-BROKEN", "25:61", NumericOffset(1), NumericOffset(1), id="z_broken"),
        ],
        zones=[
            Zone("Z-NORTH", "North Miami"),
            Zone("Z-SOUTH", "South Beach"),
        ],
    )


@pytest.fixture
def eastern_system_tz(monkeypatch):
    """
    US Eastern as the process-wide local zone (no local_tz configured).
    A POSIX rule string, so no tz database is needed: DST starts 2026-03-08
    and ends 2026-11-01.
    """
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "EST5EDT,M3.2.0,M11.1.0")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
