import asyncio
from datetime import datetime, timezone

import pytest

from estimation.estimator import DeliveryDateEstimator
from estimation.models import EstimationResult
from estimation.offsets import day_label
from estimation.policy import EstimationPolicy, default_policy
from estimation.scheduler import EstimateRequest, RecomputeScheduler, parse_quantity

FAST_POLICY = EstimationPolicy(debounce_seconds=0.05)


def make_result(offset_days: int) -> EstimationResult:
    return EstimationResult(
        delivery_date=datetime(2026, 10, 19, tzinfo=timezone.utc),
        delivery_day_label=day_label(offset_days),
        is_fallback=False,
        offset_days=offset_days,
    )


class MockEstimate:
    """
    Async estimate function that answers `quantity` days after an optional delay,
    and records every request it received.
    """
    def __init__(self, delays=None):
        self.delays = delays or {}
        self.requests = []

    async def __call__(self, request: EstimateRequest) -> EstimationResult:
        self.requests.append(request)
        await asyncio.sleep(self.delays.get(request.quantity, 0))
        return make_result(request.quantity)


def test_default_debounce_is_half_a_second():
    assert default_policy().debounce_seconds == 0.5


@pytest.mark.parametrize("text, quantity", [
    ("12", 12), (" 7 ", 7), ("", None), ("   ", None), (None, None), ("0", None), ("abc", None), ("-3", None),
])
def test_parse_quantity(text, quantity):
    assert parse_quantity(text) == quantity


def test_last_dispatched_call_wins_even_when_it_finishes_first():
    """
    A is slow (500ms), B is fast (50ms) and dispatched 10ms later.
    Only B's result may ever reach the displayed state.
    """
    estimate = MockEstimate(delays={1: 0.5, 2: 0.05})
    applied = []

    async def scenario():
        scheduler = RecomputeScheduler(
            estimate, on_change=lambda state: applied.append(state.result) if state.result else None
        )
        call_a = scheduler.dispatch(EstimateRequest("F1", 1))
        await asyncio.sleep(0.01)
        call_b = scheduler.dispatch(EstimateRequest("F1", 2))
        await asyncio.gather(call_a, call_b)
        return scheduler

    scheduler = asyncio.run(scenario())

    assert [result.offset_days for result in applied] == [2]
    assert scheduler.state.result.offset_days == 2
    assert scheduler.state.latest_call_id == 2
    assert scheduler.state.is_loading is False


def test_blank_quantity_clears_immediately():
    estimate = MockEstimate()

    async def scenario():
        scheduler = RecomputeScheduler(estimate, policy=FAST_POLICY)
        await scheduler.dispatch(EstimateRequest("F1", 3))
        assert scheduler.state.result is not None

        scheduler.on_quantity_changed("  ")
        # no await between the change and the check
        assert scheduler.state.result is None
        return scheduler

    asyncio.run(scenario())


def test_clearing_discards_results_still_in_flight():
    estimate = MockEstimate(delays={4: 0.1})

    async def scenario():
        scheduler = RecomputeScheduler(estimate, policy=FAST_POLICY)
        scheduler.on_quantity_changed("4")
        in_flight = scheduler.dispatch()
        scheduler.on_quantity_changed("")
        await in_flight
        await asyncio.sleep(FAST_POLICY.debounce_seconds * 2)
        return scheduler

    scheduler = asyncio.run(scenario())

    assert scheduler.state.result is None
    assert len(estimate.requests) == 1


def test_typing_is_debounced_to_the_last_value():
    estimate = MockEstimate()

    async def scenario():
        scheduler = RecomputeScheduler(estimate, policy=FAST_POLICY)
        scheduler.set_context("F1", "Z-NORTH", "North Miami")

        for text in ("1", "12", "120"):
            scheduler.on_quantity_changed(text)
            await asyncio.sleep(0.01)

        # still inside the quiet window
        assert estimate.requests == []

        await asyncio.sleep(FAST_POLICY.debounce_seconds * 3)
        await scheduler.drain()
        return scheduler

    scheduler = asyncio.run(scenario())

    assert estimate.requests == [EstimateRequest("F1", 120, "Z-NORTH", "North Miami")]
    assert scheduler.state.result.offset_days == 120


def test_context_load_recomputes_for_existing_quantity():
    estimate = MockEstimate()

    async def scenario():
        scheduler = RecomputeScheduler(estimate, policy=FAST_POLICY)
        scheduler.on_quantity_changed("12")
        scheduler.set_context("F9", zone_name="Downtown")
        await asyncio.sleep(FAST_POLICY.debounce_seconds * 3)
        await scheduler.drain()

    asyncio.run(scenario())

    assert estimate.requests == [EstimateRequest("F9", 12, None, "Downtown")]


def test_close_cancels_pending_timer_and_silences_listeners():
    estimate = MockEstimate(delays={6: 0.05})
    notified = []

    async def scenario():
        scheduler = RecomputeScheduler(estimate, policy=FAST_POLICY, on_change=notified.append)

        in_flight = scheduler.dispatch(EstimateRequest("F1", 6))
        scheduler.on_quantity_changed("5")
        notified.clear()

        scheduler.close()
        await in_flight
        await asyncio.sleep(FAST_POLICY.debounce_seconds * 3)

        scheduler.on_quantity_changed("7")
        assert scheduler.dispatch(EstimateRequest("F1", 8)) is None
        return scheduler

    scheduler = asyncio.run(scenario())

    assert [request.quantity for request in estimate.requests] == [6]
    assert notified == []
    assert scheduler.state.result is None


def test_failing_estimate_keeps_previous_result():
    class FlakyEstimate(MockEstimate):
        async def __call__(self, request):
            if request.quantity == 13:
                raise RuntimeError("boom")
            return await super().__call__(request)

    async def scenario():
        scheduler = RecomputeScheduler(FlakyEstimate(), policy=FAST_POLICY)
        await scheduler.dispatch(EstimateRequest("F1", 2))
        await scheduler.dispatch(EstimateRequest("F1", 13))
        return scheduler

    scheduler = asyncio.run(scenario())

    assert scheduler.state.result.offset_days == 2
    assert scheduler.state.is_loading is False


def test_for_estimator_drives_the_real_engine(rule_repository):
    estimator = DeliveryDateEstimator(rule_repository, EstimationPolicy(debounce_seconds=0.05))

    async def scenario():
        scheduler = RecomputeScheduler.for_estimator(estimator)
        scheduler.set_context("F1", "Z-NORTH")
        scheduler.on_quantity_changed("12")
        await asyncio.sleep(0.2)
        await scheduler.drain()
        return scheduler

    scheduler = asyncio.run(scenario())

    assert scheduler.state.result.delivery_day_label == "1 day"
    assert scheduler.state.result.is_fallback is False
