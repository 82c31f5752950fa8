"""
Purpose: Debounced, race-safe re-estimation while the customer edits an order.
What it does:

- Blank (or non-numeric) quantity -> clears the displayed estimate right away,
  cancels the pending timer and invalidates in-flight calls
- Non-blank quantity / context loaded -> (re)starts the debounce timer;
  the estimator runs only after `debounce_seconds` without further changes
- Every dispatch takes the next call id. A result is applied only if its call
  id is still the latest one: last dispatched wins, whatever the completion order
- close() cancels the timer; nothing is applied or notified afterwards

State (EstimateState) is owned here and written only from the completion
handler after the staleness check. Runs on a single asyncio event loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, List, Optional, Set

from .estimator import DeliveryDateEstimator
from .models import EstimationResult
from .policy import EstimationPolicy, default_policy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EstimateRequest:
    franchise_id: Optional[str]
    quantity: int
    zone_id: Optional[str] = None
    zone_name: Optional[str] = None


@dataclass(frozen=True)
class EstimateState:
    """
    What the order screen shows. `result` is None while nothing is estimated.
    """
    result: Optional[EstimationResult] = None
    latest_call_id: int = 0
    is_loading: bool = False


EstimateFn = Callable[[EstimateRequest], Awaitable[EstimationResult]]
StateListener = Callable[[EstimateState], None]


def parse_quantity(text: Optional[str]) -> Optional[int]:
    """
    Quantity field text -> positive int, or None for blank/unusable input.
    """
    if text is None:
        return None
    text = text.strip()
    if not text.isdigit():
        return None
    quantity = int(text)
    return quantity if quantity > 0 else None


class RecomputeScheduler:
    """
    Drives an async estimate function from quantity and zone context changes.
    Must be used from within a running event loop.
    """

    def __init__(self,
                 estimate: EstimateFn,
                 *,
                 policy: Optional[EstimationPolicy] = None,
                 on_change: Optional[StateListener] = None):
        self._estimate = estimate
        self.policy = policy or default_policy()
        self.policy.validate()

        self._listeners: List[StateListener] = [on_change] if on_change else []
        self._state = EstimateState()

        self._call_counter = 0
        self._timer: Optional[asyncio.TimerHandle] = None
        self._in_flight: Set[asyncio.Task] = set()
        self._closed = False

        # Current inputs
        self._quantity: Optional[int] = None
        self._franchise_id: Optional[str] = None
        self._zone_id: Optional[str] = None
        self._zone_name: Optional[str] = None

    @classmethod
    def for_estimator(cls, estimator: DeliveryDateEstimator, **kwargs) -> RecomputeScheduler:
        """
        Wire a DeliveryDateEstimator in. The order timestamp is the dispatch time.
        """
        async def estimate(request: EstimateRequest) -> EstimationResult:
            return await estimator.estimate_async(
                request.franchise_id,
                request.quantity,
                None,
                request.zone_id,
                request.zone_name,
            )

        kwargs.setdefault("policy", estimator.policy)
        return cls(estimate, **kwargs)

    # --- Public API ---

    @property
    def state(self) -> EstimateState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def current_request(self) -> Optional[EstimateRequest]:
        if self._quantity is None:
            return None
        return EstimateRequest(
            franchise_id=self._franchise_id,
            quantity=self._quantity,
            zone_id=self._zone_id,
            zone_name=self._zone_name,
        )

    def on_quantity_changed(self, text: Optional[str]) -> None:
        if self._closed:
            return

        self._quantity = parse_quantity(text)
        if self._quantity is None:
            self.clear()
            return

        self._restart_timer()

    def set_context(self,
                    franchise_id: Optional[str],
                    zone_id: Optional[str] = None,
                    zone_name: Optional[str] = None) -> None:
        """
        Called once the customer's franchise/zone have loaded.
        """
        if self._closed:
            return

        self._franchise_id = franchise_id
        self._zone_id = zone_id
        self._zone_name = zone_name

        if self._quantity is not None:
            self._restart_timer()

    def clear(self) -> None:
        """
        Synchronously drop the displayed estimate. Results of calls already in
        flight are discarded when they arrive.
        """
        self._cancel_timer()
        self._call_counter += 1
        self._set_state(EstimateState(result=None, latest_call_id=self._call_counter, is_loading=False))

    def dispatch(self, request: Optional[EstimateRequest] = None) -> Optional[asyncio.Task]:
        """
        Run the estimate now, tagged with a new call id.
        Returns the task, or None when there is nothing to estimate.
        """
        if self._closed:
            return None

        request = request or self.current_request()
        if request is None:
            return None

        self._call_counter += 1
        call_id = self._call_counter
        self._set_state(replace(self._state, latest_call_id=call_id, is_loading=True))

        task = asyncio.get_running_loop().create_task(self._run(call_id, request))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def drain(self) -> None:
        """
        Wait for every in-flight estimate to finish.
        """
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    def close(self) -> None:
        """
        Teardown: cancel the pending timer. In-flight calls may still finish
        but their results are dropped.
        """
        self._closed = True
        self._cancel_timer()

    # --- Internal ---

    def _restart_timer(self) -> None:
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.policy.debounce_seconds, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        if self._closed:
            return
        self.dispatch()

    async def _run(self, call_id: int, request: EstimateRequest) -> Optional[EstimationResult]:
        try:
            result = await self._estimate(request)
        except Exception:
            logger.warning("Delivery estimate call %d failed", call_id, exc_info=True)
            if self._is_current(call_id):
                self._set_state(replace(self._state, is_loading=False))
            return None

        self._apply(call_id, result)
        return result

    def _is_current(self, call_id: int) -> bool:
        return not self._closed and call_id == self._call_counter

    def _apply(self, call_id: int, result: EstimationResult) -> bool:
        if not self._is_current(call_id):
            logger.debug("Discarding stale estimate %d (latest is %d)", call_id, self._call_counter)
            return False

        self._set_state(EstimateState(result=result, latest_call_id=call_id, is_loading=False))
        return True

    def _set_state(self, state: EstimateState) -> None:
        self._state = state
        if self._closed:
            return
        for listener in list(self._listeners):
            listener(state)
