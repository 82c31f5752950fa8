import asyncio
import csv
import logging
import os
import time
from datetime import datetime, timedelta, timezone

from datastore.in_memory import InMemoryRuleRepository
from estimation.estimator import DeliveryDateEstimator
from estimation.policy import EstimationPolicy
from estimation.scheduler import EstimateRequest, RecomputeScheduler
from ordering.display import describe_estimate


class SlowRepository:
    """
    Wraps a repository and adds a fixed latency to every fetch, the way a
    remote store would, so stale recomputations actually overlap.
    """
    def __init__(self, inner, delay_sec):
        self.inner = inner
        self.delay_sec = delay_sec

    def fetch_active_quantity_rules(self, franchise_id):
        time.sleep(self.delay_sec)
        return self.inner.fetch_active_quantity_rules(franchise_id)

    def fetch_active_zone_rule(self, franchise_id, zone_id):
        return self.inner.fetch_active_zone_rule(franchise_id, zone_id)

    def resolve_zone_id_by_name(self, name_substring):
        return self.inner.resolve_zone_id_by_name(name_substring)


def load_repository(base_dir):
    return InMemoryRuleRepository.from_csv(
        os.path.join(base_dir, "sampledata/quantity_rules.csv"),
        os.path.join(base_dir, "sampledata/zone_rules.csv"),
        os.path.join(base_dir, "sampledata/zones.csv"),
    )


def run_rule_grid(estimator, output_path):
    """
    Every (franchise, zone, quantity, hour) combination in the sample data -> one CSV row.
    """
    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    contexts = [
        ("F1", "Z-NORTH", None),
        ("F1", None, "south beach"),
        ("F2", "Z-EAST", None),
        ("F2", "Z-NORTH", None),
        ("F3", None, None),
    ]

    with open(output_path, "w", newline='') as file:
        writer = csv.writer(file)
        writer.writerow(["franchise_id", "zone_id", "zone_name", "quantity", "order_time_utc",
                         "delivery_date", "label", "source", "is_fallback"])

        for franchise_id, zone_id, zone_name in contexts:
            for quantity in (5, 12, 55, 150, 600):
                for hour in (9, 13, 14, 17):
                    order_time = today + timedelta(hours=hour)
                    result = estimator.estimate(franchise_id, quantity, order_time, zone_id, zone_name,
                                                now=order_time)
                    writer.writerow([franchise_id, zone_id, zone_name, quantity, order_time.isoformat(),
                                     result.delivery_date.date().isoformat(), result.delivery_day_label,
                                     result.source.value, result.is_fallback])


async def run_typing_session(estimator):
    """
    A customer types "1", "12", "120" quickly, then pauses, then clears the field.
    Only the last debounced value should ever reach the screen.
    """
    shown = []
    scheduler = RecomputeScheduler.for_estimator(
        estimator, on_change=lambda state: shown.append(describe_estimate(state.result))
    )
    scheduler.set_context("F1", "Z-NORTH", "North Miami")

    for text in ("1", "12", "120"):
        scheduler.on_quantity_changed(text)
        await asyncio.sleep(0.1)

    await asyncio.sleep(scheduler.policy.debounce_seconds + 0.1)
    await scheduler.drain()
    print(f"After typing '120': {describe_estimate(scheduler.state.result)}")

    # Two overlapping dispatches: the older one must be dropped
    first = scheduler.dispatch(EstimateRequest("F1", 12, "Z-NORTH"))
    await asyncio.sleep(0.01)
    second = scheduler.dispatch(EstimateRequest("F1", 5, "Z-NORTH"))
    await asyncio.gather(first, second)
    print(f"After racing 12 vs 5: {describe_estimate(scheduler.state.result)}")

    scheduler.on_quantity_changed("")
    print(f"After clearing: {describe_estimate(scheduler.state.result)}")
    scheduler.close()
    return shown


def run_simulation():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    print("=== STARTING DELIVERY ESTIMATION SIMULATION ===")

    # 1. Load Data
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    repository = load_repository(base_dir)
    print(f"Loaded {len(repository.quantity_rules)} quantity rules, "
          f"{len(repository.zone_rules)} zone rules, {len(repository.zones)} zones.\n")

    # 2. Rule grid
    estimator = DeliveryDateEstimator(repository, EstimationPolicy(local_tz=timezone.utc))
    output_path = os.path.join(base_dir, "estimation_results.csv")
    run_rule_grid(estimator, output_path)
    print(f"Rule grid written to '{output_path}'.\n")

    # 3. Debounced recomputation against a slow store
    slow_estimator = DeliveryDateEstimator(SlowRepository(repository, 0.2), estimator.policy)
    shown = asyncio.run(run_typing_session(slow_estimator))
    print(f"\nScreen updates: {len(shown)}")

    print("\n=== SIMULATION COMPLETE ===")

if __name__ == "__main__":
    run_simulation()
