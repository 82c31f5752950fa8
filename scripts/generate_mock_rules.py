import pandas as pd
import numpy as np
import os
import uuid

OFFSET_SPELLINGS = {
    0: ["Same Day", "same day", "0", 0],
    1: ["1 day", "1", "Next day (1)", 1],
    2: ["2 days", "2", 2],
}

def generate_mock_rules(num_franchises=5, rules_per_franchise=6, zones_per_franchise=4,
                        output_dir="sampledata/generated"):
    """
    Generates quantity/zone rule tables shaped like the store's tables.
    Offsets are written in the mixed numeric/text spellings found in live data,
    some ranges overlap and a few rows are deliberately malformed
    (missing max_quantity, unreadable offsets) so the estimator's skip paths get exercised.
    """
    quantity_rows = []
    zone_rows = []
    zones = []

    for franchise_index in range(num_franchises):
        franchise_id = f"F{franchise_index + 1}"

        # 1. Quantity rules: consecutive bands plus one wide overlapping band
        lower = 1
        for _ in range(rules_per_franchise):
            upper = lower + int(np.random.randint(5, 40))
            days = int(np.random.choice([0, 1, 2, 3, 5], p=[0.2, 0.35, 0.3, 0.1, 0.05]))
            spellings = OFFSET_SPELLINGS.get(days, [f"{days} days", days])
            quantity_rows.append({
                "id": f"qr_{str(uuid.uuid4())[:8]}",
                "franchise_id": franchise_id,
                "status": np.random.choice(["Active", "Inactive"], p=[0.9, 0.1]),
                "min_quantity": lower,
                # ~5% of rules lose their max_quantity
                "max_quantity": upper if np.random.random() > 0.05 else None,
                "delivery_offset_days": spellings[np.random.randint(len(spellings))],
            })
            lower = upper + 1

        quantity_rows.append({
            "id": f"qr_{str(uuid.uuid4())[:8]}",
            "franchise_id": franchise_id,
            "status": "Active",
            "min_quantity": 1,
            "max_quantity": lower,
            "delivery_offset_days": np.random.choice(["2 days", "soon", "3"]),
        })

        # 2. Zones and their cutoff rules
        for zone_index in range(zones_per_franchise):
            zone_id = f"Z-{franchise_id}-{zone_index + 1}"
            zones.append({"id": zone_id, "name": f"Zone {zone_index + 1} of {franchise_id}"})
            zone_rows.append({
                "id": f"zr_{str(uuid.uuid4())[:8]}",
                "franchise_id": franchise_id,
                "zone_id": zone_id,
                "status": "Active",
                "cutoff_time": f"{np.random.randint(9, 18):02d}:{np.random.choice([0, 30]):02d}",
                "before_cutoff_offset_days": np.random.choice([0, 1, None]),
                "after_cutoff_offset_days": np.random.choice([1, 2, None]),
            })

    # 3. Save to CSV
    os.makedirs(output_dir, exist_ok=True)
    pd.DataFrame(quantity_rows).to_csv(os.path.join(output_dir, "quantity_rules.csv"), index=False)
    pd.DataFrame(zone_rows).to_csv(os.path.join(output_dir, "zone_rules.csv"), index=False)
    pd.DataFrame(zones).to_csv(os.path.join(output_dir, "zones.csv"), index=False)
    print(f"Generated {len(quantity_rows)} quantity rules, {len(zone_rows)} zone rules "
          f"for {num_franchises} franchises in '{output_dir}'")

if __name__ == "__main__":
    generate_mock_rules()
