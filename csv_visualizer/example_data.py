"""
Example data generator for the CSV Data Visualizer.

Writes one synthetic sales-style CSV for demonstration and testing:
a date column, two categorical columns and four numeric columns with a
roughly linear relation between ``Advertising`` and ``Revenue``.
About 5% of numeric cells are left blank and a few rows are repeated
so the cleaning tools have something to do.
"""

import os
import random
from datetime import date, timedelta

EXAMPLE_FILENAME = "example_sales.csv"

EXAMPLE_COLUMNS = [
    "Date", "Region", "Product", "Units", "Price", "Advertising", "Revenue",
]

_REGIONS = ["North", "South", "East", "West"]
_PRODUCTS = {
    "Widget": 19.99,
    "Gadget": 34.50,
    "Gizmo": 12.75,
}


def generate_example_csv(output_dir: str, n_rows: int = 240, seed: int = 42) -> str:
    """Write the example CSV into *output_dir* and return its path.

    Parameters
    ----------
    output_dir : str
        Created if it does not exist.
    n_rows : int
        Rows before duplicates are appended.
    seed : int
        Seed for reproducible output.
    """
    os.makedirs(output_dir, exist_ok=True)
    rng = random.Random(seed)
    start = date(2024, 1, 1)

    rows = []
    for i in range(n_rows):
        product = rng.choice(list(_PRODUCTS))
        price = _PRODUCTS[product] * rng.uniform(0.9, 1.1)
        advertising = rng.uniform(200.0, 2000.0)
        # Revenue tracks advertising with noise
        revenue = 1500.0 + 3.2 * advertising + rng.gauss(0.0, 600.0)
        units = max(1, int(revenue / price))
        row = [
            (start + timedelta(days=i)).isoformat(),
            rng.choice(_REGIONS),
            product,
            str(units),
            f"{price:.2f}",
            f"{advertising:.2f}",
            f"{revenue:.2f}",
        ]
        # Blank a numeric cell now and then
        if rng.random() < 0.05:
            row[rng.randint(3, 6)] = ""
        rows.append(row)

    # Exact repeats for the duplicate remover
    for idx in rng.sample(range(n_rows), min(5, n_rows)):
        rows.append(list(rows[idx]))

    filepath = os.path.join(output_dir, EXAMPLE_FILENAME)
    with open(filepath, 'w', encoding='utf-8', newline='') as fh:
        fh.write(','.join(EXAMPLE_COLUMNS) + '\n')
        for row in rows:
            fh.write(','.join(row) + '\n')
    return filepath


if __name__ == '__main__':
    import tempfile
    path = generate_example_csv(os.path.join(tempfile.gettempdir(), 'csv_visualizer_example'))
    print(f"  {path} ({os.path.getsize(path):,} bytes)")
