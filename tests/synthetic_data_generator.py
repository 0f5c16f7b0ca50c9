# DataLab Engine - Synthetic Data Generator
# Seeded row datasets for exercising the agent operations
# Generates: duplicates, missing cells, outliers, mixed types, messy names

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Optional

import numpy as np


class SyntheticDataGenerator:
    """
    Synthetic row datasets in the exchange format (list of flat dicts).

    Edge cases baked in:
    - Exact and case/whitespace duplicates
    - Missing cells as None, "" and absent keys
    - Extreme numeric outliers
    - Numbers stored as strings, mixed-type columns
    - Names with irregular spacing and case
    """

    FIRST_NAMES = ["alice", "Bob", "  carol ", "DAVE", "eve  mallory", "Frank"]
    CITIES = ["Paris", "paris", "Berlin", "Tokyo", "Lima"]

    def __init__(self, seed: int = 42):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    # =========================================================================
    # Core Data Generators
    # =========================================================================

    def generate_customer_rows(
        self,
        n_rows: int = 200,
        duplicate_fraction: float = 0.1,
        missing_fraction: float = 0.05,
        include_edge_cases: bool = True,
    ) -> list[dict[str, Any]]:
        """
        Customer-like rows.

        Edge cases:
        - Repeated rows, some differing only in case and spacing
        - None / "" / absent keys
        - A handful of extreme ``spend`` values
        - ``age`` sometimes stored as a string
        """
        rows: list[dict[str, Any]] = []
        for i in range(n_rows):
            rows.append({
                "id": i + 1,
                "customer_name": str(self.rng.choice(self.FIRST_NAMES)),
                "city": str(self.rng.choice(self.CITIES)),
                "age": int(self.rng.integers(18, 80)),
                "spend": round(float(self.rng.normal(100, 15)), 2),
            })

        if include_edge_cases and rows:
            n_missing = max(1, int(n_rows * missing_fraction))
            for idx in self.rng.choice(n_rows, size=n_missing, replace=False):
                row = rows[int(idx)]
                kind = int(idx) % 3
                if kind == 0:
                    row["city"] = None
                elif kind == 1:
                    row["city"] = ""
                else:
                    del row["city"]

            for idx in self.rng.choice(n_rows, size=min(3, n_rows), replace=False):
                rows[int(idx)]["spend"] = 10_000.0

            for idx in range(0, n_rows, 17):
                rows[idx]["age"] = str(rows[idx]["age"])

        n_duplicates = int(n_rows * duplicate_fraction)
        for idx in self.rng.choice(n_rows, size=n_duplicates, replace=True):
            dup = dict(rows[int(idx)])
            if include_edge_cases and isinstance(dup.get("customer_name"), str):
                dup["customer_name"] = f"  {dup['customer_name'].upper()} "
            rows.append(dup)

        return rows

    def generate_numeric_rows(
        self,
        n_rows: int = 100,
        correlation: float = 0.9,
        drift: float = 0.0,
    ) -> list[dict[str, Any]]:
        """
        Two correlated numeric columns plus an independent one.

        ``drift`` adds a linear ramp to ``x`` so the second half's mean moves.
        """
        x = self.rng.normal(50, 10, n_rows) + np.linspace(0, drift, n_rows)
        noise = self.rng.normal(0, 10, n_rows)
        y = correlation * (x - x.mean()) + np.sqrt(max(0.0, 1 - correlation ** 2)) * noise + 20
        z = self.rng.uniform(0, 1, n_rows)
        return [
            {"x": float(a), "y": float(b), "z": float(c)}
            for a, b, c in zip(x, y, z)
        ]

    def generate_time_series_rows(
        self,
        n_points: int = 24,
        start: Optional[date] = None,
    ) -> list[dict[str, Any]]:
        """Monthly-ish rows with an ISO date column and a rising value."""
        start = start or date(2024, 1, 1)
        return [
            {
                "date": (start + timedelta(days=30 * i)).isoformat(),
                "value": round(float(100 + 5 * i + self.rng.normal(0, 1)), 2),
            }
            for i in range(n_points)
        ]

    def generate_mixed_type_rows(self, n_rows: int = 20) -> list[dict[str, Any]]:
        """A column that is half numbers, half words."""
        words = ["alpha", "beta", "gamma"]
        return [
            {"mixed": i if i % 2 == 0 else words[i % len(words)], "label": f"item {i}"}
            for i in range(n_rows)
        ]

    # =========================================================================
    # Edge Case Generators
    # =========================================================================

    def generate_empty_rows(self) -> list[dict[str, Any]]:
        return []

    def generate_single_row(self) -> list[dict[str, Any]]:
        return [{"id": 1, "name": "solo", "value": 42}]

    def generate_all_missing_rows(self, n_rows: int = 5) -> list[dict[str, Any]]:
        return [{"id": i, "empty": None if i % 2 else ""} for i in range(n_rows)]

    def generate_constant_rows(self, n_rows: int = 10) -> list[dict[str, Any]]:
        return [{"a": 7, "b": float(i)} for i in range(n_rows)]
