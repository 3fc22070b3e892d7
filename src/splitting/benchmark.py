"""
src/splitting/benchmark.py
──────────────────────────────────────────────────────────────────────────────
Benchmark: exact two-phase splitter against a greedy set-cover baseline.

Random eligibility tables and baskets are drawn from a seeded numpy
Generator. Each scenario is solved by:
  • greedy      repeatedly take the delivery type covering most open items
  • exact       BasketSplitter, Phase 2 candidates sequential
  • pooled      BasketSplitter, Phase 2 candidates on a thread pool

Metrics per scenario:
  • Delivery groups used
  • Largest group size
  • Solve time (wall-clock, ms)

Usage:
    python -m src.splitting.benchmark                    # 30 scenarios, defaults
    python -m src.splitting.benchmark --scenarios 100
    python -m src.splitting.benchmark --items 20 --deliveries 8 --workers 4
"""

from __future__ import annotations

import argparse
import time
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from src.basket.catalog import DeliveryCatalog, EligibilityTable
from src.basket.config import SplitterConfig
from src.splitting.solver import Assignment, BasketSplitter


# ── Scenario generation ───────────────────────────────────────────────────────


@dataclass
class BenchmarkScenario:
    """A single random splitting scenario."""

    table: EligibilityTable
    basket: list[str]


def generate_scenario(
    n_items: int,
    n_deliveries: int,
    rng: np.random.Generator,
    max_eligible: int = 3,
    catalog_size: int | None = None,
) -> BenchmarkScenario:
    """Generate a random eligibility table and a basket drawn from it.

    Every catalog item gets between 1 and ``max_eligible`` distinct delivery
    types. The basket is ``n_items`` distinct items sampled from the catalog.
    """
    catalog_size = max(catalog_size or n_items * 2, n_items)
    deliveries = [f"Delivery_{j:02d}" for j in range(n_deliveries)]
    raw: dict[str, list[str]] = {}
    for k in range(catalog_size):
        n_eligible = int(rng.integers(1, min(max_eligible, n_deliveries) + 1))
        picks = rng.choice(n_deliveries, size=n_eligible, replace=False)
        raw[f"Item_{k:03d}"] = [deliveries[int(p)] for p in picks]

    items = list(raw)
    chosen = rng.choice(len(items), size=n_items, replace=False)
    return BenchmarkScenario(
        table=EligibilityTable.from_mapping(raw),
        basket=[items[int(c)] for c in chosen],
    )


# ── Greedy baseline ───────────────────────────────────────────────────────────


def greedy_split(
    basket: Sequence[str],
    table: EligibilityTable,
    catalog: DeliveryCatalog,
) -> Assignment:
    """Greedy set cover. Ties go to the earlier delivery in catalog order.

    Never uses fewer groups than the exact splitter and often uses more.
    """
    table.validate_basket(basket)
    open_items = list(basket)
    assignment: Assignment = {}
    while open_items:
        best, best_cover = None, []
        for delivery in catalog:
            if delivery in assignment:
                continue
            cover = [item for item in open_items if table.allows(item, delivery)]
            if len(cover) > len(best_cover):
                best, best_cover = delivery, cover
        assignment[best] = best_cover
        taken = set(best_cover)
        open_items = [item for item in open_items if item not in taken]
    return assignment


def largest_group(assignment: Assignment) -> int:
    return max((len(items) for items in assignment.values()), default=0)


# ── Main benchmark loop ───────────────────────────────────────────────────────


def run_benchmark(
    n_scenarios: int = 30,
    n_items: int = 12,
    n_deliveries: int = 6,
    max_workers: int = 4,
    seed: int = 42,
) -> dict[str, dict[str, list[float]]]:
    """Run scenarios, print a comparison table and return the raw metrics."""

    active = ["greedy", "exact", "pooled"]

    print("=" * 72)
    print("  Basket Splitting Benchmark")
    print("=" * 72)
    print(
        f"  Scenarios: {n_scenarios}  |  Items: {n_items}  |  "
        f"Deliveries: {n_deliveries}  |  Workers: {max_workers}  |  Seed: {seed}"
    )
    print()

    rng = np.random.default_rng(seed)
    results: dict[str, dict[str, list[float]]] = {
        name: {"groups": [], "largest": [], "time_ms": []} for name in active
    }
    mismatches = 0

    for _ in range(n_scenarios):
        scenario = generate_scenario(n_items, n_deliveries, rng)
        exact = BasketSplitter(scenario.table, SplitterConfig(max_workers=1))
        pooled = BasketSplitter(scenario.table, SplitterConfig(max_workers=max_workers))

        for name in active:
            t0 = time.perf_counter()
            if name == "greedy":
                groups = greedy_split(scenario.basket, scenario.table, exact.catalog)
            elif name == "exact":
                groups = exact.split(scenario.basket)
            else:
                groups = pooled.split(scenario.basket)
            results[name]["time_ms"].append((time.perf_counter() - t0) * 1e3)
            results[name]["groups"].append(len(groups))
            results[name]["largest"].append(largest_group(groups))

        if results["exact"]["groups"][-1] != results["pooled"]["groups"][-1] or (
            results["exact"]["largest"][-1] != results["pooled"]["largest"][-1]
        ):
            mismatches += 1

    # ── Print results ─────────────────────────────────────────────────────────
    col_w = 14

    def hdr(label: str) -> str:
        return f"{label:>{col_w}}"

    def val(v: float, fmt: str = ".2f") -> str:
        return f"{v:{col_w}{fmt}}"

    fn_map = {
        "Avg delivery groups": lambda d: np.mean(d["groups"]),
        "Avg largest group": lambda d: np.mean(d["largest"]),
        "Avg solve time (ms)": lambda d: np.mean(d["time_ms"]),
        "P95 solve time (ms)": lambda d: np.percentile(d["time_ms"], 95),
    }

    print(f"  {'Metric':<28}" + "".join(hdr(n) for n in active))
    print("  " + "─" * (28 + col_w * len(active)))
    for label, fn in fn_map.items():
        print(f"  {label:<28}" + "".join(val(fn(results[name])) for name in active))

    extra = [g - e for g, e in zip(results["greedy"]["groups"], results["exact"]["groups"])]
    print()
    print(f"  Scenarios where greedy used extra groups: {sum(1 for d in extra if d > 0)}")
    print(f"  Exact vs pooled mismatches:               {mismatches}")
    print("\n" + "=" * 72)
    return results


# ── CLI entry point ───────────────────────────────────────────────────────────


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark basket splitting strategies")
    parser.add_argument("--scenarios", type=int, default=30)
    parser.add_argument("--items", type=int, default=12)
    parser.add_argument("--deliveries", type=int, default=6)
    parser.add_argument("--workers", type=int, default=4)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()
    run_benchmark(args.scenarios, args.items, args.deliveries, args.workers, args.seed)


if __name__ == "__main__":
    main()
