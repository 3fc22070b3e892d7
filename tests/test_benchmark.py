"""Tests for the benchmark helpers and the greedy baseline.

Run with: pytest tests/test_benchmark.py -v
"""

import numpy as np
import pytest

from src.basket.catalog import DeliveryCatalog, EligibilityTable
from src.basket.errors import UnknownItem
from src.splitting.benchmark import generate_scenario, greedy_split, largest_group, run_benchmark
from src.splitting.solver import BasketSplitter


@pytest.fixture
def greedy_trap() -> EligibilityTable:
    """A covers four items, but B + C cover all six with two groups."""
    return EligibilityTable.from_mapping(
        {
            "i1": ["A", "B"],
            "i2": ["A", "B"],
            "i3": ["A", "C"],
            "i4": ["A", "C"],
            "i5": ["B"],
            "i6": ["C"],
        }
    )


class TestScenarioGeneration:
    """Random scenarios are valid and reproducible."""

    def test_basket_items_in_table(self):
        scenario = generate_scenario(8, 5, np.random.default_rng(0))
        assert len(scenario.basket) == 8
        assert len(set(scenario.basket)) == 8
        scenario.table.validate_basket(scenario.basket)

    def test_eligible_set_sizes(self):
        scenario = generate_scenario(8, 5, np.random.default_rng(0), max_eligible=2)
        for deliveries in scenario.table.entries.values():
            assert 1 <= len(deliveries) <= 2

    def test_same_seed_same_scenario(self):
        a = generate_scenario(6, 4, np.random.default_rng(3))
        b = generate_scenario(6, 4, np.random.default_rng(3))
        assert a.basket == b.basket
        assert dict(a.table.entries) == dict(b.table.entries)


class TestGreedySplit:
    """Greedy set-cover baseline."""

    def test_greedy_uses_extra_group(self, greedy_trap):
        catalog = DeliveryCatalog.from_table(greedy_trap)
        basket = ["i1", "i2", "i3", "i4", "i5", "i6"]
        greedy = greedy_split(basket, greedy_trap, catalog)
        exact = BasketSplitter(greedy_trap).split(basket)
        assert len(greedy) == 3
        assert len(exact) == 2
        assert largest_group(greedy) == 4

    def test_greedy_covers_basket(self, greedy_trap):
        catalog = DeliveryCatalog.from_table(greedy_trap)
        basket = ["i6", "i1", "i5"]
        greedy = greedy_split(basket, greedy_trap, catalog)
        placed = sorted(item for items in greedy.values() for item in items)
        assert placed == sorted(basket)

    def test_greedy_rejects_unknown_item(self, greedy_trap):
        catalog = DeliveryCatalog.from_table(greedy_trap)
        with pytest.raises(UnknownItem):
            greedy_split(["i1", "zzz"], greedy_trap, catalog)

    def test_largest_group_of_empty(self):
        assert largest_group({}) == 0


class TestRunBenchmark:
    """End-to-end benchmark run on a handful of scenarios."""

    def test_exact_never_worse_than_greedy(self, capsys):
        results = run_benchmark(n_scenarios=3, n_items=6, n_deliveries=4, max_workers=2, seed=5)
        for g, e in zip(results["greedy"]["groups"], results["exact"]["groups"]):
            assert e <= g
        assert results["exact"]["groups"] == results["pooled"]["groups"]
        assert results["exact"]["largest"] == results["pooled"]["largest"]
        out = capsys.readouterr().out
        assert "Basket Splitting Benchmark" in out
        assert out.split("Exact vs pooled mismatches:")[1].split()[0] == "0"
