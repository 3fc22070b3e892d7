"""
Splitter diagnostic tool.

Walks the splitting pipeline stage by stage on tiny hand-checked inputs:
eligibility → catalog → Phase 1 → Phase 2 → selector → failures.

This is the script you run FIRST when a split looks wrong. Each stage is
independent, so the first FAIL names the stage to look at.

Usage:
    python scripts/verify_splitter.py
"""

import sys

from src.basket.catalog import DeliveryCatalog, EligibilityTable
from src.basket.errors import EmptyEligibleSet, UnknownItem
from src.splitting.solver import BasketSplitter, maximize_anchor, minimize_group_count

_failures = 0


def section(title: str) -> None:
    """Creates a section in the CLI display"""

    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


def check(label: str, condition: bool, detail: str = "") -> bool:
    """Checks if a condition is passed."""

    global _failures  # pylint: disable=global-statement
    status = "✅ PASS" if condition else "❌ FAIL"
    msg = f"  {status}: {label}"
    if detail:
        msg += f" — {detail}"
    print(msg)
    if not condition:
        _failures += 1
    return condition


# ─────────────────────────────────────────────────────────────
# STAGE 1: Eligibility table and catalog
# ─────────────────────────────────────────────────────────────
def verify_catalog() -> None:
    """Catalog keeps first-seen order and drops duplicates."""

    section("STAGE 1: Eligibility & Catalog")

    table = EligibilityTable.from_mapping({"a": ["D2", "D1"], "b": ["D1", "D3", "D2"]})
    catalog = DeliveryCatalog.from_table(table)
    check("Catalog deduplicated", len(catalog) == 3, f"{list(catalog)}")
    check("First-seen order", list(catalog) == ["D2", "D1", "D3"])
    check("Relevant deliveries", table.relevant_deliveries(["a"]) == {"D1", "D2"})


# ─────────────────────────────────────────────────────────────
# STAGE 2: Phase 1 and Phase 2 in isolation
# ─────────────────────────────────────────────────────────────
def verify_phases() -> None:
    """Minimiser finds K; anchor maximiser respects K."""

    section("STAGE 2: Minimiser & Anchor Maximiser")

    table = EligibilityTable.from_mapping({"a": ["D1", "D2"], "b": ["D2"], "c": ["D1"]})
    catalog = DeliveryCatalog.from_table(table)
    basket = ["a", "b", "c"]

    k = minimize_group_count(basket, table, catalog)
    check("Phase 1 group count", k == 2, f"K={k}")

    for j, delivery in enumerate(catalog):
        result = maximize_anchor(basket, table, catalog, k, j)
        check(
            f"Phase 2 anchor {delivery}",
            result is not None and result.anchor_size == 2 and len(result.assignment) == k,
            f"{result.assignment if result else None}",
        )


# ─────────────────────────────────────────────────────────────
# STAGE 3: End-to-end scenarios
# ─────────────────────────────────────────────────────────────
def verify_scenarios() -> None:
    """The three reference scenarios."""

    section("STAGE 3: Reference Scenarios")

    cases = [
        ("A: single shared delivery", {"a": ["D1"], "b": ["D1"], "c": ["D1"]}, ["a", "b", "c"],
         {"D1": ["a", "b", "c"]}),
        ("B: only D2 covers both", {"a": ["D1", "D2"], "b": ["D2"]}, ["a", "b"],
         {"D2": ["a", "b"]}),
        ("C: disjoint deliveries", {"a": ["D1"], "b": ["D2"]}, ["a", "b"],
         {"D1": ["a"], "D2": ["b"]}),
    ]
    for label, raw, basket, expected in cases:
        got = BasketSplitter(EligibilityTable.from_mapping(raw)).split(basket)
        check(label, got == expected, f"{got}")


# ─────────────────────────────────────────────────────────────
# STAGE 4: Typed failures
# ─────────────────────────────────────────────────────────────
def verify_failures() -> None:
    """Bad input surfaces as a typed error before any solve."""

    section("STAGE 4: Failures")

    splitter = BasketSplitter(EligibilityTable.from_mapping({"a": ["D1"], "e": []}))
    for label, basket, expected in [
        ("Unknown item", ["a", "zzz"], UnknownItem),
        ("Empty eligible set", ["a", "e"], EmptyEligibleSet),
    ]:
        try:
            splitter.split(basket)
            check(label, False, "no error raised")
        except expected as exc:
            check(label, True, str(exc))


# ─────────────────────────────────────────────────────────────
# Main
# ─────────────────────────────────────────────────────────────
if __name__ == "__main__":
    print("Basket Splitter — Pipeline Verification")
    print("=" * 60)

    verify_catalog()
    verify_phases()
    verify_scenarios()
    verify_failures()

    section("VERIFICATION COMPLETE")
    print("  If all checks passed, the splitter is working end-to-end.")
    print("  If any FAIL, the stage label tells you exactly where to look.")
    sys.exit(1 if _failures else 0)
