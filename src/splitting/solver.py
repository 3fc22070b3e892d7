"""
Two-phase basket splitter.

Objective, lexicographically ordered
─────────────────────────────────────
  1. minimise the number of delivery groups used
  2. among those, maximise the size of the largest group

Strategy
────────
  Phase 1  Minimiser        min Σ_j y[j]                      → K
  Phase 2  Anchor maximiser Σ_j y[j] = K,  max Σ_i x[i][j*]   → candidate
  Selector                  Phase 2 for every delivery type eligible for at
                            least one basket item, in catalog order; the
                            first candidate with the largest anchor wins

Every solve builds a fresh CP-SAT model (see model.py). Phase 2 is a pure
function of (basket, K, anchor), so candidates can run on a thread pool;
results are then reduced in catalog order, giving output identical to the
sequential loop.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Sequence

from ortools.sat.python import cp_model

from src.basket.catalog import DeliveryCatalog, EligibilityTable
from src.basket.config import SplitterConfig
from src.basket.errors import NoFeasibleAssignment, NoSolutionFound
from src.splitting.model import BaseModel, build_base_model

logger = logging.getLogger(__name__)

Assignment = dict[str, list[str]]


# ─────────────────────────────────────────────────────────────────────────────
# Public types
# ─────────────────────────────────────────────────────────────────────────────


class SplitStatus(Enum):
    """Valid split status"""

    OPTIMAL = auto()  # both phases proven optimal
    EMPTY = auto()  # empty basket, nothing to solve


@dataclass(frozen=True)
class CandidateResult:
    """Fully solved assignment produced while maximising one anchor.

    Attributes:
        anchor: Delivery type whose item count was maximised.
        group_count: Number of non-empty groups (the Phase 1 optimum K).
        anchor_size: Items routed through the anchor.
        assignment: Delivery type → items, non-empty groups only.
    """

    anchor: str
    group_count: int
    anchor_size: int
    assignment: Assignment


@dataclass
class SplitResult:
    """Split output with solve diagnostics."""

    assignment: Assignment
    status: SplitStatus
    group_count: int
    largest_group: int
    anchor: str | None
    candidates_evaluated: int
    candidates_skipped: int = 0
    solve_time_ms: float = 0.0
    candidates: list[CandidateResult] = field(default_factory=list, repr=False)


# ─────────────────────────────────────────────────────────────────────────────
# Private helpers
# ─────────────────────────────────────────────────────────────────────────────


def _make_solver(config: SplitterConfig) -> cp_model.CpSolver:
    solver = cp_model.CpSolver()
    if config.time_limit_s is not None:
        solver.parameters.max_time_in_seconds = config.time_limit_s
    solver.parameters.num_workers = config.num_search_workers
    return solver


def _decode(base: BaseModel, solver: cp_model.CpSolver) -> Assignment:
    """Read x[i][j] back into delivery → items, skipping empty groups."""
    assignment: Assignment = {}
    for j, delivery in enumerate(base.catalog):
        items = [base.basket[i] for i in range(base.n_items) if solver.Value(base.x[i][j]) == 1]
        if items:
            assignment[delivery] = items
    return assignment


def _select_best(results: Sequence[CandidateResult | None]) -> CandidateResult | None:
    """First result in canonical order with the strictly largest anchor."""
    best: CandidateResult | None = None
    for result in results:
        if result is None:
            continue
        if best is None or result.anchor_size > best.anchor_size:
            best = result
    return best


# ─────────────────────────────────────────────────────────────────────────────
# Phase 1: Minimiser
# ─────────────────────────────────────────────────────────────────────────────


def minimize_group_count(
    basket: Sequence[str],
    table: EligibilityTable,
    catalog: DeliveryCatalog,
    config: SplitterConfig | None = None,
) -> int:
    """Minimum number of delivery groups that can cover ``basket``.

    Raises:
        NoFeasibleAssignment: the solve is not proven optimal (infeasible,
            invalid model, or time limit reached).
    """
    config = config or SplitterConfig()
    base = build_base_model(basket, table, catalog)
    base.model.Minimize(base.active_groups())

    solver = _make_solver(config)
    status = solver.Solve(base.model)
    if status != cp_model.OPTIMAL:
        raise NoFeasibleAssignment(solver.StatusName(status))

    k = int(round(solver.ObjectiveValue()))
    logger.debug("Phase 1: %d items need %d delivery groups", len(basket), k)
    return k


# ─────────────────────────────────────────────────────────────────────────────
# Phase 2: Anchor maximiser
# ─────────────────────────────────────────────────────────────────────────────


def maximize_anchor(
    basket: Sequence[str],
    table: EligibilityTable,
    catalog: DeliveryCatalog,
    group_count: int,
    anchor_index: int,
    config: SplitterConfig | None = None,
) -> CandidateResult | None:
    """Largest anchor group achievable with exactly ``group_count`` groups.

    Returns None when the solve does not reach a proven optimum; the
    selector then skips this anchor.
    """
    config = config or SplitterConfig()
    base = build_base_model(basket, table, catalog)
    base.model.Add(base.active_groups() == group_count).WithName("delivery_number_limit")
    base.model.Maximize(base.items_on(anchor_index))

    solver = _make_solver(config)
    status = solver.Solve(base.model)
    anchor = catalog[anchor_index]
    if status != cp_model.OPTIMAL:
        logger.warning(
            "Phase 2: anchor %r skipped, solve ended with status %s",
            anchor,
            solver.StatusName(status),
        )
        return None

    result = CandidateResult(
        anchor=anchor,
        group_count=group_count,
        anchor_size=int(round(solver.ObjectiveValue())),
        assignment=_decode(base, solver),
    )
    logger.debug("Phase 2: anchor %r carries %d items", anchor, result.anchor_size)
    return result


# ─────────────────────────────────────────────────────────────────────────────
# Selector
# ─────────────────────────────────────────────────────────────────────────────


class BasketSplitter:
    """Splits baskets into the fewest delivery groups, largest group first.

    The eligibility table and catalog are fixed at construction and shared
    read-only by every call, so one instance can serve concurrent requests.
    The cumulative counters are updated under a lock; a split that reaches
    the solver counts in ``total_splits`` whether it succeeds or fails.
    """

    def __init__(
        self,
        table: EligibilityTable,
        solver_config: SplitterConfig | None = None,
        catalog: DeliveryCatalog | None = None,
    ) -> None:
        self.table = table
        self.config = solver_config or SplitterConfig()
        if catalog is None:
            catalog = DeliveryCatalog.from_table(table, self.config.catalog_order)
        self.catalog = catalog
        self.total_splits: int = 0
        self.total_failures: int = 0
        self.total_solve_time_ms: float = 0.0
        self._stats_lock = threading.Lock()

    def split(self, basket: Sequence[str]) -> Assignment:
        """Delivery type → items for ``basket``."""
        return self.split_with_diagnostics(basket).assignment

    def split_with_diagnostics(self, basket: Sequence[str]) -> SplitResult:
        """Split with diagnostics

        Raises:
            UnknownItem: an item is missing from the eligibility table.
            EmptyEligibleSet: an item has no eligible delivery type.
            NoFeasibleAssignment: Phase 1 did not reach a proven optimum.
            NoSolutionFound: no Phase 2 candidate produced a result.
        """
        t0 = time.perf_counter()
        basket = list(basket)
        self.table.validate_basket(basket)
        if not basket:
            return SplitResult({}, SplitStatus.EMPTY, 0, 0, None, 0)

        try:
            k = minimize_group_count(basket, self.table, self.catalog, self.config)

            relevant = self.table.relevant_deliveries(basket)
            anchors = [j for j, delivery in enumerate(self.catalog) if delivery in relevant]
            results = self._evaluate_candidates(basket, k, anchors)

            best = _select_best(results)
            if best is None:
                raise NoSolutionFound(
                    f"No candidate among {len(anchors)} delivery types produced an assignment"
                )
        except (NoFeasibleAssignment, NoSolutionFound):
            self._record((time.perf_counter() - t0) * 1e3, failed=True)
            raise

        ms = (time.perf_counter() - t0) * 1e3
        self._record(ms, failed=False)

        logger.info(
            "Split %d items into %d groups, largest %r with %d items (%.1f ms)",
            len(basket),
            k,
            best.anchor,
            best.anchor_size,
            ms,
        )
        return SplitResult(
            assignment=best.assignment,
            status=SplitStatus.OPTIMAL,
            group_count=k,
            largest_group=best.anchor_size,
            anchor=best.anchor,
            candidates_evaluated=len(anchors),
            candidates_skipped=sum(1 for r in results if r is None),
            solve_time_ms=ms,
            candidates=[r for r in results if r is not None],
        )

    def _record(self, ms: float, failed: bool) -> None:
        """Update cumulative counters; every split that reached the solver counts."""
        with self._stats_lock:
            self.total_splits += 1
            self.total_solve_time_ms += ms
            if failed:
                self.total_failures += 1

    def _evaluate_candidates(
        self, basket: list[str], k: int, anchors: list[int]
    ) -> list[CandidateResult | None]:
        """Phase 2 for every anchor, results in the order of ``anchors``."""

        def run(j: int) -> CandidateResult | None:
            return maximize_anchor(basket, self.table, self.catalog, k, j, self.config)

        if self.config.max_workers == 1 or len(anchors) < 2:
            return [run(j) for j in anchors]

        with ThreadPoolExecutor(max_workers=min(self.config.max_workers, len(anchors))) as pool:
            return list(pool.map(run, anchors))

