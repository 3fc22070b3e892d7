"""
Base 0/1 program shared by both solve phases.

For a basket of n items and a catalog of m delivery types:

  x[i][j] ∈ {0,1}   item i is routed through delivery type j
  y[j]    ∈ {0,1}   delivery type j carries at least one item

  Σ_j x[i][j] = 1                  every item gets exactly one delivery
  Σ_i x[i][j] − (n+1)·y[j] ≤ 0     any use of j switches y[j] on
  x[i][j] = 0                      j not eligible for item i

The activation link never forces y[j] off; neither objective rewards an
unused group being switched on, so that slack is harmless.

No objective is attached here. A CpModel owns its variables, so every solve
builds its own BaseModel.

Usage:
    base = build_base_model(basket, table, catalog)
    base.model.Minimize(sum(base.y))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from ortools.sat.python import cp_model

from src.basket.catalog import DeliveryCatalog, EligibilityTable

logger = logging.getLogger(__name__)


@dataclass
class BaseModel:
    """A CP-SAT model with the structural constraints of one basket.

    Attributes:
        model: The CpModel holding every variable and constraint.
        x: x[i][j], item i routed through catalog delivery j.
        y: y[j], catalog delivery j in use.
        basket: Items in basket order (row index i).
        catalog: Delivery catalog (column index j).
    """

    model: cp_model.CpModel
    x: list[list[cp_model.IntVar]]
    y: list[cp_model.IntVar]
    basket: tuple[str, ...]
    catalog: DeliveryCatalog

    @property
    def n_items(self) -> int:
        return len(self.basket)

    @property
    def n_deliveries(self) -> int:
        return len(self.catalog)

    def active_groups(self) -> cp_model.LinearExpr:
        """Σ_j y[j]"""
        return sum(self.y)

    def items_on(self, j: int) -> cp_model.LinearExpr:
        """Σ_i x[i][j]"""
        return sum(row[j] for row in self.x)


def build_base_model(
    basket: Sequence[str],
    table: EligibilityTable,
    catalog: DeliveryCatalog,
) -> BaseModel:
    """Create variables and structural constraints for ``basket``.

    Args:
        basket: Ordered items to split. Every item must be in ``table``.
        table: Eligibility table.
        catalog: Canonical delivery ordering for column indices.

    Returns:
        BaseModel with no objective set.
    """
    n, m = len(basket), len(catalog)
    model = cp_model.CpModel()

    x = [[model.NewBoolVar(f"item_{i}_{j}") for j in range(m)] for i in range(n)]
    y = [model.NewBoolVar(f"delivery_{j}") for j in range(m)]

    # Exactly one delivery per item
    for i in range(n):
        model.Add(sum(x[i]) == 1).WithName(f"sum_item_{i}_deliveries")

    # Activation link: big-M of n+1 exceeds any column sum
    for j in range(m):
        column = sum(x[i][j] for i in range(n))
        model.Add(column - (n + 1) * y[j] <= 0).WithName(f"delivery_{j}_present")

    # Ineligible pairs fixed to zero
    n_fixed = 0
    for i, item in enumerate(basket):
        eligible = table.eligible(item)
        for j, delivery in enumerate(catalog):
            if delivery not in eligible:
                model.Add(x[i][j] == 0).WithName(f"item_{i}_not_delivered_by_{j}")
                n_fixed += 1

    logger.debug(
        "Base model: %d items × %d deliveries, %d variables, %d ineligible pairs",
        n,
        m,
        n * m + m,
        n_fixed,
    )
    return BaseModel(model=model, x=x, y=y, basket=tuple(basket), catalog=catalog)
