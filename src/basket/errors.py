"""
Typed failures raised while loading configuration or splitting a basket.

Every failure is terminal for the request that raised it. Callers catch
``BasketSplitterError`` to handle all of them, or a subclass for one kind.
"""

from __future__ import annotations


class BasketSplitterError(Exception):
    """Base class for all basket splitting failures."""


class ConfigurationError(BasketSplitterError):
    """Eligibility table, item list or YAML settings are malformed."""


class UnknownItem(BasketSplitterError):
    """A basket item has no entry in the eligibility table."""

    def __init__(self, item: str) -> None:
        super().__init__(f"Item {item!r} has no entry in the eligibility table")
        self.item = item


class EmptyEligibleSet(BasketSplitterError):
    """A basket item has no eligible delivery type at all."""

    def __init__(self, item: str) -> None:
        super().__init__(f"Item {item!r} has an empty set of eligible delivery types")
        self.item = item


class NoFeasibleAssignment(BasketSplitterError):
    """Phase 1 (minimise active groups) did not reach a proven optimum."""

    def __init__(self, status_name: str) -> None:
        super().__init__(f"Group-count minimisation ended with status {status_name}")
        self.status_name = status_name


class NoSolutionFound(BasketSplitterError):
    """Phase 2 produced no candidate result for any relevant delivery type."""
