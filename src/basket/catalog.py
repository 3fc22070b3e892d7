"""
Eligibility table and delivery catalog.

The eligibility table maps every item to the delivery types allowed to carry
it. The delivery catalog is the deduplicated list of all delivery types in
the table, in a fixed order. That order is the index space of the integer
program's per-delivery variables and the order in which anchor candidates are
tried, so it decides which delivery type wins a tie.

Both are built once per configuration load and never mutated afterwards;
every split request reads them concurrently.

Usage:
    table = EligibilityTable.from_mapping({"a": ["D1"], "b": ["D1", "D2"]})
    catalog = DeliveryCatalog.from_table(table)
    catalog.deliveries   # ("D1", "D2")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Literal, Mapping, Sequence

from src.basket.errors import EmptyEligibleSet, UnknownItem

CatalogOrder = Literal["first_seen", "lexicographic"]


@dataclass(frozen=True)
class EligibilityTable:
    """Immutable item → eligible delivery types mapping.

    Attributes:
        entries: Item → delivery types, deduplicated, in the order they were
            listed in the source. Order matters only for catalog construction.
    """

    entries: Mapping[str, tuple[str, ...]]
    _sets: Mapping[str, frozenset[str]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        frozen = MappingProxyType(dict(self.entries))
        object.__setattr__(self, "entries", frozen)
        object.__setattr__(
            self, "_sets", MappingProxyType({k: frozenset(v) for k, v in frozen.items()})
        )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Iterable[str]]) -> EligibilityTable:
        """Build a table, collapsing duplicate delivery names per item."""
        return cls({item: tuple(dict.fromkeys(deliveries)) for item, deliveries in raw.items()})

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, item: object) -> bool:
        return item in self.entries

    def eligible(self, item: str) -> frozenset[str]:
        """Eligible delivery types for ``item``. Raises UnknownItem if absent."""
        try:
            return self._sets[item]
        except KeyError:
            raise UnknownItem(item) from None

    def allows(self, item: str, delivery: str) -> bool:
        return delivery in self.eligible(item)

    def validate_basket(self, basket: Sequence[str]) -> None:
        """Fail fast on items the solver could never place.

        Raises:
            UnknownItem: an item is missing from the table.
            EmptyEligibleSet: an item is present but has no delivery type.
        """
        for item in basket:
            if not self.eligible(item):
                raise EmptyEligibleSet(item)

    def relevant_deliveries(self, basket: Sequence[str]) -> frozenset[str]:
        """Union of the eligible sets of every basket item."""
        relevant: set[str] = set()
        for item in basket:
            relevant |= self.eligible(item)
        return frozenset(relevant)


@dataclass(frozen=True)
class DeliveryCatalog:
    """Canonical, duplicate-free ordering of every delivery type in a table."""

    deliveries: tuple[str, ...]
    _index: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(set(self.deliveries)) != len(self.deliveries):
            raise ValueError("Delivery catalog must not contain duplicates")
        object.__setattr__(
            self, "_index", MappingProxyType({d: j for j, d in enumerate(self.deliveries)})
        )

    @classmethod
    def from_table(
        cls, table: EligibilityTable, order: CatalogOrder = "first_seen"
    ) -> DeliveryCatalog:
        """Collect delivery types while scanning the table's entries.

        ``first_seen`` keeps the order in which each type first appears;
        ``lexicographic`` sorts them. Either way the result is reproducible
        for the same table.
        """
        seen: dict[str, None] = {}
        for deliveries in table.entries.values():
            for delivery in deliveries:
                seen.setdefault(delivery, None)
        if order == "first_seen":
            return cls(tuple(seen))
        if order == "lexicographic":
            return cls(tuple(sorted(seen)))
        raise ValueError(
            f"Unknown catalog order {order!r}. Valid options: 'first_seen', 'lexicographic'."
        )

    def __len__(self) -> int:
        return len(self.deliveries)

    def __iter__(self):
        return iter(self.deliveries)

    def __getitem__(self, j: int) -> str:
        return self.deliveries[j]

    def index(self, delivery: str) -> int:
        return self._index[delivery]
