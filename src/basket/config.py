"""
Splitter configuration dataclasses and YAML loader.

All runtime parameters live here as typed, validated dataclasses.
Load from YAML with `load_config()` or construct directly for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from src.basket.catalog import CatalogOrder
from src.basket.errors import ConfigurationError

_CATALOG_ORDERS = ("first_seen", "lexicographic")


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class SplitterConfig:
    """Solver parameters shared by every phase of a split.

    time_limit_s       : wall-clock budget per CP-SAT solve (None = unbounded)
    num_search_workers : CP-SAT internal workers; 1 keeps solves deterministic
    max_workers        : pool size for Phase 2 candidates; 1 = sequential
    catalog_order      : delivery catalog ordering, drives tie-breaks
    """

    time_limit_s: float | None = 10.0
    num_search_workers: int = 1
    max_workers: int = 1
    catalog_order: CatalogOrder = "first_seen"

    def __post_init__(self) -> None:
        if self.time_limit_s is not None and not _is_number(self.time_limit_s):
            raise ConfigurationError(
                f"time_limit_s must be a number or null, got {self.time_limit_s!r}"
            )
        for name in ("num_search_workers", "max_workers"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if self.time_limit_s is not None and self.time_limit_s <= 0:
            raise ConfigurationError(f"time_limit_s must be positive, got {self.time_limit_s}")
        if self.num_search_workers < 1:
            raise ConfigurationError(
                f"num_search_workers must be >= 1, got {self.num_search_workers}"
            )
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.catalog_order not in _CATALOG_ORDERS:
            raise ConfigurationError(
                f"catalog_order must be one of {_CATALOG_ORDERS}, got {self.catalog_order!r}"
            )


@dataclass(frozen=True)
class DataConfig:
    """Where the eligibility table is read from."""

    eligibility_path: str = "config/eligibility.json"


@dataclass(frozen=True)
class ApiConfig:
    """HTTP service bind address."""

    host: str = "0.0.0.0"
    port: int = 8000


@dataclass(frozen=True)
class BasketConfig:
    """Top-level configuration aggregating all sub-configs."""

    splitter: SplitterConfig = field(default_factory=SplitterConfig)
    data: DataConfig = field(default_factory=DataConfig)
    api: ApiConfig = field(default_factory=ApiConfig)


def _section(raw: dict[str, Any], name: str, cls: type) -> Any:
    values = raw.get(name) or {}
    if not isinstance(values, dict):
        raise ConfigurationError(f"Section {name!r} must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(f"Unknown keys in section {name!r}: {', '.join(unknown)}")
    try:
        return cls(**values)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid value in section {name!r}: {exc}") from exc


def load_config(path: str | Path) -> BasketConfig:
    """Load a BasketConfig from a YAML file.

    Args:
        path: Path to a YAML config file.

    Returns:
        Fully constructed BasketConfig; absent sections use defaults.

    Raises:
        ConfigurationError: the document is not a mapping, names an unknown
            section or key, or holds an invalid value.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot read {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")

    unknown = sorted(set(raw) - {"splitter", "data", "api"})
    if unknown:
        raise ConfigurationError(f"Unknown sections in {path}: {', '.join(unknown)}")

    return BasketConfig(
        splitter=_section(raw, "splitter", SplitterConfig),
        data=_section(raw, "data", DataConfig),
        api=_section(raw, "api", ApiConfig),
    )
