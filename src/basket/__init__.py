from src.basket.catalog import DeliveryCatalog, EligibilityTable
from src.basket.config import BasketConfig, SplitterConfig, load_config
from src.basket.errors import (
    BasketSplitterError,
    ConfigurationError,
    EmptyEligibleSet,
    NoFeasibleAssignment,
    NoSolutionFound,
    UnknownItem,
)
from src.basket.loaders import load_basket, load_eligibility

__all__ = [
    "DeliveryCatalog",
    "EligibilityTable",
    "BasketConfig",
    "SplitterConfig",
    "load_config",
    "BasketSplitterError",
    "ConfigurationError",
    "EmptyEligibleSet",
    "NoFeasibleAssignment",
    "NoSolutionFound",
    "UnknownItem",
    "load_basket",
    "load_eligibility",
]
