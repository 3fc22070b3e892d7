"""
Basket splitting via two-phase 0/1 integer programming (OR-Tools CP-SAT).

Quick start:
    from src.basket import load_eligibility
    from src.splitting import BasketSplitter
    splitter = BasketSplitter(load_eligibility("config/eligibility.json"))
    groups = splitter.split(["Cocoa Butter", "Tart - Raisin And Pecan"])
"""

from src.splitting.model import BaseModel, build_base_model
from src.splitting.solver import (
    BasketSplitter,
    CandidateResult,
    SplitResult,
    SplitStatus,
    maximize_anchor,
    minimize_group_count,
)

__all__ = [
    "BaseModel",
    "build_base_model",
    "BasketSplitter",
    "CandidateResult",
    "SplitResult",
    "SplitStatus",
    "maximize_anchor",
    "minimize_group_count",
]
