"""FastAPI server exposing the basket splitter over HTTP."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from src.basket.config import BasketConfig, load_config
from src.basket.errors import (
    EmptyEligibleSet,
    NoFeasibleAssignment,
    NoSolutionFound,
    UnknownItem,
)
from src.basket.loaders import load_eligibility
from src.splitting.solver import BasketSplitter

logger = logging.getLogger(__name__)

CONFIG_ENV = "BASKET_SPLITTER_CONFIG"


class SplitRequest(BaseModel):
    items: list[str]


class SplitResponse(BaseModel):
    assignment: dict[str, list[str]]
    group_count: int
    largest_group: int
    anchor: str | None
    solve_time_ms: float


def _load_runtime_config(config_path: str) -> BasketConfig:
    path = Path(config_path)
    if path.exists():
        return load_config(path)
    logger.warning("Config %s not found, using defaults", path)
    return BasketConfig()


def create_app(splitter: BasketSplitter | None = None) -> FastAPI:
    """Build the app around ``splitter``.

    Without one, the splitter is built from the YAML config named by
    $BASKET_SPLITTER_CONFIG (default config/default_splitter.yaml).
    """
    if splitter is None:
        cfg = _load_runtime_config(os.environ.get(CONFIG_ENV, "config/default_splitter.yaml"))
        splitter = BasketSplitter(load_eligibility(cfg.data.eligibility_path), cfg.splitter)

    app = FastAPI(title="Basket Splitter API", version="0.1.0")
    app.state.splitter = splitter

    @app.get("/api/health")
    def health() -> dict:
        """Basic readiness endpoint."""

        return {"status": "ok"}

    @app.get("/api/deliveries")
    def deliveries() -> list[str]:
        """Delivery catalog in canonical order."""

        return list(splitter.catalog)

    # Plain def: FastAPI runs it in a worker thread, keeping CP-SAT off the loop
    @app.post("/api/split", response_model=SplitResponse)
    def split(request: SplitRequest) -> SplitResponse:
        try:
            result = splitter.split_with_diagnostics(request.items)
        except (UnknownItem, EmptyEligibleSet) as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except (NoFeasibleAssignment, NoSolutionFound) as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc

        return SplitResponse(
            assignment=result.assignment,
            group_count=result.group_count,
            largest_group=result.largest_group,
            anchor=result.anchor,
            solve_time_ms=result.solve_time_ms,
        )

    return app
