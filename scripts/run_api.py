"""Run the FastAPI basket splitting service."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

import uvicorn

from src.api.server import CONFIG_ENV, create_app
from src.basket.config import BasketConfig, load_config


def main() -> None:
    parser = argparse.ArgumentParser(description="Run basket splitting API server")
    parser.add_argument("--config", type=str, default="config/default_splitter.yaml")
    parser.add_argument("--host", type=str, default=None, help="Overrides api.host")
    parser.add_argument("--port", type=int, default=None, help="Overrides api.port")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    os.environ[CONFIG_ENV] = args.config
    config_path = Path(args.config)
    api = (load_config(config_path) if config_path.exists() else BasketConfig()).api

    uvicorn.run(create_app(), host=args.host or api.host, port=args.port or api.port)


if __name__ == "__main__":
    main()
