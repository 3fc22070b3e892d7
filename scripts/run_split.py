"""
run_split.py
──────────────────────────────────────────────────────────────────────────────
Split one basket from the command line.

Usage:
    python scripts/run_split.py --items config/example_basket.json
    python scripts/run_split.py --eligibility config/eligibility.json --items basket.json
    python scripts/run_split.py --items basket.json --workers 4 --verbose

Prints the assignment as JSON, followed by a one-line summary.
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from src.basket.config import BasketConfig, load_config
from src.basket.errors import BasketSplitterError
from src.basket.loaders import load_basket, load_eligibility
from src.splitting.solver import BasketSplitter


def main() -> int:
    """Main"""

    parser = argparse.ArgumentParser(description="Split a basket into delivery groups")
    parser.add_argument(
        "--config",
        type=str,
        default="config/default_splitter.yaml",
        help="Path to splitter config YAML",
    )
    parser.add_argument(
        "--eligibility", type=str, default=None, help="Eligibility JSON (overrides config)"
    )
    parser.add_argument("--items", type=str, required=True, help="JSON array of basket items")
    parser.add_argument(
        "--workers", type=int, default=None, help="Phase 2 pool size (overrides config)"
    )
    parser.add_argument("--verbose", action="store_true", help="Log solver progress")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        # Load config
        config_path = Path(args.config)
        if config_path.exists():
            config = load_config(config_path)
        else:
            print(f"Config {config_path} not found, using defaults", file=sys.stderr)
            config = BasketConfig()

        splitter_config = config.splitter
        if args.workers is not None:
            splitter_config = replace(splitter_config, max_workers=args.workers)

        table = load_eligibility(args.eligibility or config.data.eligibility_path)
        basket = load_basket(args.items)
        result = BasketSplitter(table, splitter_config).split_with_diagnostics(basket)
    except BasketSplitterError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result.assignment, indent=2))
    print(
        f"{result.group_count} groups, largest {result.anchor} with "
        f"{result.largest_group} items ({result.solve_time_ms:.1f} ms)",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
