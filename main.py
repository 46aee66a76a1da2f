#!/usr/bin/env python3
"""
main.py – Vault Note Recipes · Central Entry Point
===================================================
Runs one named recipe that turns an export (or a year) into Markdown notes:

  convert-polarbeat           Polar Beat CSV exports  → exercise notes
  convert-fixtures            football fixture JSON   → match / referee / matchweek notes
  generate-daily-summaries    year                    → one summary note per day
  generate-monthly-summaries  year                    → one summary note per month

Usage
-----
    python main.py convert-polarbeat [import_dir] [output_dir]
    python main.py convert-fixtures [fixtures.json] [output_dir]
    python main.py generate-daily-summaries <year> [output_dir]
    python main.py generate-monthly-summaries <year> [output_dir]

Exit status is 0 only when every note of the run was written.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from typing import Optional

# ── Project root on sys.path ─────────────────────────────────────────────────
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
for _p in (PROJECT_ROOT, SRC_DIR):
    if _p not in sys.path:
        sys.path.insert(0, _p)

from config.settings import (
    LOGS_DIR,
    POLAR_IMPORT_DIR, POLAR_OUTPUT_DIR,
    FIXTURES_JSON, FIXTURES_OUTPUT_DIR,
    DAILY_OUTPUT_DIR,
)
from calendar_summaries import generate_daily_summaries, generate_monthly_summaries
from fixture_converter import convert_fixtures
from polarbeat_converter import convert_polarbeat

log = logging.getLogger("main")


# ── Logging ──────────────────────────────────────────────────────────────────
def configure_logging(verbose: bool = False) -> None:
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(LOGS_DIR / "main.log", encoding="utf-8"),
        ],
    )


# ═══════════════════════════════════════════════════════════════════════════════
# RECIPES
# ═══════════════════════════════════════════════════════════════════════════════

def recipe_polarbeat(source: Optional[str], output_dir: Optional[str]) -> bool:
    return convert_polarbeat(source or POLAR_IMPORT_DIR, output_dir or POLAR_OUTPUT_DIR)


def recipe_fixtures(source: Optional[str], output_dir: Optional[str]) -> bool:
    return convert_fixtures(source or FIXTURES_JSON, output_dir or FIXTURES_OUTPUT_DIR)


def recipe_daily(source: Optional[str], output_dir: Optional[str]) -> bool:
    if source is None:
        raise ValueError("generate-daily-summaries needs a year")
    return generate_daily_summaries(source, output_dir or DAILY_OUTPUT_DIR)


def recipe_monthly(source: Optional[str], output_dir: Optional[str]) -> bool:
    if source is None:
        raise ValueError("generate-monthly-summaries needs a year")
    return generate_monthly_summaries(source, output_dir)


RECIPES = {
    "convert-polarbeat": recipe_polarbeat,
    "convert-fixtures": recipe_fixtures,
    "generate-daily-summaries": recipe_daily,
    "generate-monthly-summaries": recipe_monthly,
}


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN
# ═══════════════════════════════════════════════════════════════════════════════

def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vault Note Recipes – export → Markdown note runner",
        epilog=f"Recipes: {', '.join(RECIPES)}",
    )
    parser.add_argument("recipe", help="Recipe to run")
    parser.add_argument(
        "source",
        nargs="?",
        help="Import path / JSON file for converters, year for summary generators",
    )
    parser.add_argument("output_dir", nargs="?", help="Output directory (default: per recipe)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every note written")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    configure_logging(args.verbose)

    recipe = RECIPES.get(args.recipe)
    if recipe is None:
        log.error('Recipe "%s" not found. Available: %s', args.recipe, ", ".join(RECIPES))
        return 1

    log.info("=" * 60)
    log.info("RECIPE: %s", args.recipe)
    log.info("=" * 60)

    t0 = time.time()
    try:
        ok = recipe(args.source, args.output_dir)
    except (OSError, ValueError) as exc:
        log.error('Error running recipe "%s": %s', args.recipe, exc)
        return 1
    elapsed = time.time() - t0

    log.info("=" * 60)
    if not ok:
        log.error('Recipe "%s" finished with errors (%.1f s).', args.recipe, elapsed)
        return 1
    log.info('Recipe "%s" completed successfully (%.1f s).', args.recipe, elapsed)
    log.info("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
