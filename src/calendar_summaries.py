"""
calendar_summaries.py  –  Daily & Monthly Summary Notes for a Year
==================================================================
  • generate_daily_summaries(year)    → <yyyy-mm-dd>-Summary.md  (one per day)
  • generate_monthly_summaries(year)  → <yyyy>-<mm>-summary.md   (one per month)

The templates carry dataviewjs chart scripts for the note viewer. They are
copied verbatim; only the DATE / YEAR / MONTH / MONTH_NAME fields are
rendered.
"""

from __future__ import annotations

import calendar
import logging
import os
import sys
from datetime import date
from pathlib import Path
from typing import Iterator, Optional

# ── Project root on sys.path for config import ────────────────────────────────
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from config.settings import (
    DAILY_OUTPUT_DIR, MONTHLY_OUTPUT_DIR,
    TPL_DAILY_SUMMARY, TPL_MONTHLY_SUMMARY,
)
from note_writer import NoteBatch, ensure_directory, render_template

log = logging.getLogger("calendar")

MONTH_NAMES = tuple(calendar.month_name)   # [0] == ""


def check_year(year) -> int:
    try:
        year = int(year)
    except (TypeError, ValueError):
        raise ValueError(f"Year must be an integer, got {year!r}")
    if not 1 <= year <= 9999:
        raise ValueError(f"Year must be between 1 and 9999, got {year}")
    return year


def iter_days(year: int) -> Iterator[date]:
    """Every valid calendar day of ``year``, January 1st first."""
    for month in range(1, 13):
        days_in_month = calendar.monthrange(year, month)[1]
        for day in range(1, 32):
            if day > days_in_month:
                break
            yield date(year, month, day)


# ─────────────────────────────────────────────────────────────────────────────
# DAILY
# ─────────────────────────────────────────────────────────────────────────────

def daily_filename(day: date) -> str:
    return f"{day.isoformat()}-Summary.md"


def render_daily_summary(day: date) -> str:
    return render_template(TPL_DAILY_SUMMARY, DATE=day.isoformat())


def generate_daily_summaries(year, output_dir=DAILY_OUTPUT_DIR) -> bool:
    year = check_year(year)
    output_dir = Path(output_dir).resolve()

    log.info("Generating daily notes for year: %d", year)
    ensure_directory(output_dir)

    with NoteBatch("daily notes") as batch:
        for day in iter_days(year):
            log.debug("Generating daily note for %s", day.isoformat())
            batch.add(output_dir / daily_filename(day), render_daily_summary(day))

    log.info("Daily notes for %d generated in %s", year, output_dir)
    return batch.ok


# ─────────────────────────────────────────────────────────────────────────────
# MONTHLY
# ─────────────────────────────────────────────────────────────────────────────

def monthly_filename(year: int, month: int) -> str:
    return f"{year}-{month:02d}-summary.md"


def render_monthly_summary(year: int, month: int) -> str:
    return render_template(
        TPL_MONTHLY_SUMMARY,
        YEAR=year,
        MONTH=month,
        MONTH_NAME=MONTH_NAMES[month],
    )


def generate_monthly_summaries(year, output_dir: Optional[os.PathLike] = None) -> bool:
    year = check_year(year)
    output_dir = Path(output_dir) if output_dir else MONTHLY_OUTPUT_DIR / str(year)

    log.info("Generating monthly notes for year: %d", year)
    ensure_directory(output_dir)

    with NoteBatch("monthly notes") as batch:
        for month in range(1, 13):
            batch.add(output_dir / monthly_filename(year, month), render_monthly_summary(year, month))

    log.info("Monthly notes for %d generated in %s", year, output_dir)
    return batch.ok
