"""
polarbeat_converter.py  –  Polar Beat CSV → Exercise Notes
==========================================================
Turns Polar Beat CSV exports into one Markdown exercise note per session.

Export layout
-------------
  line 0   summary headers (ignored)
  line 1   summary values  – date, start time, duration, avg HR, calories
  line 2   sample headers  – at least "Time" and "HR (bpm)"
  line 3+  one sample per elapsed second

The heart-rate series is downsampled to one sample every
HR_SAMPLE_INTERVAL_S seconds of elapsed time. hr-max is the maximum of the
*downsampled* series, not of the full 1 Hz recording.

Output:
  • <output>/<yyyy-mm-dd> - Taekwondo.md
"""

from __future__ import annotations

import io
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

# ── Project root on sys.path for config import ────────────────────────────────
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

import pandas as pd

from config.settings import (
    POLAR_IMPORT_DIR, POLAR_OUTPUT_DIR,
    POLAR_SUMMARY_DATE, POLAR_SUMMARY_START, POLAR_SUMMARY_DURATION,
    POLAR_SUMMARY_HR_AVG, POLAR_SUMMARY_CALORIES, POLAR_SUMMARY_MIN_COLS,
    POLAR_TIME_COL, POLAR_HR_COL,
    HR_SAMPLE_INTERVAL_S, EXERCISE_NAME, FAT_FIT_HR_LINE, TPL_EXERCISE,
)
from note_writer import NoteBatch, ensure_directory, render_template

log = logging.getLogger("polarbeat")


class PolarExportError(ValueError):
    """The CSV does not follow the Polar Beat export layout."""


@dataclass(frozen=True)
class HeartRateSample:
    time: str           # elapsed HH:MM:SS
    heart_rate: int     # bpm


@dataclass(frozen=True)
class SessionRecord:
    date: str           # dd-mm-yyyy, as exported
    start_time: str
    duration: str
    hr_avg: str
    hr_max: int
    calories: str
    samples: tuple[HeartRateSample, ...]


# ─────────────────────────────────────────────────────────────────────────────
# TIME & DATE HELPERS
# ─────────────────────────────────────────────────────────────────────────────

def get_total_seconds(timestamp: str) -> int:
    hours, minutes, seconds = (int(part) for part in timestamp.split(":"))
    return hours * 3600 + minutes * 60 + seconds


def format_date(date: str) -> str:
    """dd-mm-yyyy → yyyy-mm-dd by position only (no calendar validation)."""
    dd = date[0:2]
    mm = date[3:5]
    yyyy = date[6:10]
    return f"{yyyy}-{mm}-{dd}"


# ─────────────────────────────────────────────────────────────────────────────
# DOWNSAMPLING
# ─────────────────────────────────────────────────────────────────────────────

def downsample(samples: pd.DataFrame, interval: int = HR_SAMPLE_INTERVAL_S) -> list[HeartRateSample]:
    """
    Keep the rows whose elapsed time is a multiple of ``interval`` seconds.

    Assumes one row per elapsed second starting at 00:00:00; if the recording
    skips seconds the retained boundaries simply go missing.
    """
    times = samples[POLAR_TIME_COL].astype(str).str.strip()
    try:
        seconds = times.map(get_total_seconds).astype("int64")
    except ValueError as exc:
        raise PolarExportError(f"Invalid {POLAR_TIME_COL!r} value: {exc}") from exc

    kept = seconds % interval == 0
    hr = pd.to_numeric(samples.loc[kept, POLAR_HR_COL].astype(str).str.strip(), errors="coerce")
    if hr.isna().any():
        bad_time = times[kept][hr.isna()].iloc[0]
        raise PolarExportError(f"Missing or non-numeric {POLAR_HR_COL!r} at {bad_time}")

    return [
        HeartRateSample(time=t, heart_rate=int(v))
        for t, v in zip(times[kept], hr)
    ]


def max_heart_rate(samples: list[HeartRateSample]) -> int:
    if not samples:
        raise PolarExportError(
            f"No heart-rate samples on a {HR_SAMPLE_INTERVAL_S} s boundary – cannot compute hr-max"
        )
    return max(s.heart_rate for s in samples)


# ─────────────────────────────────────────────────────────────────────────────
# PARSING
# ─────────────────────────────────────────────────────────────────────────────

def parse_export(text: str) -> SessionRecord:
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < 3:
        raise PolarExportError(f"Expected summary, header and sample lines, got {len(lines)} line(s)")

    summary = [cell.strip() for cell in lines[1].split(",")]
    if len(summary) < POLAR_SUMMARY_MIN_COLS:
        raise PolarExportError(
            f"Summary row has {len(summary)} column(s), expected at least {POLAR_SUMMARY_MIN_COLS}"
        )

    samples = pd.read_csv(
        io.StringIO("\n".join(lines[2:])),
        dtype=str,
        index_col=False,
        keep_default_na=False,
    )
    samples.columns = [str(c).strip() for c in samples.columns]
    missing = [c for c in (POLAR_TIME_COL, POLAR_HR_COL) if c not in samples.columns]
    if missing:
        raise PolarExportError(f"Sample header lacks column(s): {', '.join(missing)}")

    hr_samples = downsample(samples)

    return SessionRecord(
        date=summary[POLAR_SUMMARY_DATE],
        start_time=summary[POLAR_SUMMARY_START],
        duration=summary[POLAR_SUMMARY_DURATION],
        hr_avg=summary[POLAR_SUMMARY_HR_AVG],
        hr_max=max_heart_rate(hr_samples),
        calories=summary[POLAR_SUMMARY_CALORIES],
        samples=tuple(hr_samples),
    )


def read_export(csv_path: Path) -> SessionRecord:
    # utf-8-sig: the Polar web export starts with a BOM
    with open(csv_path, "r", encoding="utf-8-sig") as fh:
        return parse_export(fh.read())


# ─────────────────────────────────────────────────────────────────────────────
# RENDERING
# ─────────────────────────────────────────────────────────────────────────────

def note_filename(session: SessionRecord, exercise: str = EXERCISE_NAME) -> str:
    return f"{format_date(session.date)} - {exercise}.md"


def render_session_note(session: SessionRecord, exercise: str = EXERCISE_NAME) -> str:
    hr_data = "\n".join(
        f"  - {{ time: {s.time}, hr: {s.heart_rate} }}" for s in session.samples
    )
    return render_template(
        TPL_EXERCISE,
        DATE=format_date(session.date),
        EXERCISE=exercise,
        START_TIME=session.start_time,
        DURATION=session.duration,
        CALORIES=session.calories,
        HR_AVG=session.hr_avg,
        HR_MAX=session.hr_max,
        HR_DATA=hr_data,
        FAT_FIT_HR=FAT_FIT_HR_LINE,
    )


# ─────────────────────────────────────────────────────────────────────────────
# RECIPE
# ─────────────────────────────────────────────────────────────────────────────

def convert_polarbeat(import_path=POLAR_IMPORT_DIR, output_path=POLAR_OUTPUT_DIR) -> bool:
    """
    Convert every *.csv directly under ``import_path``.
    A bad export is logged and skipped; returns False if anything failed.
    """
    import_dir = Path(import_path)
    output_dir = Path(output_path)

    if not import_dir.is_dir():
        log.error("Import path %s does not exist.", import_dir)
        return False

    ensure_directory(output_dir)

    csv_files = sorted(
        p for p in import_dir.iterdir()
        if p.is_file() and p.suffix.lower() == ".csv"
    )
    if not csv_files:
        log.warning("No .csv files in %s", import_dir)
        return True

    log.info("Found %d Polar Beat export(s). Converting...", len(csv_files))

    processed = failed = 0
    with NoteBatch("exercise notes") as batch:
        for i, csv_path in enumerate(csv_files, 1):
            log.info("─── [%d/%d] %s", i, len(csv_files), csv_path.name)
            try:
                session = read_export(csv_path)
            except (OSError, ValueError) as exc:
                log.error("Cannot convert %s: %s", csv_path.name, exc)
                failed += 1
                continue

            batch.add(output_dir / note_filename(session), render_session_note(session))
            log.info("  %s  %s  |  %d samples  |  hr-max %d bpm",
                     format_date(session.date), session.start_time,
                     len(session.samples), session.hr_max)
            processed += 1

    log.info("DONE  Converted: %d session(s)  |  Errors: %d", processed, failed)
    return failed == 0 and batch.ok
