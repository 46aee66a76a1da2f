"""
Vault Note Recipes – Centralized Configuration
===============================================
All paths, template names and note constants in one place.
Edit this file to match YOUR vault – never hardcode values
in individual recipes.
"""

from pathlib import Path
from types import MappingProxyType

# ============================================================
# PROJECT PATHS (relative to project root)
# ============================================================
PROJECT_ROOT = Path(__file__).resolve().parent.parent

DATA_DIR        = PROJECT_ROOT / "data"
OUTPUT_DIR      = PROJECT_ROOT / "output"
TEMPLATES_DIR   = PROJECT_ROOT / "templates"
LOGS_DIR        = PROJECT_ROOT / "logs"

# ============================================================
# RECIPE DEFAULTS
# ============================================================
POLAR_IMPORT_DIR    = DATA_DIR / "polarbeat"
POLAR_OUTPUT_DIR    = OUTPUT_DIR / "polarbeat"
FIXTURES_JSON       = DATA_DIR / "premier_league_games_2024.json"
FIXTURES_OUTPUT_DIR = OUTPUT_DIR / "fixtures"
DAILY_OUTPUT_DIR    = OUTPUT_DIR / "Daily"
MONTHLY_OUTPUT_DIR  = OUTPUT_DIR / "summaries"   # + /<year>

# ============================================================
# NOTE WRITING
# ============================================================
WRITE_WORKERS   = 4            # threads flushing one NoteBatch
NOTE_ENCODING   = "utf-8"

# ============================================================
# POLAR BEAT EXPORT
# ============================================================
# Summary row (line 1) column offsets
POLAR_SUMMARY_DATE      = 2    # dd-mm-yyyy
POLAR_SUMMARY_START     = 3
POLAR_SUMMARY_DURATION  = 4
POLAR_SUMMARY_HR_AVG    = 6
POLAR_SUMMARY_CALORIES  = 11
POLAR_SUMMARY_MIN_COLS  = POLAR_SUMMARY_CALORIES + 1

POLAR_TIME_COL  = "Time"
POLAR_HR_COL    = "HR (bpm)"

HR_SAMPLE_INTERVAL_S = 30      # keep one sample every 30 s of elapsed time
EXERCISE_NAME        = "Taekwondo"
FAT_FIT_HR_LINE      = 128     # bpm – chart annotation

# ============================================================
# FOOTBALL FIXTURES
# ============================================================
COMPETITION     = "Premier League"
SEASON          = "2024-2025"
UNKNOWN_REFEREE = "Unknown"

REFEREE_FOLDER   = "People"
MATCHWEEK_FOLDER = "Fixtures"

# Feed short name → canonical club name
TEAM_NAME_MAP = MappingProxyType({
    "Brighton Hove":  "Brighton Hove Albion",
    "Man City":       "Manchester City",
    "Man United":     "Manchester United",
    "Newcastle":      "Newcastle United",
    "Nottingham":     "Nottingham Forest",
    "Tottenham":      "Tottenham Hotspur",
    "West Ham":       "West Ham United",
    "Wolverhampton":  "Wolverhampton Wanderers",
})

# ============================================================
# TEMPLATE FILE NAMES (inside TEMPLATES_DIR)
# ============================================================
TPL_EXERCISE        = "exercise_note.md"
TPL_MATCH           = "football_match.md"
TPL_REFEREE         = "referee.md"
TPL_MATCHWEEK       = "matchweek.md"
TPL_DAILY_SUMMARY   = "daily_summary.md"
TPL_MONTHLY_SUMMARY = "monthly_summary.md"
