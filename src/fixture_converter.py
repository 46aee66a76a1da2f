"""
fixture_converter.py  –  Football Fixture Feed → Match / Referee / Matchweek Notes
=================================================================================
Reads a football-data style JSON feed (``{"matches": [...]}``) and writes:

  • <output>/<year>/<date> - <home> vs <away> - <competition>.md   (per match)
  • <output>/People/<referee>.md                                   (per referee)
  • <output>/Fixtures/Matchweek <n> - <competition> <season>.md    (per matchweek)

All matches are parsed and folded first; referee and matchweek notes are only
rendered once the aggregate is complete. A malformed feed aborts the run
before anything is written.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

# ── Project root on sys.path for config import ────────────────────────────────
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

import pandas as pd

from config.settings import (
    FIXTURES_JSON, FIXTURES_OUTPUT_DIR,
    COMPETITION, SEASON, UNKNOWN_REFEREE, TEAM_NAME_MAP,
    REFEREE_FOLDER, MATCHWEEK_FOLDER,
    TPL_MATCH, TPL_REFEREE, TPL_MATCHWEEK,
)
from note_writer import NoteBatch, ensure_directory, render_template

log = logging.getLogger("fixtures")


class FixtureFeedError(ValueError):
    """The JSON feed is not a usable fixture list."""


@dataclass(frozen=True)
class MatchRecord:
    date: str               # yyyy-mm-dd (UTC)
    year: int
    home_team: str
    away_team: str
    kickoff: str            # utcDate as found in the feed
    matchweek: int
    half_time: str
    full_time: str
    referee: str


# ─────────────────────────────────────────────────────────────────────────────
# FIELD HELPERS
# ─────────────────────────────────────────────────────────────────────────────

def extract_year_and_date(utc_date: str) -> tuple[int, str]:
    """ISO-8601 timestamp → (UTC year, 'yyyy-mm-dd' in UTC)."""
    ts = pd.to_datetime(utc_date, utc=True)
    return int(ts.year), ts.strftime("%Y-%m-%d")


def remap_name(name: str) -> str:
    return TEAM_NAME_MAP.get(name, name)


def pick_referee(referees: list) -> str:
    if referees:
        return referees[0]["name"]
    return UNKNOWN_REFEREE


def format_score(detail: dict) -> str:
    if not isinstance(detail, dict):
        raise TypeError(f"score detail must be an object, got {type(detail).__name__}")
    home, away = detail.get("home"), detail.get("away")
    if home is None or away is None:
        return ""           # not played yet
    return f"{home} - {away}"


def parse_match(raw: dict, index: int = 0) -> MatchRecord:
    try:
        year, date = extract_year_and_date(raw["utcDate"])
        return MatchRecord(
            date=date,
            year=year,
            home_team=remap_name(raw["homeTeam"]["shortName"]),
            away_team=remap_name(raw["awayTeam"]["shortName"]),
            kickoff=raw["utcDate"],
            matchweek=int(raw["matchday"]),
            half_time=format_score(raw["score"]["halfTime"]),
            full_time=format_score(raw["score"]["fullTime"]),
            referee=pick_referee(raw.get("referees") or []),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise FixtureFeedError(f"Match {index}: invalid record ({exc!r})") from exc


def load_matches(input_file) -> list[MatchRecord]:
    try:
        with open(input_file, "r", encoding="utf-8") as fh:
            feed = json.load(fh)
    except json.JSONDecodeError as exc:
        raise FixtureFeedError(f"Invalid JSON in {input_file}: {exc}") from exc

    if not isinstance(feed, dict) or "matches" not in feed:
        raise FixtureFeedError(f"{input_file} has no 'matches' key")
    if not isinstance(feed["matches"], list):
        raise FixtureFeedError(f"'matches' must be a list, got {type(feed['matches']).__name__}")

    return [parse_match(raw, idx) for idx, raw in enumerate(feed["matches"])]


# ─────────────────────────────────────────────────────────────────────────────
# AGGREGATION
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class FixtureAggregate:
    referees: list[str] = field(default_factory=list)
    matchweeks: dict[int, tuple[str, str]] = field(default_factory=dict)

    def add(self, match: MatchRecord) -> None:
        if match.referee != UNKNOWN_REFEREE and match.referee not in self.referees:
            self.referees.append(match.referee)
            log.debug("Added referee: %s", match.referee)

        span = self.matchweeks.get(match.matchweek)
        if span is None:
            self.matchweeks[match.matchweek] = (match.date, match.date)
            log.debug("Initialized matchweek %d with date %s", match.matchweek, match.date)
        else:
            # ISO dates: string order == calendar order
            start, end = min(span[0], match.date), max(span[1], match.date)
            self.matchweeks[match.matchweek] = (start, end)
            log.debug("Updated matchweek %d to range %s - %s", match.matchweek, start, end)


def fold_matches(matches: list[MatchRecord]) -> FixtureAggregate:
    aggregate = FixtureAggregate()
    for match in matches:
        aggregate.add(match)
    return aggregate


# ─────────────────────────────────────────────────────────────────────────────
# RENDERING
# ─────────────────────────────────────────────────────────────────────────────

def matchweek_title(matchweek: int, competition: str = COMPETITION, season: str = SEASON) -> str:
    return f"Matchweek {matchweek} - {competition} {season}"


def match_note_path(match: MatchRecord, competition: str = COMPETITION) -> Path:
    title = f"{match.date} - {match.home_team} vs {match.away_team} - {competition}.md"
    return Path(str(match.year)) / title


def render_match_note(match: MatchRecord, competition: str = COMPETITION, season: str = SEASON) -> str:
    if match.referee != UNKNOWN_REFEREE:
        referee_link = f"[[{match.referee}]]"
    else:
        referee_link = match.referee
    return render_template(
        TPL_MATCH,
        TITLE=match_note_path(match, competition).name,
        COMPETITION=competition,
        SEASON=season,
        KICKOFF=match.kickoff,
        HOME_TEAM=match.home_team,
        AWAY_TEAM=match.away_team,
        MATCHWEEK=match.matchweek,
        MATCHWEEK_NOTE=matchweek_title(match.matchweek, competition, season),
        HALF_TIME=match.half_time,
        FULL_TIME=match.full_time,
        REFEREE=match.referee,
        REFEREE_LINK=referee_link,
    )


def render_referee_note(name: str) -> str:
    return render_template(TPL_REFEREE, NAME=name)


def render_matchweek_note(
    matchweek: int,
    span: tuple[str, str],
    competition: str = COMPETITION,
    season: str = SEASON,
) -> str:
    return render_template(
        TPL_MATCHWEEK,
        TITLE=matchweek_title(matchweek, competition, season),
        COMPETITION=competition,
        SEASON=season,
        MATCHWEEK=matchweek,
        STARTS=span[0],
        ENDS=span[1],
    )


# ─────────────────────────────────────────────────────────────────────────────
# RECIPE
# ─────────────────────────────────────────────────────────────────────────────

def convert_fixtures(
    input_file=FIXTURES_JSON,
    output_dir=FIXTURES_OUTPUT_DIR,
    competition: str = COMPETITION,
    season: str = SEASON,
) -> bool:
    output_dir = Path(output_dir)

    log.info("Starting %s fixture conversion.", competition)
    log.info("Reading input file: %s", input_file)
    try:
        matches = load_matches(input_file)
    except OSError as exc:
        log.error("Error reading input file %s: %s", input_file, exc)
        return False
    except FixtureFeedError as exc:
        log.error("Error parsing fixture feed: %s", exc)
        return False
    log.info("Parsed %d matches.", len(matches))

    aggregate = fold_matches(matches)
    ensure_directory(output_dir)

    with NoteBatch("notes") as batch:
        for match in matches:
            batch.add(output_dir / match_note_path(match, competition),
                      render_match_note(match, competition, season))

        for name in aggregate.referees:
            batch.add(output_dir / REFEREE_FOLDER / f"{name}.md", render_referee_note(name))

        for matchweek, span in aggregate.matchweeks.items():
            batch.add(output_dir / MATCHWEEK_FOLDER / f"{matchweek_title(matchweek, competition, season)}.md",
                      render_matchweek_note(matchweek, span, competition, season))

    log.info("Wrote %d matches, %d referees, and %d match weeks.",
             len(matches), len(aggregate.referees), len(aggregate.matchweeks))
    return batch.ok
