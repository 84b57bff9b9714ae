from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import pandas as pd

from epl_standings.data.fetch import DownloadError
from epl_standings.errors import StandingsError
from epl_standings.features.standings import standings_frame
from epl_standings.pipeline import league_standings
from epl_standings.utils.log import get_logger, set_level

logger = get_logger(__name__)

DISPLAY_COLUMNS = {
    "rank": "#",
    "team": "TeamName",
    "record": "Record",
    "home_record": "HomeRec",
    "away_record": "AwayRec",
    "matches_played": "MatchesPlayed",
    "points": "Points",
    "ppm": "PPM",
    "pt_pct": "PtPct",
    "goals_scored": "GS",
    "gsm": "GSM",
    "goals_allowed": "GA",
    "gam": "GAM",
    "last10": "Last10",
    "streak": "Streak",
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print the Premier League table as it stood on a given date.")
    parser.add_argument("--date", required=True, help="Cutoff date, inclusive (mm/dd/yyyy), e.g. 03/07/2022.")
    parser.add_argument("--season", required=True, help="Season (yyyy/yy), e.g. 2021/22.")
    parser.add_argument(
        "--division",
        type=str,
        default=None,
        help="Football-Data division code (default from env, E0 for the Premier League).",
    )
    parser.add_argument("--force", action="store_true", help="Force re-download even if cached.")
    parser.add_argument(
        "--include-idle",
        action="store_true",
        help="Also list teams that have not played a match by the cutoff.",
    )
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors.")
    return parser.parse_args(argv)


def format_table(table: pd.DataFrame) -> str:
    """Render the standings frame for a terminal (ratios to 3 decimals, '-' when undefined)."""
    out = table.rename(columns=DISPLAY_COLUMNS)
    for col in ["PPM", "PtPct", "GSM", "GAM"]:
        out[col] = out[col].map(lambda x: "-" if x is None or pd.isna(x) else f"{x:.3f}")
    return out.to_string(index=False)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.quiet:
        set_level(logging.WARNING)

    try:
        rows = league_standings(
            args.date,
            args.season,
            division=args.division,
            force=args.force,
            include_idle_teams=args.include_idle,
        )
    except (StandingsError, DownloadError) as e:
        logger.error("%s", e)
        return 1

    print(format_table(standings_frame(rows)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
