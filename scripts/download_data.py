from __future__ import annotations

import argparse
from pathlib import Path
from typing import List

from epl_standings.config import get_settings
from epl_standings.data.cleaning import clean_matches, save_clean_matches
from epl_standings.data.fetch import download_many
from epl_standings.data.inputs import parse_season
from epl_standings.utils.log import get_logger

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Download and preprocess Premier League match data.")
    parser.add_argument(
        "--seasons",
        type=str,
        default=None,
        help="Comma-separated seasons (e.g., 2021/22,2022/23 or 2122,2223). Defaults to SEASONS env.",
    )
    parser.add_argument(
        "--division",
        type=str,
        default=None,
        help="Division code (default from env, E0 for the Premier League).",
    )
    parser.add_argument("--force", action="store_true", help="Force re-download even if cached.")
    parser.add_argument(
        "--out",
        type=str,
        default=None,
        help="Output CSV path for processed data (default: data/processed/matches_clean.csv).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()

    seasons: List[str] = settings.seasons
    if args.seasons:
        seasons = [s.strip() for s in args.seasons.split(",") if s.strip()]
    seasons = [parse_season(s) for s in seasons]

    division = args.division or settings.division

    logger.info("Downloading seasons=%s division=%s", seasons, division)
    raw_paths = download_many(seasons=seasons, division=division, raw_dir=settings.raw_dir, force=args.force)

    df = clean_matches(raw_paths, seasons=seasons)

    out_path = Path(args.out) if args.out else settings.processed_path
    save_clean_matches(df, out_path)

    logger.info("Done. You can now run: streamlit run app/streamlit_app.py")


if __name__ == "__main__":
    main()
