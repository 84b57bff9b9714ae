from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from epl_standings.data.records import RESULT_CODES
from epl_standings.utils.log import get_logger

logger = get_logger(__name__)


REQUIRED_COLS_HINT = ["Date", "HomeTeam", "AwayTeam", "FTHG", "FTAG", "FTR"]
CLEAN_COLUMNS = ["season", "match_date", "home_team", "away_team", "home_goals", "away_goals", "result"]


def _safe_read_csv(path: Path) -> pd.DataFrame:
    """Read CSV robustly (Football-Data files can contain non-UTF8 chars)."""
    return pd.read_csv(path, encoding="utf-8", encoding_errors="ignore")


def _get_col(df: pd.DataFrame, candidates: List[str]) -> Optional[str]:
    for c in candidates:
        if c in df.columns:
            return c
    return None


def _parse_dates(values: pd.Series) -> pd.Series:
    # Football-Data: dd/mm/yy in older files, dd/mm/yyyy in recent ones
    return pd.to_datetime(values, dayfirst=True, format="mixed", errors="coerce").dt.normalize()


def _normalize_team(values: pd.Series) -> pd.Series:
    return values.astype("string").str.strip().replace("", pd.NA)


def _normalize_result(values: pd.Series) -> pd.Series:
    res = values.astype("string").str.strip().str.upper()
    return res.where(res.isin(RESULT_CODES), pd.NA)


def clean_matches(raw_csv_paths: Iterable[Path], seasons: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """Load and clean match data from Football-Data.co.uk CSVs.

    Parameters
    ----------
    raw_csv_paths:
        Paths to CSV files (one per season).
    seasons:
        Optional seasons list aligned with raw_csv_paths. If not provided, inferred from filename.

    Returns
    -------
    pd.DataFrame
        Columns: season, match_date, home_team, away_team, home_goals, away_goals, result.
        Damaged values (bad date, blank team, missing goals, unknown result code) are left missing;
        the standings pipeline drops those rows.
    """
    paths = list(raw_csv_paths)
    seasons_list = list(seasons) if seasons is not None else [None] * len(paths)

    frames: List[pd.DataFrame] = []
    for path, season in zip(paths, seasons_list):
        logger.info("Reading raw CSV: %s", path)
        df = _safe_read_csv(path)

        # Season inference from filename if missing, expects like "E0_2122.csv"
        if season is None:
            stem = path.stem
            season = stem.split("_")[-1] if "_" in stem else "unknown"

        missing_hint = [c for c in REQUIRED_COLS_HINT if c not in df.columns]
        if missing_hint:
            logger.warning("CSV %s is missing columns %s (will try best-effort parsing)", path, missing_hint)

        date_col = _get_col(df, ["Date", "date"])
        if not date_col:
            raise ValueError(f"No Date column found in {path}")

        home_col = _get_col(df, ["HomeTeam", "Home", "Home Team"])
        away_col = _get_col(df, ["AwayTeam", "Away", "Away Team"])
        if not home_col or not away_col:
            raise ValueError(f"Missing Home/Away team columns in {path}")

        # Goals / results columns vary slightly across files
        hg_col = _get_col(df, ["FTHG", "HG"])
        ag_col = _get_col(df, ["FTAG", "AG"])
        res_col = _get_col(df, ["FTR", "Res"])

        # Trailing empty lines in the feed come through as all-NaN rows
        df = df.dropna(subset=[home_col, away_col], how="all")

        cleaned = pd.DataFrame(
            {
                "season": str(season),
                "match_date": _parse_dates(df[date_col]),
                "home_team": _normalize_team(df[home_col]),
                "away_team": _normalize_team(df[away_col]),
                "home_goals": pd.to_numeric(df[hg_col], errors="coerce").astype("Int64") if hg_col else pd.NA,
                "away_goals": pd.to_numeric(df[ag_col], errors="coerce").astype("Int64") if ag_col else pd.NA,
                "result": _normalize_result(df[res_col]) if res_col else pd.NA,
            }
        )

        bad_dates = int(cleaned["match_date"].isna().sum())
        if bad_dates:
            logger.warning("%s: %d row(s) with an unparseable date", path, bad_dates)

        frames.append(cleaned)

    if not frames:
        return pd.DataFrame(columns=CLEAN_COLUMNS)

    all_matches = pd.concat(frames, ignore_index=True)
    all_matches = all_matches.sort_values(["season", "match_date"], kind="mergesort", na_position="last")
    return all_matches.reset_index(drop=True)


def season_matches(matches: pd.DataFrame, season: str) -> pd.DataFrame:
    """Rows of one season from a multi-season cleaned dataframe."""
    return matches[matches["season"].astype(str) == str(season)].reset_index(drop=True)


def save_clean_matches(df: pd.DataFrame, processed_path: Path) -> None:
    """Save cleaned matches to CSV."""
    processed_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(processed_path, index=False)
    logger.info("Saved processed dataset: %s (%d rows)", processed_path, len(df))


def load_processed_matches(processed_path: Path) -> pd.DataFrame:
    """Load the processed matches CSV with consistent dtypes."""
    if not processed_path.exists():
        raise FileNotFoundError(
            f"Processed dataset not found: {processed_path}. Run scripts.download_data first."
        )

    df = pd.read_csv(processed_path, parse_dates=["match_date"], dtype={"season": str})

    # Dtype normalization (CSV roundtrip can change types)
    for col in ["home_goals", "away_goals"]:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("Int64")
    for col in ["home_team", "away_team"]:
        df[col] = _normalize_team(df[col])
    df["result"] = _normalize_result(df["result"])

    return df
