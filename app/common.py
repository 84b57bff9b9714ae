from __future__ import annotations

import sys
from pathlib import Path

# Ensure project root is in sys.path (Streamlit runs scripts from /app)
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


import pandas as pd
import streamlit as st

from epl_standings.config import get_settings
from epl_standings.data.cleaning import load_processed_matches, season_matches
from epl_standings.data.records import MatchRecord, records_from_frame


@st.cache_resource
def settings_cached():
    return get_settings()


@st.cache_data
def load_matches_cached(processed_path: str) -> pd.DataFrame:
    return load_processed_matches(Path(processed_path))


def available_seasons(df: pd.DataFrame) -> list[str]:
    return sorted(df["season"].astype(str).unique().tolist(), reverse=True)


def season_records(df: pd.DataFrame, season: str) -> list[MatchRecord]:
    return records_from_frame(season_matches(df, season))


def season_date_range(df: pd.DataFrame, season: str) -> tuple | None:
    """First and last match day of a season, or None when no date could be parsed."""
    dates = season_matches(df, season)["match_date"].dropna()
    if dates.empty:
        return None
    return dates.min().date(), dates.max().date()
