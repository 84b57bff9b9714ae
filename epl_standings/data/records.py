from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import List, Literal, Optional

import pandas as pd

from epl_standings.utils.log import get_logger

logger = get_logger(__name__)

Result = Literal["H", "A", "D"]
Outcome = Literal["W", "L", "D"]

RESULT_CODES = frozenset({"H", "A", "D"})


@dataclass(frozen=True)
class MatchRecord:
    """One row of the season feed (full-time score and result code).

    Fields are Optional because the feed is not trusted: a row with no date,
    a blank team name, no goals or an unknown result code is kept here and
    dropped by the standings pipeline instead of being counted with the wrong meaning.
    """

    date: Optional[dt.date]
    home_team: Optional[str]
    away_team: Optional[str]
    home_goals: Optional[int]
    away_goals: Optional[int]
    result: Optional[Result]

    @property
    def is_complete(self) -> bool:
        return (
            self.date is not None
            and bool(self.home_team)
            and bool(self.away_team)
            and self.home_goals is not None
            and self.away_goals is not None
            and self.result in RESULT_CODES
        )


@dataclass(frozen=True)
class TeamMatchView:
    """A match seen from one side: the team, its goals and its outcome."""

    team: str
    opponent: str
    date: dt.date
    is_home: bool
    goals_for: int
    goals_against: int
    outcome: Outcome

    @property
    def context(self) -> str:
        return "home" if self.is_home else "away"


def _optional_int(value) -> Optional[int]:
    if pd.isna(value):
        return None
    return int(value)


def _optional_name(value) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    return str(value).strip() or None


def _optional_date(value) -> Optional[dt.date]:
    if value is None or pd.isna(value):
        return None
    return pd.Timestamp(value).date()


def records_from_frame(matches: pd.DataFrame) -> List[MatchRecord]:
    """Convert a cleaned matches dataframe into MatchRecord objects (feed order kept)."""
    records: List[MatchRecord] = []
    for row in matches.itertuples(index=False):
        result = row.result if isinstance(row.result, str) and row.result in RESULT_CODES else None
        records.append(
            MatchRecord(
                date=_optional_date(row.match_date),
                home_team=_optional_name(row.home_team),
                away_team=_optional_name(row.away_team),
                home_goals=_optional_int(row.home_goals),
                away_goals=_optional_int(row.away_goals),
                result=result,
            )
        )
    logger.debug("Built %d match records", len(records))
    return records
