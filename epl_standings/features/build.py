from __future__ import annotations

import datetime as dt
from dataclasses import asdict, dataclass, field
from functools import reduce
from typing import Dict, Iterable, List, Optional

import pandas as pd

from epl_standings.data.records import MatchRecord, Outcome, TeamMatchView
from epl_standings.errors import InvalidCutoffError
from epl_standings.utils.log import get_logger

logger = get_logger(__name__)

CONTEXTS = ["home", "away"]
VIEW_COLUMNS = ["team", "opponent", "date", "is_home", "context", "goals_for", "goals_against", "outcome"]
TALLY_COLUMNS = ["wins", "losses", "ties", "goals_for", "goals_against"]

# Result code -> outcome, for each side of the match
_HOME_OUTCOME = {"H": "W", "A": "L", "D": "D"}
_AWAY_OUTCOME = {"H": "L", "A": "W", "D": "D"}


@dataclass(frozen=True)
class Record:
    """Win-loss-tie record."""

    wins: int = 0
    losses: int = 0
    ties: int = 0

    @property
    def played(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def points(self) -> int:
        return self.wins * 3 + self.ties

    def __add__(self, other: "Record") -> "Record":
        return Record(self.wins + other.wins, self.losses + other.losses, self.ties + other.ties)

    def __str__(self) -> str:
        return f"{self.wins}-{self.losses}-{self.ties}"


@dataclass(frozen=True)
class Streak:
    outcome: Outcome
    length: int

    def __str__(self) -> str:
        return f"{self.outcome}{self.length}"


@dataclass(frozen=True)
class VenueTally:
    """Records and goals of one team, split by home/away context."""

    home: Record = field(default_factory=Record)
    away: Record = field(default_factory=Record)
    home_goals_for: int = 0
    home_goals_against: int = 0
    away_goals_for: int = 0
    away_goals_against: int = 0

    @property
    def record(self) -> Record:
        return self.home + self.away

    @property
    def goals_for(self) -> int:
        return self.home_goals_for + self.away_goals_for

    @property
    def goals_against(self) -> int:
        return self.home_goals_against + self.away_goals_against


def _require_cutoff(cutoff) -> dt.date:
    if cutoff is pd.NaT:
        raise InvalidCutoffError("Cutoff date is NaT.")
    if isinstance(cutoff, dt.datetime):
        return cutoff.date()
    if isinstance(cutoff, dt.date):
        return cutoff
    raise InvalidCutoffError(f"Cutoff must be a calendar date, got {cutoff!r}")


def filter_matches(matches: Iterable[MatchRecord], cutoff) -> List[MatchRecord]:
    """Keep the matches played on or before ``cutoff`` (inclusive).

    Rows without a date cannot be placed in time and are left out.
    """
    cutoff = _require_cutoff(cutoff)
    return [m for m in matches if m.date is not None and m.date <= cutoff]


def expand_match(match: MatchRecord, *, is_home: bool) -> TeamMatchView:
    """View ``match`` from the home side (``is_home=True``) or the away side."""
    if not match.is_complete:
        raise ValueError(f"Cannot expand incomplete match record: {match!r}")

    if is_home:
        return TeamMatchView(
            team=match.home_team,
            opponent=match.away_team,
            date=match.date,
            is_home=True,
            goals_for=match.home_goals,
            goals_against=match.away_goals,
            outcome=_HOME_OUTCOME[match.result],
        )
    return TeamMatchView(
        team=match.away_team,
        opponent=match.home_team,
        date=match.date,
        is_home=False,
        goals_for=match.away_goals,
        goals_against=match.home_goals,
        outcome=_AWAY_OUTCOME[match.result],
    )


def team_views(matches: Iterable[MatchRecord]) -> pd.DataFrame:
    """Convert match-level records to team-level rows (two rows per match).

    Records with a missing date, team, score or result code are dropped with a warning.
    """
    views: List[TeamMatchView] = []
    dropped = 0
    for m in matches:
        if not m.is_complete:
            dropped += 1
            continue
        views.append(expand_match(m, is_home=True))
        views.append(expand_match(m, is_home=False))

    if dropped:
        logger.warning("Dropped %d match row(s) with a missing date, team, score or result code", dropped)

    if not views:
        return pd.DataFrame(columns=VIEW_COLUMNS)

    df = pd.DataFrame([{**asdict(v), "context": v.context} for v in views])
    df["date"] = pd.to_datetime(df["date"])
    return df[VIEW_COLUMNS]


def chronological(views: pd.DataFrame) -> pd.DataFrame:
    """Oldest first; same-day rows by opponent descending, home last.

    Reversed, this is the recency order used everywhere: date descending,
    opponent ascending, home before away. Feed order never matters.
    """
    return views.sort_values(
        ["date", "opponent", "is_home"],
        ascending=[True, False, True],
        kind="mergesort",
    )


def _tally(views: pd.DataFrame) -> Dict[str, VenueTally]:
    counts = views.assign(
        wins=(views["outcome"] == "W").astype(int),
        losses=(views["outcome"] == "L").astype(int),
        ties=(views["outcome"] == "D").astype(int),
    )
    summed = counts.groupby(["team", "context"])[TALLY_COLUMNS].sum()

    out: Dict[str, VenueTally] = {}
    for team, g in summed.groupby(level="team"):
        by_context = g.droplevel("team").reindex(CONTEXTS, fill_value=0)
        home = by_context.loc["home"]
        away = by_context.loc["away"]
        out[str(team)] = VenueTally(
            home=Record(int(home["wins"]), int(home["losses"]), int(home["ties"])),
            away=Record(int(away["wins"]), int(away["losses"]), int(away["ties"])),
            home_goals_for=int(home["goals_for"]),
            home_goals_against=int(home["goals_against"]),
            away_goals_for=int(away["goals_for"]),
            away_goals_against=int(away["goals_against"]),
        )
    return out


def compute_aggregates(views: pd.DataFrame) -> Dict[str, VenueTally]:
    """Cumulative home/away records and goals per team."""
    return _tally(views)


def compute_recent_form(views: pd.DataFrame, *, n: int = 10) -> Dict[str, VenueTally]:
    """Home/away records per team over its ``n`` most recent matches (fewer if not available)."""
    if n < 1:
        raise ValueError(f"Recent-form window must be >= 1, got {n}")
    recent = chronological(views).iloc[::-1].groupby("team", sort=False).head(n)
    return _tally(recent)


def _extend_streak(streak: Optional[Streak], outcome: Outcome) -> Streak:
    if streak is not None and streak.outcome == outcome:
        return Streak(outcome, streak.length + 1)
    return Streak(outcome, 1)


def current_streak(outcomes: Iterable[Outcome]) -> Optional[Streak]:
    """Run of identical outcomes ending at the last element; None when there is none."""
    return reduce(_extend_streak, outcomes, None)


def compute_streaks(views: pd.DataFrame) -> Dict[str, Optional[Streak]]:
    ordered = chronological(views)
    return {str(team): current_streak(g["outcome"]) for team, g in ordered.groupby("team")}
