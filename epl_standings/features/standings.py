from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Union

import pandas as pd

from epl_standings.data.records import MatchRecord, records_from_frame
from epl_standings.errors import EmptyMatchLogError
from epl_standings.features.build import (
    Record,
    Streak,
    VenueTally,
    chronological,
    compute_aggregates,
    compute_recent_form,
    compute_streaks,
    filter_matches,
    team_views,
)
from epl_standings.utils.log import get_logger

logger = get_logger(__name__)

NO_STREAK = "-"
_POINTS = {"W": 3, "D": 1, "L": 0}


def _per_match(total: int, played: int) -> Optional[float]:
    return total / played if played else None


@dataclass(frozen=True)
class TeamSeasonStats:
    """Everything known about one team at the cutoff; ratios are None before its first match."""

    team: str
    venues: VenueTally = field(default_factory=VenueTally)
    recent: VenueTally = field(default_factory=VenueTally)
    streak: Optional[Streak] = None

    @property
    def record(self) -> Record:
        return self.venues.record

    @property
    def matches_played(self) -> int:
        return self.record.played

    @property
    def points(self) -> int:
        return self.record.points

    @property
    def goals_scored(self) -> int:
        return self.venues.goals_for

    @property
    def goals_allowed(self) -> int:
        return self.venues.goals_against

    @property
    def last10(self) -> Record:
        return self.recent.record

    @property
    def points_per_match(self) -> Optional[float]:
        return _per_match(self.points, self.matches_played)

    @property
    def point_pct(self) -> Optional[float]:
        return _per_match(self.points, 3 * self.matches_played)

    @property
    def goals_scored_per_match(self) -> Optional[float]:
        return _per_match(self.goals_scored, self.matches_played)

    @property
    def goals_allowed_per_match(self) -> Optional[float]:
        return _per_match(self.goals_allowed, self.matches_played)


@dataclass(frozen=True)
class StandingsRow:
    rank: int
    team: str
    record: str
    home_record: str
    away_record: str
    matches_played: int
    points: int
    ppm: Optional[float]
    pt_pct: Optional[float]
    goals_scored: int
    gsm: Optional[float]
    goals_allowed: int
    gam: Optional[float]
    last10: str
    streak: str


STANDINGS_COLUMNS = list(StandingsRow.__dataclass_fields__)


def assemble_stats(
    aggregates: Dict[str, VenueTally],
    recent: Dict[str, VenueTally],
    streaks: Dict[str, Optional[Streak]],
    *,
    teams: Optional[Iterable[str]] = None,
) -> List[TeamSeasonStats]:
    """Merge the per-team results by team name.

    ``teams`` adds teams that have not played yet; they get empty records.
    """
    names = set(aggregates) | set(recent) | set(streaks)
    if teams is not None:
        names |= set(teams)
    return [
        TeamSeasonStats(
            team=name,
            venues=aggregates.get(name, VenueTally()),
            recent=recent.get(name, VenueTally()),
            streak=streaks.get(name),
        )
        for name in sorted(names)
    ]


def _rank_key(stats: TeamSeasonStats) -> tuple:
    # PPM desc, wins desc, GSM desc, GAM asc, team name asc; idle teams last
    if stats.matches_played == 0:
        return (1, 0.0, 0, 0.0, 0.0, stats.team)
    return (
        0,
        -stats.points_per_match,
        -stats.record.wins,
        -stats.goals_scored_per_match,
        stats.goals_allowed_per_match,
        stats.team,
    )


def rank_standings(stats: Sequence[TeamSeasonStats]) -> List[StandingsRow]:
    """Order teams by the tie-break chain and project them to table rows."""
    ordered = sorted(stats, key=_rank_key)
    return [
        StandingsRow(
            rank=i,
            team=s.team,
            record=str(s.record),
            home_record=str(s.venues.home),
            away_record=str(s.venues.away),
            matches_played=s.matches_played,
            points=s.points,
            ppm=s.points_per_match,
            pt_pct=s.point_pct,
            goals_scored=s.goals_scored,
            gsm=s.goals_scored_per_match,
            goals_allowed=s.goals_allowed,
            gam=s.goals_allowed_per_match,
            last10=str(s.last10),
            streak=str(s.streak) if s.streak is not None else NO_STREAK,
        )
        for i, s in enumerate(ordered, start=1)
    ]


def _as_records(matches: Union[pd.DataFrame, Iterable[MatchRecord]]) -> List[MatchRecord]:
    if isinstance(matches, pd.DataFrame):
        return records_from_frame(matches)
    return list(matches)


def compute_standings(
    matches: Union[pd.DataFrame, Iterable[MatchRecord]],
    *,
    cutoff,
    last_n: int = 10,
    include_idle_teams: bool = False,
) -> List[StandingsRow]:
    """Compute the league table as it stood at the end of ``cutoff``.

    Parameters
    ----------
    matches:
        One season of matches, as MatchRecord objects or a cleaned matches dataframe.
    cutoff:
        Last date (inclusive) whose matches count.
    last_n:
        Size of the recent-form window.
    include_idle_teams:
        Also list teams of the season that have not played by the cutoff.

    Returns
    -------
    list[StandingsRow]
        Best team first.

    Raises
    ------
    InvalidCutoffError
        ``cutoff`` is not a calendar date.
    EmptyMatchLogError
        No usable match was played on or before ``cutoff``.
    """
    records = _as_records(matches)
    played = filter_matches(records, cutoff)
    views = team_views(played)
    if views.empty:
        raise EmptyMatchLogError(f"No matches played on or before {cutoff} ({len(records)} in the season log)")

    teams = None
    if include_idle_teams:
        teams = {name for m in records for name in (m.home_team, m.away_team) if name}

    stats = assemble_stats(
        compute_aggregates(views),
        compute_recent_form(views, n=last_n),
        compute_streaks(views),
        teams=teams,
    )
    rows = rank_standings(stats)
    logger.info("Standings at %s: %d teams from %d matches", cutoff, len(rows), len(views) // 2)
    return rows


def standings_frame(rows: Sequence[StandingsRow]) -> pd.DataFrame:
    """Table rows as a dataframe (one column per StandingsRow field)."""
    return pd.DataFrame([asdict(r) for r in rows], columns=STANDINGS_COLUMNS)


def compute_cumulative_points(
    matches: Union[pd.DataFrame, Iterable[MatchRecord]],
    *,
    cutoff,
    team: str,
) -> pd.DataFrame:
    """Points progression of one team, match by match, up to the cutoff."""
    views = team_views(filter_matches(_as_records(matches), cutoff))
    t = chronological(views[views["team"] == team]).copy()
    if t.empty:
        return pd.DataFrame(columns=["date", "opponent", "context", "outcome", "points", "cum_points"])

    t["points"] = t["outcome"].map(_POINTS).astype(int)
    t["cum_points"] = t["points"].cumsum()
    return t[["date", "opponent", "context", "outcome", "points", "cum_points"]].reset_index(drop=True)
