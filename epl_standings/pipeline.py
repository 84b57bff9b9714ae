from __future__ import annotations

from typing import List, Optional

from epl_standings.config import Settings, get_settings
from epl_standings.data.cleaning import clean_matches
from epl_standings.data.fetch import download_season_csv
from epl_standings.data.inputs import parse_cutoff_date, parse_season
from epl_standings.data.records import MatchRecord, records_from_frame
from epl_standings.features.standings import StandingsRow, compute_standings
from epl_standings.utils.log import get_logger

logger = get_logger(__name__)


def load_season(
    season_code: str,
    *,
    settings: Optional[Settings] = None,
    division: Optional[str] = None,
    force: bool = False,
) -> List[MatchRecord]:
    """Download (or reuse the cached copy of) one season and return its match records."""
    settings = settings or get_settings()
    division = division or settings.division
    path = download_season_csv(season_code, division, settings.raw_dir, force=force)
    return records_from_frame(clean_matches([path], seasons=[season_code]))


def league_standings(
    date,
    season,
    *,
    settings: Optional[Settings] = None,
    division: Optional[str] = None,
    force: bool = False,
    include_idle_teams: bool = False,
) -> List[StandingsRow]:
    """Standings of ``season`` as of ``date``, e.g. ``league_standings("03/07/2022", "2021/22")``.

    Inputs are validated before anything is downloaded.
    """
    settings = settings or get_settings()
    cutoff = parse_cutoff_date(date)
    season_code = parse_season(season)

    logger.info("Standings for season %s at %s", season_code, cutoff)
    matches = load_season(season_code, settings=settings, division=division, force=force)
    return compute_standings(
        matches,
        cutoff=cutoff,
        last_n=settings.form_n,
        include_idle_teams=include_idle_teams,
    )
