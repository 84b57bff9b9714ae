from __future__ import annotations

from pathlib import Path

import pytest

from epl_standings import pipeline
from epl_standings.config import Settings
from epl_standings.errors import EmptyMatchLogError, InvalidCutoffError, InvalidSeasonError

CSV = """Div,Date,Time,HomeTeam,AwayTeam,FTHG,FTAG,FTR
E0,13/08/2021,20:00,Brentford,Arsenal,2,0,H
E0,14/08/2021,12:30,Man United,Leeds,5,1,H
E0,21/08/2021,15:00,Arsenal,Chelsea,0,2,A
E0,21/08/2021,15:00,Leeds,Everton,2,2,D
E0,28/08/2021,17:30,Man City,Arsenal,5,0,H
"""


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(raw_dir=tmp_path / "raw", processed_dir=tmp_path / "processed")


@pytest.fixture
def downloads(monkeypatch: pytest.MonkeyPatch) -> list:
    calls: list = []

    def fake_download(season: str, division: str, raw_dir: Path, *, force: bool = False) -> Path:
        calls.append((season, division, force))
        raw_dir.mkdir(parents=True, exist_ok=True)
        path = raw_dir / f"{division}_{season}.csv"
        path.write_text(CSV, encoding="utf-8")
        return path

    monkeypatch.setattr(pipeline, "download_season_csv", fake_download)
    return calls


def test_league_standings(settings: Settings, downloads: list) -> None:
    rows = pipeline.league_standings("08/21/2021", "2021/22", settings=settings)

    assert downloads == [("2122", "E0", False)]
    assert [r.team for r in rows][:3] == ["Man United", "Brentford", "Chelsea"]
    arsenal = next(r for r in rows if r.team == "Arsenal")
    assert (arsenal.record, arsenal.home_record, arsenal.away_record) == ("0-2-0", "0-1-0", "0-1-0")
    assert arsenal.streak == "L2"
    assert "Man City" not in {r.team for r in rows}


def test_league_standings_idle_teams(settings: Settings, downloads: list) -> None:
    rows = pipeline.league_standings("08/21/2021", "2122", settings=settings, include_idle_teams=True)

    assert rows[-1].team == "Man City"
    assert rows[-1].streak == "-"


def test_league_standings_division_override(settings: Settings, downloads: list) -> None:
    pipeline.league_standings("08/21/2021", "2021/22", settings=settings, division="E1", force=True)

    assert downloads == [("2122", "E1", True)]


def test_inputs_validated_before_download(settings: Settings, downloads: list) -> None:
    with pytest.raises(InvalidCutoffError):
        pipeline.league_standings("2021-08-21", "2021/22", settings=settings)
    with pytest.raises(InvalidSeasonError):
        pipeline.league_standings("08/21/2021", "2021-22", settings=settings)
    assert downloads == []


def test_cutoff_before_season(settings: Settings, downloads: list) -> None:
    with pytest.raises(EmptyMatchLogError):
        pipeline.league_standings("07/01/2021", "2021/22", settings=settings)
