from __future__ import annotations

import datetime as dt
from pathlib import Path

import pandas as pd

from epl_standings.data.cleaning import clean_matches, load_processed_matches, save_clean_matches
from epl_standings.data.records import records_from_frame
from epl_standings.features.standings import compute_standings


def _write(tmp_path: Path, name: str, content: str) -> Path:
    p = tmp_path / name
    p.write_text(content, encoding="utf-8")
    return p


def test_clean_matches_basic(tmp_path: Path) -> None:
    csv_content = """Div,Date,HomeTeam,AwayTeam,FTHG,FTAG,FTR,HTHG
E0,13/08/2021,Brentford,Arsenal,2,0,H,1
E0,14/08/2021,Man United,Leeds,5,1,H,1
E0,15/08/2021,Tottenham,Man City,1,0,H,0
"""
    p = _write(tmp_path, "E0_2122.csv", csv_content)

    df = clean_matches([p], seasons=["2122"])

    assert len(df) == 3
    assert list(df.columns) == ["season", "match_date", "home_team", "away_team", "home_goals", "away_goals", "result"]
    assert (df["season"] == "2122").all()
    # day-first dates
    assert df.loc[0, "match_date"] == pd.Timestamp("2021-08-13")
    assert int(df.loc[1, "home_goals"]) == 5
    assert df["result"].tolist() == ["H", "H", "H"]


def test_clean_matches_infers_season_from_filename(tmp_path: Path) -> None:
    p = _write(tmp_path, "E0_2223.csv", "Date,HomeTeam,AwayTeam,FTHG,FTAG,FTR\n05/08/22,Crystal Palace,Arsenal,0,2,A\n")

    df = clean_matches([p])

    assert df.loc[0, "season"] == "2223"
    assert df.loc[0, "match_date"] == pd.Timestamp("2022-08-05")


def test_clean_matches_keeps_damaged_values_missing(tmp_path: Path) -> None:
    csv_content = """Date,HomeTeam,AwayTeam,FTHG,FTAG,FTR
not a date,TeamA,TeamB,1,0,H
02/01/2025,TeamC,TeamA,,,
03/01/2025,TeamB,TeamC,2,2,d
04/01/2025,TeamA,TeamC,1,1,?
"""
    p = _write(tmp_path, "E0_2425.csv", csv_content)

    df = clean_matches([p], seasons=["2425"])
    by_home = df.set_index("home_team")

    assert df["match_date"].isna().sum() == 1
    assert pd.isna(by_home.loc["TeamC", "home_goals"])
    assert by_home.loc["TeamB", "result"] == "D"
    assert df["result"].isna().sum() == 2

    records = records_from_frame(df)
    complete = [r for r in records if r.is_complete]
    assert len(complete) == 1
    assert complete[0].home_team == "TeamB"
    assert complete[0].date == dt.date(2025, 1, 3)


def test_processed_roundtrip(tmp_path: Path) -> None:
    p = _write(tmp_path, "E0_2122.csv", "Date,HomeTeam,AwayTeam,FTHG,FTAG,FTR\n13/08/2021,Brentford,Arsenal,2,0,H\n")
    df = clean_matches([p], seasons=["2122"])

    out = tmp_path / "processed" / "matches_clean.csv"
    save_clean_matches(df, out)
    back = load_processed_matches(out)

    assert back.loc[0, "season"] == "2122"
    assert back.loc[0, "match_date"] == pd.Timestamp("2021-08-13")
    assert int(back.loc[0, "home_goals"]) == 2
    assert back.loc[0, "result"] == "H"


def test_blank_team_name_is_not_a_team(tmp_path: Path) -> None:
    csv_content = """Date,HomeTeam,AwayTeam,FTHG,FTAG,FTR
13/08/2021,Brentford,Arsenal,2,0,H
14/08/2021,,Leeds,1,0,H
15/08/2021,Everton,  ,0,0,D
"""
    p = _write(tmp_path, "E0_2122.csv", csv_content)

    df = clean_matches([p], seasons=["2122"])

    assert len(df) == 3
    assert df["home_team"].isna().sum() == 1
    assert df["away_team"].isna().sum() == 1
    assert "nan" not in set(df["home_team"].dropna()) | set(df["away_team"].dropna())

    records = records_from_frame(df)
    assert [r.is_complete for r in records] == [True, False, False]

    rows = compute_standings(records, cutoff=dt.date(2021, 8, 31), include_idle_teams=True)
    assert sorted(r.team for r in rows) == ["Arsenal", "Brentford", "Everton", "Leeds"]
    assert sum(r.matches_played for r in rows) == 2
