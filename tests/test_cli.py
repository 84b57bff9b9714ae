from __future__ import annotations

import datetime as dt

import pytest

from epl_standings.data.fetch import DownloadError
from epl_standings.data.records import MatchRecord
from epl_standings.errors import InvalidSeasonError
from epl_standings.features.standings import compute_standings, standings_frame
from scripts import standings as cli


def _rows():
    matches = [
        MatchRecord(dt.date(2021, 8, 14), "Team A", "Team B", 2, 1, "H"),
        MatchRecord(dt.date(2021, 8, 21), "Team C", "Team A", 0, 0, "D"),
    ]
    return compute_standings(matches, cutoff=dt.date(2021, 8, 31), include_idle_teams=False)


def test_main_prints_table(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    seen = {}

    def fake_league_standings(date, season, **kwargs):
        seen.update(date=date, season=season, **kwargs)
        return _rows()

    monkeypatch.setattr(cli, "league_standings", fake_league_standings)

    code = cli.main(["--date", "08/31/2021", "--season", "2021/22", "--include-idle", "--quiet"])

    out = capsys.readouterr().out
    assert code == 0
    assert seen["date"] == "08/31/2021"
    assert seen["season"] == "2021/22"
    assert seen["include_idle_teams"] is True
    assert "TeamName" in out and "Streak" in out
    assert "Team A" in out
    assert "2.000" in out


def test_main_reports_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def bad_season(date, season, **kwargs):
        raise InvalidSeasonError("Invalid season")

    monkeypatch.setattr(cli, "league_standings", bad_season)
    assert cli.main(["--date", "08/31/2021", "--season", "21-22"]) == 1

    def offline(date, season, **kwargs):
        raise DownloadError("network down")

    monkeypatch.setattr(cli, "league_standings", offline)
    assert cli.main(["--date", "08/31/2021", "--season", "2021/22"]) == 1


def test_format_table_marks_undefined_ratios() -> None:
    matches = [
        MatchRecord(dt.date(2021, 8, 14), "Team A", "Team B", 2, 1, "H"),
        MatchRecord(dt.date(2021, 9, 14), "Team C", "Team D", 0, 0, "D"),
    ]
    rows = compute_standings(matches, cutoff=dt.date(2021, 8, 31), include_idle_teams=True)

    text = cli.format_table(standings_frame(rows))

    last_line = text.splitlines()[-1]
    assert "Team D" in last_line
    assert last_line.split().count("-") == 5  # PPM, PtPct, GSM, GAM and the streak
