from __future__ import annotations

from pathlib import Path

import pytest

from epl_standings.config import Settings, get_settings


def test_seasons_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEASONS", "2122, 2223,")

    assert Settings().seasons == ["2122", "2223"]


def test_seasons_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SEASONS", raising=False)

    assert Settings().seasons == ["2324", "2223", "2122"]


def test_get_settings_creates_folders(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    s = get_settings()

    assert (tmp_path / s.raw_dir).is_dir()
    assert (tmp_path / s.processed_dir).is_dir()
    assert s.processed_path == s.processed_dir / "matches_clean.csv"
