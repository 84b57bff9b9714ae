from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _parse_csv_list(value: str | None, default: str) -> List[str]:
    raw = (value or default).strip()
    if not raw:
        return [s for s in default.split(",") if s.strip()]
    return [s.strip() for s in raw.split(",") if s.strip()]


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables (and .env)."""

    # Data
    raw_dir: Path = Path(os.getenv("RAW_DIR", "data/raw"))
    processed_dir: Path = Path(os.getenv("PROCESSED_DIR", "data/processed"))

    # Football-Data.co.uk: E0 is the English Premier League
    division: str = os.getenv("DIVISION", "E0")
    seasons: List[str] = None  # initialized in __post_init__

    # Standings
    form_n: int = int(os.getenv("FORM_N", "10"))

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "seasons",
            _parse_csv_list(os.getenv("SEASONS"), default="2324,2223,2122"),
        )

    @property
    def processed_path(self) -> Path:
        return self.processed_dir / "matches_clean.csv"


def get_settings() -> Settings:
    """Return settings (create folders if needed)."""
    s = Settings()
    s.raw_dir.mkdir(parents=True, exist_ok=True)
    s.processed_dir.mkdir(parents=True, exist_ok=True)
    return s
