from __future__ import annotations

import time
from pathlib import Path
from typing import Iterable, List

import requests

from epl_standings.utils.log import get_logger

logger = get_logger(__name__)

BASE_URL_TEMPLATE = "https://www.football-data.co.uk/mmz4281/{season}/{division}.csv"


class DownloadError(RuntimeError):
    """Raised when a season CSV cannot be downloaded (network error or unknown season)."""


def build_season_url(season: str, division: str = "E0") -> str:
    """Build the Football-Data.co.uk URL for a given season code and division."""
    return BASE_URL_TEMPLATE.format(season=season, division=division)


def _download_with_retries(
    url: str,
    dest_path: Path,
    *,
    session: requests.Session | None = None,
    timeout_s: int = 20,
    max_retries: int = 4,
    backoff_s: float = 1.5,
) -> None:
    """Download a URL to a local file with retries and basic rate-limit handling.

    A 404 is not retried: Football-Data answers it for seasons it does not have.
    """
    session = session or requests.Session()
    last_err: Exception | None = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.info("Downloading %s (attempt %s/%s)", url, attempt, max_retries)
            resp = session.get(url, timeout=timeout_s)
            if resp.status_code == 429:
                retry_after = resp.headers.get("Retry-After")
                wait = float(retry_after) if retry_after and retry_after.isdigit() else backoff_s * attempt
                logger.warning("Rate limited (429). Sleeping %.1fs then retrying...", wait)
                time.sleep(wait)
                continue
            if resp.status_code == 404:
                raise DownloadError(f"No data published at {url} (invalid season or division?)")

            resp.raise_for_status()
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            dest_path.write_bytes(resp.content)
            logger.info("Saved to %s (%d bytes)", dest_path, dest_path.stat().st_size)
            return
        except requests.RequestException as e:
            last_err = e
            wait = backoff_s * attempt
            logger.warning("Download failed: %s. Retrying in %.1fs", e, wait)
            time.sleep(wait)

    raise DownloadError(f"Failed to download {url} after {max_retries} attempts") from last_err


def download_season_csv(
    season: str,
    division: str,
    raw_dir: Path,
    *,
    force: bool = False,
    session: requests.Session | None = None,
) -> Path:
    """Ensure the CSV for (season, division) exists locally; download if needed."""
    dest = raw_dir / f"{division}_{season}.csv"
    if dest.exists() and not force:
        logger.info("Using cached file: %s", dest)
        return dest

    url = build_season_url(season=season, division=division)
    _download_with_retries(url, dest, session=session)
    return dest


def download_many(
    seasons: Iterable[str],
    division: str,
    raw_dir: Path,
    *,
    force: bool = False,
) -> List[Path]:
    """Download multiple seasons and return local file paths."""
    session = requests.Session()
    return [download_season_csv(s, division, raw_dir, force=force, session=session) for s in seasons]
