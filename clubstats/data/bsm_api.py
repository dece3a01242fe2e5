"""Fetch club and league statistics from the BSM JSON API (bsm.baseball-softball.de)."""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from clubstats.config import Settings

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a URL could not be fetched directly or through any proxy."""

    def __init__(self, url: str):
        super().__init__(f"Failed to fetch {url}")
        self.url = url


def club_stats_url(kind: str, settings: Optional[Settings] = None) -> str:
    """Club-wide statistics endpoint for 'batting' or 'pitching'."""
    settings = settings or Settings()
    return f"{settings.BASE_URL}/clubs/{settings.CLUB_ID}/statistics/{kind}.json"


def league_stats_url(league_id, kind: str, settings: Optional[Settings] = None) -> str:
    """Statistics endpoint for every player in one league group."""
    settings = settings or Settings()
    return f"{settings.BASE_URL}/league_groups/{league_id}/statistics/{kind}.json"


def _candidate_urls(url: str, settings: Settings) -> list[str]:
    return [url] + [prefix + quote(url, safe="") for prefix in settings.PROXIES]


async def fetch_json(url: str, settings: Optional[Settings] = None):
    """GET a JSON document, falling back to the configured proxies in order.

    Raises:
        FetchError: if the direct request and every proxy fail.
    """
    settings = settings or Settings()
    last_error: Optional[Exception] = None

    async with httpx.AsyncClient(timeout=settings.TIMEOUT, follow_redirects=True) as client:
        for candidate in _candidate_urls(url, settings):
            try:
                resp = await client.get(candidate)
                resp.raise_for_status()
                return resp.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"Fetch via {candidate} failed: {e}")
                last_error = e

    raise FetchError(url) from last_error


def payload_rows(payload) -> list[dict]:
    """Player records from a BSM payload; an absent or null 'data' field is empty.

    Entries that are not objects (null, strings, lists) are dropped.
    """
    if not isinstance(payload, dict):
        return []
    data = payload.get("data")
    if not isinstance(data, list):
        return []
    return [row for row in data if isinstance(row, dict)]
