"""Dataset orchestration: roster fetch -> league baselines -> normalized rows.

The loader owns two long-lived caches per dataset kind:

  - the raw club roster, fetched once and kept until ``clear_cache()``
  - league baselines keyed by league id, computed the first time a league
    shows up on the roster

Uncached leagues are fetched and aggregated concurrently; normalization only
starts once every league fetch has settled. A league whose fetch fails is
left out of the cache (so its players get sentinel columns) and is retried on
the next load. A failed roster fetch fails the whole load.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional

from clubstats.analysis.datasets import DatasetConfig, DatasetKind, get_dataset
from clubstats.analysis.formulas import as_mapping
from clubstats.config import Settings
from clubstats.data import bsm_api

logger = logging.getLogger(__name__)

FetchJson = Callable[[str], Awaitable[Any]]


class DatasetLoadError(Exception):
    """The club roster for a dataset could not be loaded."""

    def __init__(self, kind: DatasetKind):
        super().__init__(f"Failed to load {kind.value} dataset")
        self.kind = kind


class BaselineCache:
    """League baselines keyed by league id. No eviction."""

    def __init__(self) -> None:
        self._entries: dict[Any, Any] = {}

    def __contains__(self, league_id) -> bool:
        return league_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, league_id, default=None):
        return self._entries.get(league_id, default)

    def put(self, league_id, baseline) -> None:
        self._entries[league_id] = baseline

    def missing(self, league_ids: Iterable) -> list:
        """The ids from ``league_ids`` that have no cached baseline."""
        return [lid for lid in league_ids if lid not in self._entries]

    def clear(self) -> None:
        self._entries.clear()


def league_id_of(player: Mapping):
    return as_mapping(as_mapping(player).get("league")).get("id")


def league_ids(rows: Iterable[Mapping]) -> list:
    """Distinct non-empty league ids in first-seen order."""
    seen: dict[Any, None] = {}
    for row in rows:
        lid = league_id_of(row)
        if lid:
            seen.setdefault(lid, None)
    return list(seen)


class StatsLoader:
    def __init__(self, fetch_json: Optional[FetchJson] = None,
                 settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()
        self._fetch_json = fetch_json or partial(bsm_api.fetch_json, settings=self.settings)
        self._rosters: dict[DatasetKind, list[dict]] = {}
        self._baselines: dict[DatasetKind, BaselineCache] = {
            kind: BaselineCache() for kind in DatasetKind
        }

    def baselines(self, kind) -> BaselineCache:
        return self._baselines[DatasetKind(kind)]

    def clear_cache(self) -> None:
        """Drop every cached roster and baseline."""
        self._rosters.clear()
        for cache in self._baselines.values():
            cache.clear()
        logger.info("Cleared roster and baseline caches")

    async def load_roster(self, config: DatasetConfig) -> list[dict]:
        """Club roster for a dataset, fetched on first use."""
        if config.kind in self._rosters:
            logger.info(f"Using cached {config.kind.value} roster")
            return self._rosters[config.kind]

        url = bsm_api.club_stats_url(config.kind.value, self.settings)
        logger.info(f"Fetching {config.kind.value} roster from {url}")
        try:
            payload = await self._fetch_json(url)
        except Exception as e:
            logger.error(f"Failed to load {config.kind.value} dataset: {e}")
            raise DatasetLoadError(config.kind) from e

        roster = bsm_api.payload_rows(payload)
        self._rosters[config.kind] = roster
        logger.info(f"Fetched {len(roster)} {config.kind.value} rows")
        return roster

    async def _league_baseline(self, config: DatasetConfig, league_id):
        url = bsm_api.league_stats_url(league_id, config.kind.value, self.settings)
        payload = await self._fetch_json(url)
        rows = bsm_api.payload_rows(payload)
        baseline = config.compute_baseline(rows)
        logger.info(f"Computed {config.kind.value} baseline for league {league_id} ({len(rows)} rows)")
        return baseline

    async def refresh_baselines(self, config: DatasetConfig, roster: list[dict]) -> None:
        """Compute baselines for every roster league not already cached."""
        cache = self._baselines[config.kind]
        pending = cache.missing(league_ids(roster))
        if not pending:
            return

        results = await asyncio.gather(
            *(self._league_baseline(config, lid) for lid in pending),
            return_exceptions=True,
        )
        for lid, result in zip(pending, results):
            if isinstance(result, Exception):
                logger.warning(f"No {config.kind.value} baseline for league {lid}: {result}")
                continue
            if isinstance(result, BaseException):
                raise result
            cache.put(lid, result)

    def derive(self, config: DatasetConfig, roster: list[dict]) -> list[dict]:
        """Normalize every roster row against its league's cached baseline."""
        cache = self._baselines[config.kind]
        return [
            config.map_row(player, cache.get(league_id_of(player), config.empty_baseline))
            for player in roster
        ]

    async def load_and_derive(self, kind) -> list[dict]:
        """Fully derived rows for a dataset, in roster order.

        Raises:
            DatasetLoadError: if the club roster could not be fetched.
        """
        config = get_dataset(kind)
        roster = await self.load_roster(config)
        await self.refresh_baselines(config, roster)
        return self.derive(config, roster)


_default_loader: Optional[StatsLoader] = None


def get_loader() -> StatsLoader:
    """Process-wide loader configured from the environment."""
    global _default_loader
    if _default_loader is None:
        _default_loader = StatsLoader(settings=Settings.from_env())
    return _default_loader
