"""Filtering and sorting of derived rows for the API and CLI."""

from __future__ import annotations

import math
from typing import Callable, Mapping, Optional

from clubstats.analysis.formulas import SENTINEL, coerce_number


def _active(value) -> bool:
    return value is not None and str(value) != "" and str(value).lower() != "all"


def filter_rows(rows: list[dict], league: Optional[str] = None,
                season: Optional[str] = None) -> list[dict]:
    """Keep rows matching a league acronym and/or season. None or 'all' matches everything."""
    result = rows
    if _active(league):
        result = [r for r in result if r.get("Acronym") == league]
    if _active(season):
        result = [r for r in result if str(r.get("Season")) == str(season)]
    return result


def filter_options(rows: list[dict]) -> dict:
    """Distinct league acronyms (A-Z) and seasons (newest first) present in ``rows``."""
    leagues = sorted({r.get("Acronym") for r in rows if r.get("Acronym") not in (None, "", SENTINEL)})
    seasons = {r.get("Season") for r in rows if r.get("Season") not in (None, "", SENTINEL)}
    return {
        "leagues": leagues,
        "seasons": sorted(seasons, key=coerce_number, reverse=True),
    }


def _default_key(value):
    # Numbers before text, text compared case-insensitively
    n = coerce_number(value, math.nan)
    if math.isfinite(n):
        return (0, n, "")
    return (1, 0.0, str(value if value is not None else "").lower())


def sort_rows(rows: list[dict], column: str,
              sort_keys: Optional[Mapping[str, Callable]] = None,
              descending: bool = False) -> list[dict]:
    """Stable sort on one column, using its dataset sort key when it has one."""
    key_fn = (sort_keys or {}).get(column)
    if key_fn is not None:
        return sorted(rows, key=lambda r: key_fn(str(r.get(column, ""))), reverse=descending)
    return sorted(rows, key=lambda r: _default_key(r.get(column)), reverse=descending)
