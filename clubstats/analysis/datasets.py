"""Dataset strategies: which columns, baselines, row mapping and sort keys each kind uses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from clubstats.analysis.baselines import (
    EMPTY_BATTING_BASELINE,
    EMPTY_PITCHING_BASELINE,
    compute_batting_baseline,
    compute_pitching_baseline,
)
from clubstats.analysis.formulas import innings_sort_key, numeric_sort_key
from clubstats.analysis.normalize import normalize_batter, normalize_pitcher


class DatasetKind(str, Enum):
    BATTING = "batting"
    PITCHING = "pitching"


@dataclass(frozen=True)
class DatasetConfig:
    kind: DatasetKind
    columns: tuple[str, ...]
    compute_baseline: Callable[[list[Mapping]], Any]
    map_row: Callable[[Mapping, Any], dict]
    empty_baseline: Any
    sort_keys: Mapping[str, Callable[[Any], float]] = field(default_factory=dict)


BATTING = DatasetConfig(
    kind=DatasetKind.BATTING,
    columns=(
        "Name", "League", "Acronym", "Season", "Age",
        "G", "AB", "R", "RBI", "H", "2B", "3B", "HR", "BB", "K",
        "AVG", "OBP", "SLG", "OPS", "OPS+", "wRC+", "WAR",
    ),
    compute_baseline=compute_batting_baseline,
    map_row=normalize_batter,
    empty_baseline=EMPTY_BATTING_BASELINE,
    sort_keys={
        "OPS": numeric_sort_key,
        "OPS+": numeric_sort_key,
        "wRC+": numeric_sort_key,
        "WAR": numeric_sort_key,
    },
)

PITCHING = DatasetConfig(
    kind=DatasetKind.PITCHING,
    columns=(
        "Name", "League", "Acronym", "Season", "Age",
        "G", "GS", "IP", "BF", "H", "R", "ER", "HR",
        "BB", "IBB", "HBP", "SO", "WP", "BK", "CG",
        "W", "L", "SV", "ERA", "WHIP", "FIP", "ERA+", "WAR",
    ),
    compute_baseline=compute_pitching_baseline,
    map_row=normalize_pitcher,
    empty_baseline=EMPTY_PITCHING_BASELINE,
    sort_keys={
        "IP": innings_sort_key,
        "ERA": numeric_sort_key,
        "FIP": numeric_sort_key,
        "ERA+": numeric_sort_key,
        "WAR": numeric_sort_key,
    },
)

DATASETS: dict[DatasetKind, DatasetConfig] = {
    DatasetKind.BATTING: BATTING,
    DatasetKind.PITCHING: PITCHING,
}


def get_dataset(kind) -> DatasetConfig:
    """Look up a dataset config by kind or its string value ('batting'/'pitching')."""
    return DATASETS[DatasetKind(kind)]
