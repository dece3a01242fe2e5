"""League baselines: the league-wide averages every "+" and WAR column is scaled against.

One baseline is computed per league id from that league's full player list:

  Batting:  lgWoba (simplified wOBA over AB+BB), lgOPS (PA-weighted), runs per PA
  Pitching: lgERA, lgR9, FIP constant, runs per win, replacement-level RA9

A league with no plate appearances (or no innings) yields an all-zero
baseline whose ``is_defined`` is False; the normalizer turns every column that
reads it into the sentinel.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Mapping

from clubstats.analysis.formulas import (
    as_mapping,
    fip_raw,
    innings_to_float,
    on_base_plus_slugging,
    plate_appearances,
    stat,
    woba_numerator,
)

# Runs-per-win scaling: 10 runs per win at 4.5 R/9, clamped to [8, 12]
BASE_RUNS_PER_WIN = 10.0
BASE_R9 = 4.5
MIN_RUNS_PER_WIN = 8.0
MAX_RUNS_PER_WIN = 12.0

# Replacement level is assumed to allow 20% more runs than league average
REPLACEMENT_RA9_FACTOR = 1.20


@dataclass(frozen=True)
class BattingBaseline:
    lg_woba: float = 0.0
    lg_ops: float = 0.0
    lg_runs_per_pa: float = 0.0
    total_pa: float = 0.0

    @property
    def is_defined(self) -> bool:
        return self.total_pa > 0


@dataclass(frozen=True)
class PitchingBaseline:
    lg_era: float = 0.0
    lg_r9: float = 0.0
    fip_constant: float = 0.0
    runs_per_win: float = BASE_RUNS_PER_WIN
    replacement_ra9: float = 0.0
    total_ip: float = 0.0

    @property
    def is_defined(self) -> bool:
        return self.total_ip > 0


EMPTY_BATTING_BASELINE = BattingBaseline()
EMPTY_PITCHING_BASELINE = PitchingBaseline()


def runs_per_win(lg_r9: float) -> float:
    """Environment-scaled runs per win. A zero R/9 falls back to the 4.5 base."""
    scaled = BASE_RUNS_PER_WIN * math.sqrt((lg_r9 or BASE_R9) / BASE_R9)
    return min(MAX_RUNS_PER_WIN, max(MIN_RUNS_PER_WIN, scaled))


def _values(row: Mapping) -> Mapping:
    return as_mapping(as_mapping(row).get("values"))


def compute_batting_baseline(rows: Iterable[Mapping]) -> BattingBaseline:
    """Aggregate a league's batting rows into its baseline."""
    woba_sum = woba_den = 0.0
    ops_sum = ops_den = 0.0
    total_runs = total_pa = 0.0

    for row in rows:
        v = _values(row)
        pa = plate_appearances(v)

        if pa > 0:
            woba_sum += woba_numerator(v)
            woba_den += pa

        ops = on_base_plus_slugging(v)
        if pa > 0 and math.isfinite(ops):
            ops_sum += ops * pa
            ops_den += pa

        total_runs += stat(v, "runs")
        total_pa += pa

    return BattingBaseline(
        lg_woba=woba_sum / woba_den if woba_den > 0 else 0.0,
        lg_ops=ops_sum / ops_den if ops_den > 0 else 0.0,
        lg_runs_per_pa=total_runs / total_pa if total_pa > 0 else 0.0,
        total_pa=total_pa,
    )


def compute_pitching_baseline(rows: Iterable[Mapping]) -> PitchingBaseline:
    """Aggregate a league's pitching rows into its baseline.

    The FIP constant is chosen so that league-average FIP equals league ERA.
    """
    totals = {"ip": 0.0, "er": 0.0, "r": 0.0, "hr": 0.0, "bb": 0.0, "hbp": 0.0, "k": 0.0}

    for row in rows:
        v = _values(row)
        totals["ip"] += innings_to_float(v.get("innings_pitched"))
        totals["er"] += stat(v, "earned_runs")
        totals["r"] += stat(v, "runs")
        totals["hr"] += stat(v, "homeruns")
        totals["bb"] += stat(v, "base_on_balls_allowed")
        totals["hbp"] += stat(v, "hit_by_pitches")
        totals["k"] += stat(v, "strikeouts")

    ip = totals["ip"]
    lg_era = totals["er"] * 9 / ip if ip > 0 else 0.0
    lg_r9 = totals["r"] * 9 / ip if ip > 0 else 0.0
    fip_constant = lg_era - fip_raw(totals["hr"], totals["bb"], totals["hbp"], totals["k"], ip)

    return PitchingBaseline(
        lg_era=lg_era,
        lg_r9=lg_r9,
        fip_constant=fip_constant,
        runs_per_win=runs_per_win(lg_r9),
        replacement_ra9=(lg_r9 or lg_era) * REPLACEMENT_RA9_FACTOR,
        total_ip=ip,
    )
