"""Numeric coercion and rate-stat formulas shared by the batting and pitching paths.

Feed values arrive as numbers, numeric strings ("0.312"), null or not at all.
Every raw field read goes through ``coerce_number`` so the formulas below only
ever see finite floats.

The wOBA and PA formulas are deliberately simplified: the club feed has no
hit-by-pitch or sacrifice-fly columns for batters, so PA is approximated as
AB + BB and the wOBA weights are fixed rather than run-environment adjusted.
"""

from __future__ import annotations

import math
import re
from typing import Mapping, Optional

# Fixed linear weights for the simplified wOBA numerator
WOBA_WEIGHTS = {"BB": 0.69, "1B": 0.89, "2B": 1.27, "3B": 1.62, "HR": 2.10}

# FIP component weights
FIP_HR_WEIGHT = 13
FIP_BB_WEIGHT = 3
FIP_K_WEIGHT = 2

# Displayed in place of any derived value that cannot be computed
SENTINEL = "-"

_LEADING_FLOAT = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INNINGS = re.compile(r"^(\d+)(?:\.(\d))?$")


# ── Numeric coercion ──


def _parse_float(value) -> float:
    """Leading-number parse; NaN when nothing numeric can be read."""
    if value is None or isinstance(value, bool):
        return math.nan
    try:
        if isinstance(value, (int, float)):
            return float(value)
        m = _LEADING_FLOAT.match(str(value))
        if not m:
            return math.nan
        return float(m.group(0))
    except (ValueError, OverflowError):
        return math.nan


def coerce_number(value, default: float = 0.0) -> float:
    """Parse ``value`` as a float, returning ``default`` for anything non-finite."""
    n = _parse_float(value)
    return n if math.isfinite(n) else default


def as_mapping(value) -> Mapping:
    """``value`` if it is a mapping, else an empty one. Feed objects can be null or malformed."""
    return value if isinstance(value, Mapping) else {}


def stat(values: Optional[Mapping], key: str, default: float = 0.0) -> float:
    """Coerced read of one raw field from a player's ``values`` mapping."""
    return coerce_number(as_mapping(values).get(key), default)


def _thirds(display) -> Optional[float]:
    m = _INNINGS.match(str(display if display is not None else "").strip())
    if not m:
        return None
    whole = int(m.group(1))
    frac = int(m.group(2) or 0)
    if frac == 1:
        return whole + 1 / 3
    if frac == 2:
        return whole + 2 / 3
    return float(whole)


def innings_to_float(display) -> float:
    """Convert innings-pitched notation ("12.1" = 12 1/3) to a float; 0 when unparseable."""
    ip = _thirds(display)
    return 0.0 if ip is None else ip


# ── Sort keys ──


def innings_sort_key(display) -> float:
    """Like ``innings_to_float`` but sinks unparseable values to -inf."""
    ip = _thirds(display)
    return -math.inf if ip is None else ip


def numeric_sort_key(display) -> float:
    """Sort key for formatted numeric columns.

    The sentinel and other text sort as 0, so "-" lands between negative and
    positive values (e.g. below a WAR of 0.25 but above -0.40).
    """
    return coerce_number(display, 0.0)


# ── Batting ──


def plate_appearances(values: Optional[Mapping]) -> float:
    """PA approximated as AB + BB (HBP and SF are not in the feed)."""
    return stat(values, "at_bats") + stat(values, "base_on_balls")


def singles(values: Optional[Mapping]) -> float:
    hits = stat(values, "hits")
    extra = stat(values, "doubles") + stat(values, "triples") + stat(values, "homeruns")
    return max(0.0, hits - extra)


def woba_numerator(values: Optional[Mapping]) -> float:
    """Linear-weights sum behind the simplified wOBA."""
    return (
        WOBA_WEIGHTS["BB"] * stat(values, "base_on_balls")
        + WOBA_WEIGHTS["1B"] * singles(values)
        + WOBA_WEIGHTS["2B"] * stat(values, "doubles")
        + WOBA_WEIGHTS["3B"] * stat(values, "triples")
        + WOBA_WEIGHTS["HR"] * stat(values, "homeruns")
    )


def simplified_woba(values: Optional[Mapping]) -> float:
    """wOBA over AB + BB. Returns 0 when there are no plate appearances."""
    denom = plate_appearances(values)
    if denom <= 0:
        return 0.0
    return woba_numerator(values) / denom


def on_base_plus_slugging(values: Optional[Mapping]) -> float:
    """Feed OPS when present, else OBP + SLG. NaN when neither can be read."""
    ops = stat(values, "on_base_plus_slugging", math.nan)
    if not math.isnan(ops):
        return ops
    obp = stat(values, "on_base_percentage", math.nan)
    slg = stat(values, "slugging_percentage", math.nan)
    if math.isnan(obp) and math.isnan(slg):
        return math.nan
    return (0.0 if math.isnan(obp) else obp) + (0.0 if math.isnan(slg) else slg)


# ── Pitching ──


def fip_raw(hr: float, bb: float, hbp: float, k: float, ip: float) -> float:
    """(13*HR + 3*(BB+HBP) - 2*K) / IP, before the league constant. 0 when IP <= 0."""
    if ip <= 0:
        return 0.0
    return (FIP_HR_WEIGHT * hr + FIP_BB_WEIGHT * (bb + hbp) - FIP_K_WEIGHT * k) / ip


def round_half_up(x: float) -> int:
    """Integer rounding used for the "+" columns (0.5 always rounds up)."""
    return int(math.floor(x + 0.5))
