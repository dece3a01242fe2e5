"""Per-player normalization: raw feed record + league baseline -> display row.

Derived columns are formatted for display (OPS to 3 places, ERA/FIP/WAR to 2,
"+" columns as ints). Anything that cannot be computed (zero denominator,
undefined baseline, or a sentinel dependency) is rendered as "-".
"""

from __future__ import annotations

import math
from typing import Mapping, Optional

from clubstats.analysis.baselines import (
    EMPTY_BATTING_BASELINE,
    EMPTY_PITCHING_BASELINE,
    BattingBaseline,
    PitchingBaseline,
)
from clubstats.analysis.formulas import (
    SENTINEL,
    as_mapping,
    fip_raw,
    innings_to_float,
    on_base_plus_slugging,
    plate_appearances,
    round_half_up,
    simplified_woba,
    stat,
)

# Offensive WAR constants: -20 runs per 600 PA at replacement, fixed 10 runs per win
REPLACEMENT_RUNS_PER_600_PA = -20.0
BATTING_RUNS_PER_WIN = 10.0


def _count(values: Optional[Mapping], key: str):
    """Counting stat for display: int when integral, 0 when absent."""
    n = stat(values, key)
    return int(n) if n.is_integer() else n


def _passthrough(value):
    return SENTINEL if value is None else value


def _identity(player: Mapping, prefer_game_class: bool = False) -> dict:
    player = as_mapping(player)
    person = as_mapping(player.get("person"))
    league = as_mapping(player.get("league"))
    game_class = as_mapping(league.get("game_class")) if prefer_game_class else {}

    name = f"{person.get('first_name') or ''} {person.get('last_name') or ''}".strip()
    season = game_class.get("season")
    if season is None:
        season = league.get("season")
    age = game_class.get("human_age_group_short")
    if age is None:
        age = league.get("human_age_group_short")

    return {
        "Name": name,
        "League": _passthrough(league.get("name")),
        "Acronym": _passthrough(league.get("acronym")),
        "Season": _passthrough(season),
        "Age": _passthrough(age),
    }


# ── Batting ──


def batting_columns_derived(values: Optional[Mapping], baseline: BattingBaseline) -> dict:
    """OPS, OPS+, wRC+ and offensive WAR for one batter."""
    ops = on_base_plus_slugging(values)
    ops_finite = math.isfinite(ops)

    woba = simplified_woba(values)
    wrc_plus = (
        round_half_up(100 * woba / baseline.lg_woba)
        if baseline.lg_woba > 0 and woba > 0
        else SENTINEL
    )

    ops_plus = (
        round_half_up(100 * ops / baseline.lg_ops)
        if baseline.lg_ops > 0 and ops_finite and ops > 0
        else SENTINEL
    )

    pa = plate_appearances(values)
    war = SENTINEL
    if ops_plus != SENTINEL and baseline.lg_runs_per_pa > 0 and pa > 0:
        raa = ((ops_plus - 100) / 100) * baseline.lg_runs_per_pa * pa
        replacement_runs = REPLACEMENT_RUNS_PER_600_PA * (pa / 600)
        war = f"{(raa + replacement_runs) / BATTING_RUNS_PER_WIN:.2f}"

    return {
        "OPS": f"{ops:.3f}" if ops_finite else SENTINEL,
        "OPS+": ops_plus,
        "wRC+": wrc_plus,
        "WAR": war,
    }


def normalize_batter(player: Mapping, baseline: Optional[BattingBaseline] = None) -> dict:
    """Map one raw batting record to a display row."""
    baseline = baseline or EMPTY_BATTING_BASELINE
    v = as_mapping(as_mapping(player).get("values"))

    row = _identity(player)
    row.update({
        "G": _count(v, "games"),
        "AB": _count(v, "at_bats"),
        "R": _count(v, "runs"),
        "RBI": _count(v, "runs_batted_in"),
        "H": _count(v, "hits"),
        "2B": _count(v, "doubles"),
        "3B": _count(v, "triples"),
        "HR": _count(v, "homeruns"),
        "BB": _count(v, "base_on_balls"),
        "K": _count(v, "strikeouts"),
        "AVG": _passthrough(v.get("batting_average")),
        "OBP": _passthrough(v.get("on_base_percentage")),
        "SLG": _passthrough(v.get("slugging_percentage")),
    })
    row.update(batting_columns_derived(v, baseline))
    return row


# ── Pitching ──


def pitching_columns_derived(values: Optional[Mapping], baseline: PitchingBaseline) -> dict:
    """ERA, FIP, ERA+ and FIP-based WAR for one pitcher.

    Every column that divides by IP is the sentinel when IP is zero, and the
    baseline-dependent ones (FIP, ERA+, WAR) also when the league has no
    baseline.
    """
    values = as_mapping(values)
    ip = innings_to_float(values.get("innings_pitched"))
    if ip <= 0:
        return {"ERA": SENTINEL, "FIP": SENTINEL, "ERA+": SENTINEL, "WAR": SENTINEL}

    era = stat(values, "earned_runs") * 9 / ip
    feed_era = values.get("earned_runs_average")
    result = {
        "ERA": feed_era if feed_era is not None else f"{era:.2f}",
        "FIP": SENTINEL,
        "ERA+": SENTINEL,
        "WAR": SENTINEL,
    }
    if not baseline.is_defined:
        return result

    fip = fip_raw(
        stat(values, "homeruns"),
        stat(values, "base_on_balls_allowed"),
        stat(values, "hit_by_pitches"),
        stat(values, "strikeouts"),
        ip,
    ) + baseline.fip_constant
    result["FIP"] = f"{fip:.2f}"

    if baseline.lg_era > 0 and era > 0:
        result["ERA+"] = round_half_up(100 * baseline.lg_era / era)

    runs_above_replacement = (baseline.replacement_ra9 - fip) * (ip / 9)
    result["WAR"] = f"{runs_above_replacement / baseline.runs_per_win:.2f}"
    return result


def normalize_pitcher(player: Mapping, baseline: Optional[PitchingBaseline] = None) -> dict:
    """Map one raw pitching record to a display row."""
    baseline = baseline or EMPTY_PITCHING_BASELINE
    v = as_mapping(as_mapping(player).get("values"))

    row = _identity(player, prefer_game_class=True)
    row.update({
        "G": _count(v, "games"),
        "GS": _count(v, "games_started"),
        "IP": _passthrough(v.get("innings_pitched")),
        "BF": _count(v, "batters_faced"),
        "H": _count(v, "hits"),
        "R": _count(v, "runs"),
        "ER": _count(v, "earned_runs"),
        "HR": _count(v, "homeruns"),
        "BB": _count(v, "base_on_balls_allowed"),
        "IBB": _count(v, "intentional_base_on_balls"),
        "HBP": _count(v, "hit_by_pitches"),
        "SO": _count(v, "strikeouts"),
        "WP": _count(v, "wild_pitches"),
        "BK": _count(v, "balks"),
        "CG": _count(v, "complete_games"),
        "W": _count(v, "wins"),
        "L": _count(v, "losses"),
        "SV": _count(v, "saves"),
        "WHIP": _passthrough(v.get("walks_and_hits_per_innings_pitched")),
    })
    row.update(pitching_columns_derived(v, baseline))
    return row
