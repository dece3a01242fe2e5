"""League baseline aggregation tests."""

import math

import pytest

from clubstats.analysis.baselines import (
    EMPTY_BATTING_BASELINE,
    EMPTY_PITCHING_BASELINE,
    compute_batting_baseline,
    compute_pitching_baseline,
    runs_per_win,
)
from clubstats.analysis.normalize import normalize_batter, normalize_pitcher


def _row(**values):
    return {"person": {}, "league": {"id": 1}, "values": values}


BATTING_LEAGUE = [
    _row(at_bats=400, hits=120, doubles=20, triples=2, homeruns=10,
         base_on_balls=40, runs=60, on_base_plus_slugging="0.850"),
    _row(at_bats=300, hits=70, doubles=10, triples=0, homeruns=5,
         base_on_balls=30, runs=30, on_base_plus_slugging="0.700"),
]

PITCHING_LEAGUE = [
    _row(innings_pitched="50.1", earned_runs=20, runs=25, homeruns=5,
         base_on_balls_allowed=15, hit_by_pitches=2, strikeouts=40),
    _row(innings_pitched="30.2", earned_runs=10, runs=12, homeruns=3,
         base_on_balls_allowed=10, hit_by_pitches=1, strikeouts=30),
]


def test_batting_baseline_two_players():
    baseline = compute_batting_baseline(BATTING_LEAGUE)

    assert baseline.lg_runs_per_pa == pytest.approx((60 + 30) / ((400 + 40) + (300 + 30)))
    assert baseline.lg_woba == pytest.approx((155.56 + 92.85) / 770)
    assert baseline.lg_ops == pytest.approx((0.850 * 440 + 0.700 * 330) / 770)
    assert baseline.total_pa == 770
    assert baseline.is_defined


def test_batting_baseline_skips_missing_ops_in_average():
    rows = BATTING_LEAGUE + [_row(at_bats=100, base_on_balls=10, hits=30, runs=10)]
    baseline = compute_batting_baseline(rows)
    assert baseline.lg_ops == pytest.approx((0.850 * 440 + 0.700 * 330) / 770)
    assert baseline.lg_runs_per_pa == pytest.approx(100 / 880)


def test_batting_baseline_zero_pa_league():
    rows = [_row(at_bats=0, base_on_balls=0, runs=3, on_base_plus_slugging="0.500"), _row()]
    baseline = compute_batting_baseline(rows)

    assert baseline.lg_woba == 0.0
    assert baseline.lg_ops == 0.0
    assert baseline.lg_runs_per_pa == 0.0
    assert not baseline.is_defined

    player = _row(at_bats=400, hits=120, doubles=20, triples=2, homeruns=10,
                  base_on_balls=40, runs=60, on_base_plus_slugging="0.850")
    derived = normalize_batter(player, baseline)
    assert derived["wRC+"] == "-"
    assert derived["OPS+"] == "-"
    assert derived["WAR"] == "-"


def test_empty_league_matches_empty_baselines():
    assert compute_batting_baseline([]) == EMPTY_BATTING_BASELINE
    assert compute_pitching_baseline([]) == EMPTY_PITCHING_BASELINE


def test_baselines_are_idempotent():
    assert compute_batting_baseline(BATTING_LEAGUE) == compute_batting_baseline(BATTING_LEAGUE)
    assert compute_pitching_baseline(PITCHING_LEAGUE) == compute_pitching_baseline(PITCHING_LEAGUE)


def test_pitching_baseline():
    baseline = compute_pitching_baseline(PITCHING_LEAGUE)

    assert baseline.total_ip == pytest.approx(81.0)
    assert baseline.lg_era == pytest.approx(30 * 9 / 81)
    assert baseline.lg_r9 == pytest.approx(37 * 9 / 81)
    fip_component = (13 * 8 + 3 * (25 + 3) - 2 * 70) / 81
    assert baseline.fip_constant == pytest.approx(30 * 9 / 81 - fip_component)
    assert baseline.runs_per_win == pytest.approx(10 * math.sqrt((37 * 9 / 81) / 4.5))
    assert baseline.replacement_ra9 == pytest.approx(37 * 9 / 81 * 1.2)
    assert baseline.is_defined


def test_league_average_fip_equals_league_era():
    rows = [_row(innings_pitched="81.0", earned_runs=30, runs=37, homeruns=8,
                 base_on_balls_allowed=25, hit_by_pitches=3, strikeouts=70)]
    baseline = compute_pitching_baseline(rows)
    derived = normalize_pitcher(rows[0], baseline)
    assert derived["FIP"] == f"{baseline.lg_era:.2f}"
    assert derived["ERA+"] == 100


def test_pitching_baseline_zero_innings():
    baseline = compute_pitching_baseline([_row(innings_pitched="0.0", earned_runs=3, runs=4)])
    assert baseline.lg_era == 0.0
    assert baseline.lg_r9 == 0.0
    assert baseline.runs_per_win == 10.0
    assert not baseline.is_defined


def test_replacement_ra9_falls_back_to_era():
    rows = [_row(innings_pitched="9.0", earned_runs=4, runs=0)]
    baseline = compute_pitching_baseline(rows)
    assert baseline.lg_r9 == 0.0
    assert baseline.replacement_ra9 == pytest.approx(4 * 1.2)


def test_runs_per_win_is_clamped():
    assert runs_per_win(0) == 10.0
    assert runs_per_win(100) == 12.0
    assert runs_per_win(1) == 8.0
    assert runs_per_win(4.5) == pytest.approx(10.0)
    for lg_r9 in (0, 0.01, 2, 4.5, 7, 20, 100, 1e6):
        assert 8.0 <= runs_per_win(lg_r9) <= 12.0


def test_malformed_rows_add_nothing():
    junk = [None, "x", [1], {"values": [1]}, {"values": "abc"}]
    assert compute_batting_baseline(junk + BATTING_LEAGUE) == compute_batting_baseline(BATTING_LEAGUE)
    assert compute_pitching_baseline(junk + PITCHING_LEAGUE) == compute_pitching_baseline(PITCHING_LEAGUE)
