import logging

import pytest

from analytics.e1rm import (
    E1RM_FORMULAE,
    build_rep_projection_table,
    estimate_e1rm,
    estimate_weight_for_reps,
    resolve_formula,
    round_half_up,
    try_estimate_e1rm,
)


@pytest.mark.parametrize("formula", E1RM_FORMULAE)
@pytest.mark.parametrize("weight", [20, 100, 142.5, 225, 500])
def test_single_is_returned_unchanged(formula, weight):
    assert estimate_e1rm(1, weight, formula) == weight


@pytest.mark.parametrize("reps", [2, 5, 8, 12])
def test_unknown_formula_falls_back_to_brzycki(reps):
    assert estimate_e1rm(reps, 225, "NotARealFormula") == estimate_e1rm(reps, 225, "Brzycki")
    assert estimate_e1rm(reps, 225, None) == estimate_e1rm(reps, 225, "Brzycki")


@pytest.mark.parametrize("formula", E1RM_FORMULAE)
def test_heavier_sets_never_estimate_lower(formula):
    for reps in (2, 5, 10, 20):
        estimates = [estimate_e1rm(reps, w, formula) for w in range(20, 400, 5)]
        assert estimates == sorted(estimates)


def test_known_values():
    assert estimate_e1rm(5, 225, "Brzycki") == 253
    assert estimate_e1rm(5, 100, "Epley") == 117
    assert estimate_e1rm(5, 100, "OConner") == 113


def test_formula_aliases():
    assert resolve_formula("Wathan") == "Wathen"
    assert resolve_formula("O'Conner") == "OConner"
    assert estimate_e1rm(5, 100, "Wathan") == estimate_e1rm(5, 100, "Wathen")


def test_reps_are_capped():
    assert estimate_e1rm(30, 100, "Brzycki") == estimate_e1rm(20, 100, "Brzycki")
    # Brzycki would divide by a negative number at 37+ reps without the cap
    assert estimate_e1rm(40, 100, "Brzycki") > 0


def test_zero_reps_logs_and_returns_zero(caplog):
    with caplog.at_level(logging.ERROR, logger="analytics.e1rm"):
        assert estimate_e1rm(0, 100) == 0
    assert any("0 reps" in r.getMessage() for r in caplog.records)


def test_try_estimate_distinguishes_unknown():
    assert try_estimate_e1rm(0, 100) is None
    assert try_estimate_e1rm(-3, 100) is None
    assert try_estimate_e1rm(5, 225) == 253


def test_weight_for_reps_inverts_the_estimate():
    assert estimate_weight_for_reps(253, 5, "Brzycki") == 225
    assert estimate_weight_for_reps(300, 1, "Epley") == 300
    assert estimate_weight_for_reps(300, 0) == 0


def test_rep_projection_table():
    table = build_rep_projection_table(300, "Brzycki")
    assert list(table.columns) == ["reps", "weight", "percentage"]
    assert len(table) == 10
    assert table.iloc[0]["weight"] == 300
    assert table.iloc[0]["percentage"] == 100
    assert table["weight"].is_monotonic_decreasing

    assert build_rep_projection_table(0).empty


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(12.5) == 13
    assert round_half_up(-2.5) == -2
    assert round_half_up(2.4999) == 2
