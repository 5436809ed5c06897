"""
Estimated one-rep max (e1RM) formulas.

For theory see: https://en.wikipedia.org/wiki/One-repetition_maximum
"""

import logging
import math

import pandas as pd

from utils.lift_schema import DEFAULT_E1RM_FORMULA

logger = logging.getLogger(__name__)

E1RM_FORMULAE = [
    "Brzycki",
    "Epley",
    "McGlothin",
    "Lombardi",
    "Mayhew",
    "OConner",
    "Wathen",
]

_FORMULA_ALIASES = {
    "O'Conner": "OConner",
    "Wathan": "Wathen",
}

# Formulas are only trusted up to this many reps
MAX_ESTIMATE_REPS = 20


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def resolve_formula(formula: str | None) -> str:
    """Map a formula name to its canonical name, falling back to Brzycki."""
    if not formula:
        return DEFAULT_E1RM_FORMULA
    name = _FORMULA_ALIASES.get(formula, formula)
    return name if name in E1RM_FORMULAE else DEFAULT_E1RM_FORMULA


def _e1rm_raw(reps: float, weight: float, formula: str) -> float:
    r, w = reps, weight
    if formula == "Epley":
        return w * (1 + r / 30)
    if formula == "McGlothin":
        return (100 * w) / (101.3 - 2.67123 * r)
    if formula == "Lombardi":
        return w * r ** 0.1
    if formula == "Mayhew":
        return (100 * w) / (52.2 + 41.9 * math.exp(-0.055 * r))
    if formula == "OConner":
        return w * (1 + r / 40)
    if formula == "Wathen":
        return (100 * w) / (48.8 + 53.8 * math.exp(-0.075 * r))
    return w / (1.0278 - 0.0278 * r)


def _weight_raw(e1rm: float, reps: float, formula: str) -> float:
    r, e = reps, e1rm
    if formula == "Epley":
        return e / (1 + r / 30)
    if formula == "McGlothin":
        return e * (101.3 - 2.67123 * r) / 100
    if formula == "Lombardi":
        return e / r ** 0.1
    if formula == "Mayhew":
        return e * (52.2 + 41.9 * math.exp(-0.055 * r)) / 100
    if formula == "OConner":
        return e / (1 + r / 40)
    if formula == "Wathen":
        return e * (48.8 + 53.8 * math.exp(-0.075 * r)) / 100
    return e * (1.0278 - 0.0278 * r)


def estimate_e1rm(reps: int, weight: float, formula: str | None = DEFAULT_E1RM_FORMULA):
    """
    Return a rounded estimated one-rep max for a set of `reps` at `weight`.

    A single is returned unchanged. Zero (or negative) reps predict nothing:
    an error is logged and 0 is returned. Unknown formula names use Brzycki.
    """
    if reps is None or reps <= 0:
        logger.error("estimate_e1rm() called with %s reps at %s; returning 0", reps, weight)
        return 0
    if reps == 1:
        return weight

    reps = min(reps, MAX_ESTIMATE_REPS)
    return round_half_up(_e1rm_raw(reps, weight, resolve_formula(formula)))


def try_estimate_e1rm(reps: int, weight: float, formula: str | None = DEFAULT_E1RM_FORMULA):
    """Like estimate_e1rm() but returns None instead of the 0 sentinel for reps <= 0."""
    if reps is None or reps <= 0:
        return None
    return estimate_e1rm(reps, weight, formula)


def estimate_weight_for_reps(e1rm: float, target_reps: int, formula: str | None = DEFAULT_E1RM_FORMULA):
    """Project the weight liftable for `target_reps` given a known one-rep max."""
    if target_reps is None or target_reps <= 0:
        logger.error("estimate_weight_for_reps() called with %s reps; returning 0", target_reps)
        return 0
    if target_reps == 1:
        return e1rm

    target_reps = min(target_reps, MAX_ESTIMATE_REPS)
    return round_half_up(_weight_raw(e1rm, target_reps, resolve_formula(formula)))


def build_rep_projection_table(e1rm: float, formula: str | None = DEFAULT_E1RM_FORMULA, max_reps: int = 10) -> pd.DataFrame:
    """
    Rep projection / percentage table for the calculator views.
    One row per rep count: reps, weight, percentage of the one-rep max.
    """
    if not e1rm or e1rm <= 0 or max_reps < 1:
        return pd.DataFrame(columns=["reps", "weight", "percentage"])

    rows = []
    for r in range(1, max_reps + 1):
        weight = estimate_weight_for_reps(e1rm, r, formula)
        rows.append(
            {
                "reps": r,
                "weight": weight,
                "percentage": round_half_up(weight / e1rm * 100),
            }
        )
    return pd.DataFrame(rows)
