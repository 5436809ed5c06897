"""
Tonnage: total weight moved, sum of weight x reps, in one display unit.

Values keep full precision; rounding is left to the display layer.
"""

from collections import defaultdict
from dataclasses import dataclass, field

from analytics.consistency import get_session_dates
from utils.date_utils import diff_in_days, subtract_days, today_str
from utils.lift_schema import KG_PER_LB, LB_PER_KG, UNIT_KG, UNIT_LB, UNIT_TYPES


def convert_weight(weight: float, from_unit: str, to_unit: str) -> float:
    if from_unit == to_unit:
        return weight
    if from_unit == UNIT_KG and to_unit == UNIT_LB:
        return weight * LB_PER_KG
    if from_unit == UNIT_LB and to_unit == UNIT_KG:
        return weight * KG_PER_LB
    raise ValueError(f"Unknown unit conversion {from_unit!r} -> {to_unit!r}")


def _display_unit(preferred_unit: str | None) -> str:
    return preferred_unit if preferred_unit in UNIT_TYPES else UNIT_LB


def calculate_tonnage(records, preferred_unit: str = UNIT_LB, start_date=None, end_date=None) -> float:
    """Sum of weight x reps over non-goal records, optionally within [start_date, end_date]."""
    unit = _display_unit(preferred_unit)
    total = 0.0
    for r in records or []:
        if r.is_goal:
            continue
        if start_date and r.date < start_date:
            continue
        if end_date and r.date > end_date:
            continue
        total += convert_weight(r.weight, r.unit_type, unit) * r.reps
    return total


@dataclass(frozen=True)
class TonnageSummary:
    total_by_unit: dict = field(default_factory=dict)  # native units, unconverted
    primary_unit: str = UNIT_LB
    primary_total: float = 0.0
    session_count: int = 0
    average_per_session: float = 0.0
    has_twelve_months: bool = False
    last_12_months_total: float = 0.0


def calculate_lifetime_tonnage(records, preferred_unit: str = UNIT_LB, today=None) -> TonnageSummary:
    lifts = [r for r in (records or []) if not r.is_goal]
    unit = _display_unit(preferred_unit)
    if not lifts:
        return TonnageSummary(primary_unit=unit)

    by_unit = defaultdict(float)
    for r in lifts:
        by_unit[r.unit_type] += r.weight * r.reps

    today = today_str(today)
    year_ago = subtract_days(today, 365)
    sessions = get_session_dates(lifts)
    primary_total = calculate_tonnage(lifts, unit)

    return TonnageSummary(
        total_by_unit=dict(by_unit),
        primary_unit=unit,
        primary_total=primary_total,
        session_count=len(sessions),
        average_per_session=primary_total / len(sessions),
        has_twelve_months=diff_in_days(today, sessions[0]) >= 365,
        last_12_months_total=calculate_tonnage(lifts, unit, start_date=year_ago, end_date=today),
    )
