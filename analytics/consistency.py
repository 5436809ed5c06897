"""
Training consistency: sessions, weekly streaks, momentum and grades.

A session is one distinct calendar date with at least one non-goal record.
Every function takes an optional `today` so results are reproducible.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from analytics.e1rm import round_half_up
from utils.date_utils import add_days, diff_in_days, subtract_days, today_str, week_key

logger = logging.getLogger(__name__)

SESSIONS_PER_WEEK_TARGET = 3
MOMENTUM_WINDOW_DAYS = 90

CONSISTENCY_PERIODS = [
    ("Week", 7),
    ("Month", 30),
    ("3 Month", 90),
    ("Half Year", 180),
    ("Year", 345),  # a little under a year to allow rest days
    ("24 Month", 700),
    ("5 Year", 1750),
    ("Decade", 3500),
]

HUE_GREEN = 120
HUE_YELLOW = 60
HUE_ORANGE = 30
HUE_RED = 0

# (min percentage, grade, hue), highest first
CONSISTENCY_GRADE_THRESHOLDS = [
    (100, "A+", HUE_GREEN),
    (90, "A", HUE_GREEN),
    (80, "A-", HUE_GREEN),
    (70, "B+", HUE_YELLOW),
    (59, "B", HUE_YELLOW),
    (50, "B-", HUE_YELLOW),
    (42, "C+", HUE_ORANGE),
    (36, "C", HUE_ORANGE),
    (30, "C-", HUE_ORANGE),
    (0, ".", HUE_RED),
]


def get_session_dates(records) -> list[str]:
    """Sorted distinct dates with at least one non-goal record."""
    return sorted({r.date for r in (records or []) if not r.is_goal})


@dataclass(frozen=True)
class StreakSummary:
    current_streak: int = 0
    best_streak: int = 0
    sessions_this_week: int = 0


def calculate_streak(session_dates: Iterable[str] | None, today=None) -> StreakSummary:
    """
    Weekly streaks, where a week (Monday key) qualifies with 3+ distinct session dates.

    current_streak walks back from this week and stops at the first week that does not
    qualify, so an unfinished week that is not yet qualifying gives 0.
    best_streak is the longest run of qualifying weeks found by a forward scan.
    """
    dates = set(session_dates or [])
    if not dates:
        return StreakSummary()

    today = today_str(today)
    per_week = Counter(week_key(d) for d in dates)
    this_week = week_key(today)

    current = 0
    week = this_week
    while per_week[week] >= SESSIONS_PER_WEEK_TARGET:
        current += 1
        week = subtract_days(week, 7)

    best = 0
    run = 0
    week = min(per_week)
    last_week = max(max(per_week), this_week)
    while week <= last_week:
        if per_week[week] >= SESSIONS_PER_WEEK_TARGET:
            run += 1
            best = max(best, run)
        else:
            run = 0
        week = add_days(week, 7)

    return StreakSummary(current_streak=current, best_streak=best, sessions_this_week=per_week[this_week])


@dataclass(frozen=True)
class MomentumSummary:
    recent_sessions: int = 0
    previous_sessions: int = 0
    percentage_change: int = 0
    session_delta: int = 0
    window_days: int = MOMENTUM_WINDOW_DAYS


def calculate_session_momentum(
    session_dates: Iterable[str] | None,
    today=None,
    window_days: int = MOMENTUM_WINDOW_DAYS,
) -> MomentumSummary:
    """Sessions in the trailing window vs. the window before it."""
    today = today_str(today)
    recent = previous = 0
    for d in set(session_dates or []):
        days_ago = diff_in_days(today, d)
        if 0 <= days_ago < window_days:
            recent += 1
        elif window_days <= days_ago < 2 * window_days:
            previous += 1

    if previous == 0:
        pct = 100 if recent > 0 else 0
    else:
        pct = round_half_up((recent - previous) / previous * 100)

    return MomentumSummary(
        recent_sessions=recent,
        previous_sessions=previous,
        percentage_change=pct,
        session_delta=recent - previous,
        window_days=window_days,
    )


def get_grade_and_color(percentage: float) -> tuple[str, str]:
    for min_pct, grade, hue in CONSISTENCY_GRADE_THRESHOLDS:
        if percentage >= min_pct:
            lightness = 10 + percentage / 2
            return grade, f"hsl({hue}, 90%, {lightness:g}%)"
    # negative input
    return ".", f"hsl({HUE_RED}, 90%, 10%)"


def calculate_grade_jump(actual_sessions: int, expected_sessions: int) -> int:
    """How many more sessions reach the next grade up (0 at the top grade)."""
    if expected_sessions <= 0:
        return 0
    progress = actual_sessions / expected_sessions * 100
    higher = [min_pct for min_pct, _, _ in CONSISTENCY_GRADE_THRESHOLDS if min_pct > progress]
    if not higher:
        return 0
    return math.ceil(min(higher) * expected_sessions / 100) - actual_sessions


def process_consistency(records, today=None) -> list[dict]:
    """
    Consistency per period, from "Week" up to the first period longer than the user's history.

    Each entry: label, days, sessions, expected, percentage (capped at 100), grade, color, tooltip.
    """
    session_dates = get_session_dates(records)
    if not session_dates:
        return []

    today = today_str(today)
    history_days = diff_in_days(today, session_dates[0])

    periods = []
    for label, days in CONSISTENCY_PERIODS:
        periods.append((label, days))
        if days > history_days:
            break

    results = []
    for label, days in periods:
        start = subtract_days(today, days - 1)
        actual = sum(1 for d in session_dates if start <= d <= today)
        expected = round_half_up(days / 7 * SESSIONS_PER_WEEK_TARGET)
        percentage = min(round_half_up(actual / expected * 100), 100)
        grade, color = get_grade_and_color(percentage)

        if actual > expected:
            tooltip = (
                f"Achieved {actual - expected} more than the minimum # of sessions "
                "required for 3 per week average"
            )
        elif actual == expected:
            tooltip = "Achieved exactly the required # of sessions for 3 per week average"
        else:
            tooltip = (
                f"Achieved {actual} sessions (get {calculate_grade_jump(actual, expected)} "
                "more in this period to improve your grade)"
            )

        results.append(
            {
                "label": label,
                "days": days,
                "sessions": actual,
                "expected": expected,
                "percentage": percentage,
                "grade": grade,
                "color": color,
                "tooltip": tooltip,
            }
        )

    logger.debug("process_consistency() %d periods over %d days of history", len(results), history_days)
    return results
