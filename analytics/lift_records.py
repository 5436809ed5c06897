from dataclasses import dataclass, field, replace

import pandas as pd

from data_model import records_to_frame
from utils.date_utils import diff_in_days, subtract_days, today_str
from utils.lift_schema import LiftRecord

PR_REP_SCHEMES = (1, 3, 5)
PR_LEADERBOARD_SIZE = 20
TOP_LIFTS_MAX_REPS = 10
TOP_LIFTS_SHORT_HISTORY_SIZE = 5
SHORT_HISTORY_DAYS = 730  # two years

REP_SCHEME_NAMES = {1: "single", 2: "double", 3: "triple", 5: "five"}

PR_COLS = ["rank", "date", "lift_type", "reps", "weight", "unit_type", "notes", "url"]


def rep_scheme_name(reps: int) -> str:
    return REP_SCHEME_NAMES.get(reps, f"{reps}RM")


def _actual_lifts(records) -> list[LiftRecord]:
    return [r for r in (records or []) if not r.is_goal]


def _leaderboard_order(records: list[LiftRecord]) -> list[LiftRecord]:
    # heaviest first; on equal weight the earlier date ranks higher
    return sorted(records, key=lambda r: (-r.weight, r.date))


def rank_personal_records(records, lift_type: str, reps: int, limit: int = PR_LEADERBOARD_SIZE) -> pd.DataFrame:
    """
    All-time leaderboard for one lift type at one rep count.
    Rank 1 is the PR for that rep scheme.
    """
    matching = [r for r in _actual_lifts(records) if r.lift_type == lift_type and r.reps == reps]
    if not matching:
        return pd.DataFrame(columns=PR_COLS)

    ranked = _leaderboard_order(matching)[:limit]
    df = records_to_frame(ranked)
    df.insert(0, "rank", range(1, len(df) + 1))
    return df[PR_COLS]


def find_prs(records, lift_type: str, rep_schemes=PR_REP_SCHEMES) -> dict[int, pd.DataFrame]:
    return {reps: rank_personal_records(records, lift_type, reps) for reps in rep_schemes}


def build_pr_annotations(records, lift_type: str, rep_schemes=PR_REP_SCHEMES) -> dict[str, list[str]]:
    """
    Map date -> achievement strings for the chart tooltips, e.g.
        "#1 best Back Squat single of all time (1@225lb)"
    """
    annotations: dict[str, list[str]] = {}
    for reps, board in find_prs(records, lift_type, rep_schemes).items():
        for row in board.itertuples(index=False):
            annotations.setdefault(row.date, []).append(
                f"#{row.rank} best {lift_type} {rep_scheme_name(reps)} of all time "
                f"({row.reps}@{row.weight:g}{row.unit_type})"
            )
    return annotations


def annotate_points(points, records) -> list:
    """Return copies of the series points with their PR achievements attached."""
    by_lift: dict[str, dict[str, list[str]]] = {}
    annotated = []
    for point in points or []:
        if point.lift_type not in by_lift:
            by_lift[point.lift_type] = build_pr_annotations(records, point.lift_type)
        achievements = by_lift[point.lift_type].get(point.date)
        annotated.append(replace(point, achievements=tuple(achievements)) if achievements else point)
    return annotated


@dataclass
class TopLifts:
    """Leaderboards per lift type, keyed by reps 1..10."""
    all_time: dict[str, dict[int, list[LiftRecord]]] = field(default_factory=dict)
    last_year: dict[str, dict[int, list[LiftRecord]]] = field(default_factory=dict)


def _build_boards(records: list[LiftRecord], size: int) -> dict[str, dict[int, list[LiftRecord]]]:
    buckets: dict[str, dict[int, list[LiftRecord]]] = {}
    for r in records:
        if not 1 <= r.reps <= TOP_LIFTS_MAX_REPS:
            continue
        per_reps = buckets.setdefault(r.lift_type, {n: [] for n in range(1, TOP_LIFTS_MAX_REPS + 1)})
        per_reps[r.reps].append(r)

    return {
        lift_type: {reps: _leaderboard_order(lifts)[:size] for reps, lifts in per_reps.items()}
        for lift_type, per_reps in buckets.items()
    }


def process_top_lifts_by_type_and_reps(records, today=None) -> TopLifts:
    """
    All-time and last-12-months leaderboards for reps 1..10 of every lift type.

    Histories of two years or less keep 5 entries per board, longer ones keep 20.
    """
    lifts = _actual_lifts(records)
    if not lifts:
        return TopLifts()

    dates = [r.date for r in lifts]
    span_days = diff_in_days(max(dates), min(dates))
    size = TOP_LIFTS_SHORT_HISTORY_SIZE if span_days <= SHORT_HISTORY_DAYS else PR_LEADERBOARD_SIZE

    year_ago = subtract_days(today_str(today), 365)
    recent = [r for r in lifts if r.date >= year_ago]

    return TopLifts(all_time=_build_boards(lifts, size), last_year=_build_boards(recent, size))


def find_lift_position_in_top_lifts(record: LiftRecord, top_lifts: TopLifts) -> tuple[int, str | None]:
    """
    Where does this set sit on its all-time leaderboard?
    Returns (rank, annotation), or (-1, None) when it is not ranked.
    """
    if record is None or record.is_goal or top_lifts is None:
        return -1, None

    board = top_lifts.all_time.get(record.lift_type, {}).get(record.reps, [])
    for i, entry in enumerate(board):
        if entry == record:
            rank = i + 1
            return rank, f"#{rank} best {record.lift_type} {rep_scheme_name(record.reps)} of all time"
    return -1, None


def mark_historical_prs(records) -> pd.DataFrame:
    """
    Records frame in date order with an is_historical_pr column.
    A set is a historical PR when it is heavier than every earlier set of the same lift type and reps.
    """
    df = records_to_frame(records)
    if df.empty:
        df["is_historical_pr"] = pd.Series(dtype=bool)
        return df

    df = df.sort_values("date", kind="mergesort").reset_index(drop=True)
    df["is_historical_pr"] = False

    lifts = df[~df["is_goal"]]
    if lifts.empty:
        return df

    prev_best = lifts.groupby(["lift_type", "reps"])["weight"].transform(lambda s: s.cummax().shift(1))
    df.loc[lifts.index, "is_historical_pr"] = prev_best.isna() | (lifts["weight"] > prev_best)
    df["is_historical_pr"] = df["is_historical_pr"].astype(bool)
    return df


def calculate_lift_types(records) -> pd.DataFrame:
    """Per lift type frequency: total sets and reps, newest and oldest dates."""
    cols = ["lift_type", "total_sets", "total_reps", "newest_date", "oldest_date"]
    df = records_to_frame(_actual_lifts(records))
    if df.empty:
        return pd.DataFrame(columns=cols)

    out = df.groupby("lift_type", sort=False).agg(
        total_sets=("reps", "size"),
        total_reps=("reps", "sum"),
        newest_date=("date", "max"),
        oldest_date=("date", "min"),
    ).reset_index()

    return out.sort_values("total_sets", ascending=False, kind="mergesort").reset_index(drop=True)[cols]


def calculate_total_stats(records) -> dict:
    lift_types = calculate_lift_types(records)
    return {
        "total_sets": int(lift_types["total_sets"].sum()) if not lift_types.empty else 0,
        "total_reps": int(lift_types["total_reps"].sum()) if not lift_types.empty else 0,
    }
