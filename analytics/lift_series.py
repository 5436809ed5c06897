"""
Chart series for the strength visualizer.

Records are reduced to the best estimated one-rep max per (date, lift type),
then optionally decimated to weekly bests so long histories stay legible.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Iterable

import pandas as pd

from analytics.e1rm import estimate_e1rm
from utils.date_utils import diff_in_days
from utils.lift_schema import LiftRecord, VisualizerConfig

logger = logging.getLogger(__name__)

DECIMATION_WINDOW_DAYS = 7
DECIMATION_MIN_GAIN = 0.05  # a point inside the window must beat the last one by more than 5%

SERIES_COLS = [
    "date",
    "lift_type",
    "e1rm",
    "reps",
    "weight",
    "unit_type",
    "label",
    "notes",
    "url",
    "achievements",
]


@dataclass(frozen=True)
class SeriesPoint:
    date: str
    lift_type: str
    e1rm: float
    reps: int
    weight: float
    unit_type: str
    label: str = ""
    notes: str = ""
    url: str = ""
    achievements: tuple = ()


@dataclass
class VisualizerData:
    points: list[SeriesPoint] = field(default_factory=list)
    weight_max: float = 0       # highest e1rm in the filtered set
    weight_min: float | None = None  # lowest raw weight in the filtered set

    @property
    def lift_types(self) -> list[str]:
        seen = {}
        for p in self.points:
            seen.setdefault(p.lift_type, None)
        return list(seen)

    def to_frame(self) -> pd.DataFrame:
        """Long format, one row per point."""
        if not self.points:
            return pd.DataFrame(columns=SERIES_COLS)
        return pd.DataFrame([p.__dict__ for p in self.points], columns=SERIES_COLS)

    def to_chart_rows(self) -> list[dict]:
        """
        Wide format, one dict per date:
            {"date": "2024-01-01", "Back Squat": 253, "Back Squat_reps": 5,
             "Back Squat_weight": 225, "Back Squat_unit": "lb"}
        This is the shape line chart adapters consume.
        """
        rows: dict[str, dict] = {}
        for p in self.points:
            row = rows.setdefault(p.date, {"date": p.date})
            row[p.lift_type] = p.e1rm
            row[f"{p.lift_type}_reps"] = p.reps
            row[f"{p.lift_type}_weight"] = p.weight
            row[f"{p.lift_type}_unit"] = p.unit_type
        return [rows[d] for d in sorted(rows)]


def _fmt_weight(weight: float) -> str:
    return f"{weight:g}"


def format_point_label(record: LiftRecord, e1rm: float) -> str:
    unit = record.unit_type
    if record.reps == 1:
        return f"Lifted 1@{_fmt_weight(record.weight)}{unit}."
    return f"Potential 1@{_fmt_weight(e1rm)}{unit} from {record.reps}@{_fmt_weight(record.weight)}{unit}."


def _best_per_date_and_type(
    records: Iterable[LiftRecord], config: VisualizerConfig
) -> tuple[dict[str, dict[str, tuple[float, LiftRecord]]], float, float | None]:
    best: dict[str, dict[str, tuple[float, LiftRecord]]] = {}
    weight_max = 0
    weight_min = None

    for record in records:
        if record.is_goal:
            continue
        if config.start_date_threshold and record.date < config.start_date_threshold:
            continue
        if config.selected_lift_types is not None and record.lift_type not in config.selected_lift_types:
            continue

        e1rm = estimate_e1rm(record.reps, record.weight, config.e1rm_formula)

        by_type = best.setdefault(record.date, {})
        current = by_type.get(record.lift_type)
        # strictly greater: the first record seen keeps the slot on a tie
        if current is None or e1rm > current[0]:
            by_type[record.lift_type] = (e1rm, record)

        weight_max = max(weight_max, e1rm)
        weight_min = record.weight if weight_min is None else min(weight_min, record.weight)

    return best, weight_max, weight_min


def _is_decimated(candidate: SeriesPoint, last: SeriesPoint | None) -> bool:
    if last is None:
        return False
    within_window = diff_in_days(candidate.date, last.date) < DECIMATION_WINDOW_DAYS
    small_gain = candidate.e1rm <= last.e1rm * (1 + DECIMATION_MIN_GAIN)
    return within_window and small_gain


def process_visualizer_data(
    records: Iterable[LiftRecord] | None,
    config: VisualizerConfig | None = None,
) -> VisualizerData:
    """
    Build the chart series from the full record list.

    Pure function of (records, config): call again with a new record list to refresh.
    The input records are treated as read-only.
    """
    if not records:
        return VisualizerData()
    config = config or VisualizerConfig()

    records = list(records)
    start = time.perf_counter()
    best, weight_max, weight_min = _best_per_date_and_type(records, config)
    if not best:
        return VisualizerData()

    dates = sorted(best)
    # latest session in the whole log, before lift type and date filters
    latest_date = max(r.date for r in records if not r.is_goal)

    points: list[SeriesPoint] = []
    last_accepted: dict[str, SeriesPoint] = {}
    for date in dates:
        for lift_type, (e1rm, record) in best[date].items():
            point = SeriesPoint(
                date=date,
                lift_type=lift_type,
                e1rm=e1rm,
                reps=record.reps,
                weight=record.weight,
                unit_type=record.unit_type,
                label=format_point_label(record, e1rm),
                notes=record.notes,
                url=record.url,
            )
            if config.decimate and date != latest_date and _is_decimated(point, last_accepted.get(lift_type)):
                continue
            last_accepted[lift_type] = point
            points.append(point)

    logger.debug(
        "process_visualizer_data() %d points from %d dates in %.1fms",
        len(points),
        len(dates),
        (time.perf_counter() - start) * 1000,
    )
    return VisualizerData(points=points, weight_max=weight_max, weight_min=weight_min)
