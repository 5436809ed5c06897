# utils/sheet_parsing.py
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import pandas as pd

from utils.date_utils import normalize_date
from utils.lift_schema import UNIT_KG, UNIT_LB, LiftRecord

logger = logging.getLogger(__name__)

# Beyond The Whiteboard export
BTWB_DATE_COL = "Date"
BTWB_DESCRIPTION_COL = "Description"
BTWB_NOTES_COL = "Notes"
BTWB_SENTINEL_COL = "Pukie"  # no one else has a Pukie column

# Crossfit style workouts that are not strength sets
NON_LIFT_WORKOUTS = {"Every", "FT", "AMRAP", "Chipper"}

# TurnKey / BLOC coaching export
TURNKEY_URL_TEMPLATE = "https://app.turnkey.coach/workout/{workout_id}"

# Bespoke Strength Journeys sheet
BESPOKE_DATE_COL = "Date"
BESPOKE_LIFT_TYPE_COL = "Lift Type"
BESPOKE_REPS_COL = "Reps"
BESPOKE_WEIGHT_COL = "Weight"
BESPOKE_NOTES_COL = "Notes"
BESPOKE_URL_COL = "URL"
BESPOKE_GOAL_COL = "Goal"

TRUTHY = {"true", "yes", "y", "1", "goal"}

_LEADING_INT_RE = re.compile(r"^\s*\+?(\d+)")
_LEADING_FLOAT_RE = re.compile(r"^\s*\+?(\d*\.?\d+)(?![\d.,]|[eE][+-]?\d)")
_THOUSANDS_SEP_RE = re.compile(r"(?<=\d),(?=\d{3}(?!\d))")
_LIFT_NAME_RE = re.compile(r"^[a-zA-Z ]*")
_MINI_LINE_REPS_RE = re.compile(r"^(\d+)")
_MINI_LINE_WEIGHT_RE = re.compile(r"(\d*\.?\d+)\s*(kg|lb)s?\s*$", re.IGNORECASE)


def _find_col(header: Sequence[str], name: str) -> int | None:
    try:
        return list(header).index(name)
    except ValueError:
        return None


def _cell(row: Sequence[Any], idx: int | None) -> str:
    if idx is None or idx >= len(row):
        return ""
    value = row[idx]
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).strip()


def _parse_int(raw: str) -> int | None:
    m = _LEADING_INT_RE.match(raw or "")
    return int(m.group(1)) if m else None


def _parse_float(raw: str) -> float | None:
    m = _LEADING_FLOAT_RE.match(_THOUSANDS_SEP_RE.sub("", raw or ""))
    return float(m.group(1)) if m else None


def _is_truthy(raw: str) -> bool:
    return raw.strip().lower() in TRUTHY


def _normalize_unit(raw: str) -> str:
    return UNIT_KG if raw.strip().lower().startswith("kg") else UNIT_LB


def split_weight_and_unit(weight_string: str) -> tuple[float | None, str]:
    """
    Convert strings like "225lb" or "100 kg" to (225.0, "lb") / (100.0, "kg").
    Plain numbers are pounds. Returns (None, "lb") when there is no number.
    """
    if not weight_string:
        return None, UNIT_LB
    value = _parse_float(weight_string)
    unit_type = UNIT_KG if "kg" in weight_string.lower() else UNIT_LB
    return value, unit_type


@dataclass
class ParseState:
    """Mutable state for one parse_data() call, never shared between calls."""
    last_date: str | None = None
    last_lift_type: str | None = None
    data_rows: int = 0
    skipped_rows: int = 0


class SheetSchema:
    """
    One known spreadsheet layout.
    Column indices are resolved from the header once, then parse_row() is called per data row.
    """
    label = "sheet"

    def __init__(self, header: Sequence[str]) -> None:
        self.header = list(header)

    @staticmethod
    def matches(header: Sequence[str]) -> bool:
        raise NotImplementedError

    def parse_row(self, row: Sequence[Any], state: ParseState) -> list[LiftRecord]:
        raise NotImplementedError


class BtwbSchema(SheetSchema):
    """Gym tracking app export: one session per row, one set per line of the description cell."""
    label = "BTWB"

    def __init__(self, header: Sequence[str]) -> None:
        super().__init__(header)
        self.date_col = _find_col(header, BTWB_DATE_COL)
        self.description_col = _find_col(header, BTWB_DESCRIPTION_COL)
        self.notes_col = _find_col(header, BTWB_NOTES_COL)

    @staticmethod
    def matches(header: Sequence[str]) -> bool:
        return len(header) > 4 and header[0] == BTWB_DATE_COL and header[4] == BTWB_SENTINEL_COL

    def parse_row(self, row, state):
        description = _cell(row, self.description_col)
        if not description:
            return []

        lift_type = _LIFT_NAME_RE.match(description).group(0).strip()
        if not lift_type or lift_type in NON_LIFT_WORKOUTS:
            return []

        date = normalize_date(_cell(row, self.date_col))
        if date is None:
            return []

        notes = _cell(row, self.notes_col)

        records = []
        for line in re.split(r"\r?\n", description):
            line = line.strip()
            reps_match = _MINI_LINE_REPS_RE.match(line)
            if not reps_match:
                continue
            reps = int(reps_match.group(1))
            if reps == 0:
                continue

            weight_match = _MINI_LINE_WEIGHT_RE.search(line)
            if not weight_match:
                continue  # no units, probably not a lift
            weight = float(weight_match.group(1))
            if weight == 0:
                continue

            records.append(
                LiftRecord(
                    date=date,
                    lift_type=lift_type,
                    reps=reps,
                    weight=weight,
                    unit_type=_normalize_unit(weight_match.group(2)),
                    notes=notes,
                )
            )
        return records


class TurnKeySchema(SheetSchema):
    """Coached program export (TurnKey / BLOC): assigned vs actual work, sets expanded."""
    label = "TurnKey"

    def __init__(self, header: Sequence[str]) -> None:
        super().__init__(header)
        self.workout_date_col = _find_col(header, "workout_date")
        self.workout_id_col = _find_col(header, "workout_id")
        self.completed_col = _find_col(header, "workout_completed")
        self.exercise_name_col = _find_col(header, "exercise_name")
        self.assigned_reps_col = _find_col(header, "assigned_reps")
        self.assigned_weight_col = _find_col(header, "assigned_weight")
        self.assigned_sets_col = _find_col(header, "assigned_sets")
        self.actual_reps_col = _find_col(header, "actual_reps")
        self.actual_weight_col = _find_col(header, "actual_weight")
        self.actual_sets_col = _find_col(header, "actual_sets")
        self.missed_col = _find_col(header, "assigned_exercise_missed")
        self.units_col = _find_col(header, "weight_units")

    @staticmethod
    def matches(header: Sequence[str]) -> bool:
        return len(header) > 1 and header[0] == "user_name" and header[1] == "workout_id"

    def parse_row(self, row, state):
        if _cell(row, self.actual_reps_col) == "actual_reps":
            return []  # repeated header row

        if self.completed_col is not None and not _is_truthy(_cell(row, self.completed_col)):
            return []
        if _is_truthy(_cell(row, self.missed_col)):
            return []

        # No assigned reps happens when a coach leaves comments in the web app
        reps = _parse_int(_cell(row, self.assigned_reps_col))
        if reps is None:
            return []
        weight = _parse_float(_cell(row, self.assigned_weight_col))

        # The athlete lifted something different to what was assigned
        actual_reps = _parse_int(_cell(row, self.actual_reps_col))
        actual_weight = _parse_float(_cell(row, self.actual_weight_col))
        if actual_reps is not None and actual_weight is not None:
            reps, weight = actual_reps, actual_weight

        if not reps or not weight:
            return []

        lift_type = _cell(row, self.exercise_name_col)
        if not lift_type:
            return []
        if lift_type == "Squat":
            lift_type = "Back Squat"

        date = normalize_date(_cell(row, self.workout_date_col))
        if date is None:
            return []

        sets = 1
        assigned_sets = _parse_int(_cell(row, self.assigned_sets_col))
        actual_sets = _parse_int(_cell(row, self.actual_sets_col))
        if assigned_sets is not None and assigned_sets > 1:
            sets = assigned_sets
        if actual_sets is not None and actual_sets > 1:
            sets = actual_sets

        url = TURNKEY_URL_TEMPLATE.format(workout_id=_cell(row, self.workout_id_col))
        unit_type = _normalize_unit(_cell(row, self.units_col))

        return [
            LiftRecord(
                date=date,
                lift_type=lift_type,
                reps=reps,
                weight=weight,
                unit_type=unit_type,
                notes=f"Set {i} of {sets}" if sets > 1 else "",
                url=url,
            )
            for i in range(1, sets + 1)
        ]


class BespokeSchema(SheetSchema):
    """
    Strength Journeys sheet, agnostic about column position.
    A blank Date or Lift Type cell means "same as the row above".
    """
    label = "bespoke"

    def __init__(self, header: Sequence[str]) -> None:
        super().__init__(header)
        self.date_col = _find_col(header, BESPOKE_DATE_COL)
        self.lift_type_col = _find_col(header, BESPOKE_LIFT_TYPE_COL)
        self.reps_col = _find_col(header, BESPOKE_REPS_COL)
        self.weight_col = _find_col(header, BESPOKE_WEIGHT_COL)
        self.notes_col = _find_col(header, BESPOKE_NOTES_COL)
        self.url_col = _find_col(header, BESPOKE_URL_COL)
        self.goal_col = _find_col(header, BESPOKE_GOAL_COL)

    @staticmethod
    def matches(header: Sequence[str]) -> bool:
        return True

    def parse_row(self, row, state):
        reps_cell = _cell(row, self.reps_col)
        if reps_cell == BESPOKE_REPS_COL:
            return []  # repeated header row

        raw_date = _cell(row, self.date_col)
        if raw_date:
            state.last_date = raw_date
        else:
            raw_date = state.last_date

        lift_type = _cell(row, self.lift_type_col)
        if lift_type:
            state.last_lift_type = lift_type
        else:
            lift_type = state.last_lift_type

        reps = _parse_int(reps_cell)
        weight, unit_type = split_weight_and_unit(_cell(row, self.weight_col))
        if not reps or not weight:
            return []

        date = normalize_date(raw_date)
        if date is None or not lift_type:
            return []

        return [
            LiftRecord(
                date=date,
                lift_type=lift_type,
                reps=reps,
                weight=weight,
                unit_type=unit_type,
                notes=_cell(row, self.notes_col),
                url=_cell(row, self.url_col),
                is_goal=_is_truthy(_cell(row, self.goal_col)),
            )
        ]


# Checked in order; BespokeSchema is the fallback
SCHEMAS: tuple[type[SheetSchema], ...] = (BtwbSchema, TurnKeySchema)


def detect_schema(header: Sequence[str]) -> type[SheetSchema]:
    for schema in SCHEMAS:
        if schema.matches(header):
            return schema
    return BespokeSchema


def _as_grid(rows: Any) -> list[list[Any]]:
    if isinstance(rows, (str, bytes)) or not isinstance(rows, Sequence):
        raise TypeError(f"Expected a grid (sequence of rows), got {type(rows).__name__}")
    grid = []
    for row in rows:
        if row is None:
            grid.append([])
        elif isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise TypeError(f"Expected each row to be a sequence of cells, got {type(row).__name__}")
        else:
            grid.append(list(row))
    return grid


def _body_frame(body: list[list[Any]], width: int) -> pd.DataFrame:
    """Pad ragged data rows to a rectangular frame of cells, blanks as ""."""
    frame = pd.DataFrame(body, dtype=object)
    width = max(width, frame.shape[1])
    frame = frame.reindex(columns=range(width))
    return frame.where(frame.notna(), "")


def parse_data(
    rows: Sequence[Sequence[Any]] | None,
    warn: Callable[[str], None] | None = None,
) -> list[LiftRecord]:
    """
    Discern the sheet format from the header row and parse every data row into LiftRecords.

    Row order is preserved. Rows without usable lift data are skipped, never raised.
    """
    warn = warn or (lambda msg: None)
    if rows is None:
        return []

    grid = _as_grid(rows)
    if not grid:
        return []

    start = time.perf_counter()
    header = [_cell(grid[0], i) for i in range(len(grid[0]))]
    schema = detect_schema(header)(header)
    body = _body_frame(grid[1:], len(header))

    state = ParseState()
    records: list[LiftRecord] = []
    for row in body.itertuples(index=False, name=None):
        if not any(_cell(row, i) for i in range(len(row))):
            continue
        state.data_rows += 1
        parsed = schema.parse_row(row, state)
        if parsed:
            records.extend(parsed)
        else:
            state.skipped_rows += 1

    logger.debug(
        "parse_data() %s format: %d records from %d rows in %.1fms",
        schema.label,
        len(records),
        state.data_rows,
        (time.perf_counter() - start) * 1000,
    )

    if state.data_rows and not records:
        warn(
            f"No lift records found in {state.data_rows} {schema.label} rows. "
            f"Header was: {header}"
        )
    elif state.skipped_rows:
        warn(
            f"Skipped {state.skipped_rows} of {state.data_rows} {schema.label} rows "
            "with missing date, lift type, reps or weight."
        )

    return records
