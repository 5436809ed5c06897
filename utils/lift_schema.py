# utils/lift_schema.py
from dataclasses import dataclass
from typing import Any, Mapping

UNIT_LB = "lb"
UNIT_KG = "kg"
UNIT_TYPES = (UNIT_LB, UNIT_KG)

LB_PER_KG = 2.2046
KG_PER_LB = 1 / LB_PER_KG

DEFAULT_E1RM_FORMULA = "Brzycki"

BIG_FOUR_LIFT_TYPES = ["Back Squat", "Bench Press", "Deadlift", "Strict Press"]

RECORD_COLS = [
    "date",       # "YYYY-MM-DD" string
    "lift_type",
    "reps",
    "weight",
    "unit_type",  # "lb" or "kg"
    "notes",
    "url",
    "is_goal",
]


@dataclass(frozen=True)
class LiftRecord:
    """One performed (or goal) set, as emitted by the sheet parser."""
    date: str
    lift_type: str
    reps: int
    weight: float
    unit_type: str = UNIT_LB
    notes: str = ""
    url: str = ""
    is_goal: bool = False

    def to_dict(self) -> dict:
        """camelCase shape used by chart and dashboard collaborators."""
        return {
            "date": self.date,
            "liftType": self.lift_type,
            "reps": self.reps,
            "weight": self.weight,
            "unitType": self.unit_type,
            "notes": self.notes,
            "url": self.url,
            "isGoal": self.is_goal,
        }


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    s = str(value).strip().lower()
    if s in {"true", "1", "yes", "y"}:
        return True
    if s in {"false", "0", "no", "n"}:
        return False
    return default


@dataclass
class VisualizerConfig:
    selected_lift_types: frozenset | None = None  # None means every lift type
    e1rm_formula: str = DEFAULT_E1RM_FORMULA
    start_date_threshold: str | None = None       # records before this date are excluded
    decimate: bool = True                         # weekly bests instead of every session
    preferred_unit: str = UNIT_LB

    def __post_init__(self):
        if self.selected_lift_types is not None:
            self.selected_lift_types = frozenset(self.selected_lift_types)
        if not self.e1rm_formula:
            self.e1rm_formula = DEFAULT_E1RM_FORMULA
        if self.preferred_unit not in UNIT_TYPES:
            self.preferred_unit = UNIT_LB

    @classmethod
    def from_mapping(cls, prefs: Mapping[str, Any] | None) -> "VisualizerConfig":
        """
        Build a config from plain preference values (session state, local storage, query params).
        Accepts both the camelCase keys the browser app persisted and snake_case keys.
        """
        prefs = dict(prefs or {})

        lift_types = prefs.pop("selectedLiftTypes", prefs.pop("selected_lift_types", None))
        if isinstance(lift_types, str):
            lift_types = [lift_types]
        if lift_types is not None:
            try:
                lift_types = frozenset(str(lt) for lt in lift_types)
            except TypeError:
                lift_types = None

        formula = prefs.pop("e1rmFormula", prefs.pop("e1rm_formula", None))
        threshold = prefs.pop("timeRange", prefs.pop("start_date_threshold", None))

        decimate = True
        if "showAllData" in prefs:
            decimate = not _coerce_bool(prefs.pop("showAllData"), False)
        if "decimate" in prefs:
            decimate = _coerce_bool(prefs.pop("decimate"), decimate)

        unit = prefs.pop("unitType", prefs.pop("preferred_unit", UNIT_LB))

        return cls(
            selected_lift_types=lift_types,
            e1rm_formula=str(formula) if formula else DEFAULT_E1RM_FORMULA,
            start_date_threshold=str(threshold) if threshold else None,
            decimate=decimate,
            preferred_unit=str(unit) if unit else UNIT_LB,
        )


def default_lift_selection(lift_types) -> list[str]:
    """
    Lifts charted before the user picks any: the Big Four found in the data,
    or every lift type when the log has none of them.
    """
    available = set(lift_types or [])
    big_four = [lt for lt in BIG_FOUR_LIFT_TYPES if lt in available]
    return big_four or sorted(available)
