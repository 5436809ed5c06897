import pytest

from utils.lift_schema import LiftRecord
from utils.sheet_parsing import (
    BespokeSchema,
    BtwbSchema,
    TurnKeySchema,
    detect_schema,
    parse_data,
    split_weight_and_unit,
)

BESPOKE_HEADER = ["Date", "Lift Type", "Reps", "Weight", "Notes", "URL"]

TURNKEY_HEADER = [
    "user_name", "workout_id", "workout_date", "workout_completed", "exercise_name",
    "assigned_sets", "assigned_reps", "assigned_weight", "actual_sets", "actual_reps",
    "actual_weight", "assigned_exercise_missed", "weight_units",
]

BTWB_HEADER = ["Date", "Workout", "Result", "Notes", "Pukie", "Description"]


def test_detect_schema():
    assert detect_schema(BTWB_HEADER) is BtwbSchema
    assert detect_schema(TURNKEY_HEADER) is TurnKeySchema
    assert detect_schema(BESPOKE_HEADER) is BespokeSchema
    assert detect_schema(["whatever"]) is BespokeSchema


def test_empty_input():
    assert parse_data(None) == []
    assert parse_data([]) == []
    assert parse_data([BESPOKE_HEADER]) == []


@pytest.mark.parametrize("bad", ["Date,Reps", 42, [["Date"], "row"], [["Date"], 7]])
def test_non_grid_raises_type_error(bad):
    with pytest.raises(TypeError):
        parse_data(bad)


def test_bespoke_carries_date_and_lift_type_forward():
    grid = [
        BESPOKE_HEADER,
        ["2024-01-01", "Squat", "5", "100", "", ""],
        ["", "", "5", "105", "", ""],
    ]
    records = parse_data(grid)
    assert records == [
        LiftRecord(date="2024-01-01", lift_type="Squat", reps=5, weight=100.0),
        LiftRecord(date="2024-01-01", lift_type="Squat", reps=5, weight=105.0),
    ]


def test_bespoke_columns_found_by_name_and_units_read_from_weight():
    grid = [
        ["Notes", "Weight", "Reps", "Lift Type", "Date"],
        ["heavy", "140kg", "3", "Deadlift", "2024-05-02"],
        ["", "315 lbs", "1", "", ""],
    ]
    records = parse_data(grid)
    assert [(r.weight, r.unit_type) for r in records] == [(140.0, "kg"), (315.0, "lb")]
    assert records[0].notes == "heavy"
    assert records[1].lift_type == "Deadlift"
    assert records[1].date == "2024-05-02"


def test_bespoke_goal_column_and_ragged_rows():
    grid = [
        BESPOKE_HEADER + ["Goal"],
        ["2024-01-01", "Bench Press", "1", "200lb"],
        ["2024-12-31", "Bench Press", "1", "225lb", "dream", "", "TRUE"],
    ]
    records = parse_data(grid)
    assert [r.is_goal for r in records] == [False, True]
    assert records[0].notes == ""


def test_malformed_rows_are_dropped_without_raising():
    warnings = []
    grid = [
        BESPOKE_HEADER,
        ["", "Back Squat", "5", "100lb", "", ""],            # no date and nothing to carry
        ["2024-01-01", "Back Squat"],                      # missing cells
        ["2024-01-01", "Back Squat", "5", "heavy", "", ""],  # non-numeric weight
        ["2024-01-01", "Back Squat", "0", "100lb", "", ""],  # zero reps
        ["2024-01-01", "Back Squat", "5", "0", "", ""],      # zero weight
        ["not a date", "Back Squat", "5", "100lb", "", ""],
        ["Date", "Lift Type", "Reps", "Weight", "Notes", "URL"],  # repeated header
        [],
        None,
    ]
    assert parse_data(grid, warn=warnings.append) == []
    assert len(warnings) == 1
    assert "No lift records found" in warnings[0]


def test_skipped_rows_are_summarised():
    warnings = []
    grid = [
        BESPOKE_HEADER,
        ["2024-01-01", "Back Squat", "5", "100lb", "", ""],
        ["2024-01-01", "Back Squat", "x", "100lb", "", ""],
    ]
    assert len(parse_data(grid, warn=warnings.append)) == 1
    assert warnings == ["Skipped 1 of 2 bespoke rows with missing date, lift type, reps or weight."]


def test_state_is_not_shared_between_parses():
    parse_data([BESPOKE_HEADER, ["2024-01-01", "Squat", "5", "100", "", ""]])
    assert parse_data([BESPOKE_HEADER, ["", "", "5", "105", "", ""]]) == []


def test_input_order_is_preserved():
    grid = [
        BESPOKE_HEADER,
        ["2024-03-01", "Squat", "5", "100", "", ""],
        ["2024-01-01", "Squat", "5", "90", "", ""],
    ]
    assert [r.date for r in parse_data(grid)] == ["2024-03-01", "2024-01-01"]


def test_dates_are_normalized():
    grid = [BESPOKE_HEADER, ["2024-02-03T00:00:00", "Squat", "5", "100", "", ""]]
    assert parse_data(grid)[0].date == "2024-02-03"


def _turnkey_row(**overrides):
    row = {
        "user_name": "sam", "workout_id": "abc123", "workout_date": "2024-02-01",
        "workout_completed": "TRUE", "exercise_name": "Squat", "assigned_sets": "3",
        "assigned_reps": "5", "assigned_weight": "100", "actual_sets": "", "actual_reps": "",
        "actual_weight": "", "assigned_exercise_missed": "FALSE", "weight_units": "kg",
    }
    row.update(overrides)
    return [row[c] for c in TURNKEY_HEADER]


def test_turnkey_expands_sets():
    records = parse_data([TURNKEY_HEADER, _turnkey_row()])
    assert len(records) == 3
    assert [r.notes for r in records] == ["Set 1 of 3", "Set 2 of 3", "Set 3 of 3"]
    first = records[0]
    assert first.lift_type == "Back Squat"
    assert (first.reps, first.weight, first.unit_type) == (5, 100.0, "kg")
    assert first.url == "https://app.turnkey.coach/workout/abc123"


def test_turnkey_actual_work_overrides_assigned():
    records = parse_data([TURNKEY_HEADER, _turnkey_row(actual_reps="3", actual_weight="110", actual_sets="2")])
    assert [(r.reps, r.weight) for r in records] == [(3, 110.0), (3, 110.0)]
    assert records[1].notes == "Set 2 of 2"


def test_turnkey_single_set_has_no_set_note():
    records = parse_data([TURNKEY_HEADER, _turnkey_row(assigned_sets="1", exercise_name="Bench Press")])
    assert len(records) == 1
    assert records[0].notes == ""
    assert records[0].lift_type == "Bench Press"


@pytest.mark.parametrize(
    "overrides",
    [
        {"workout_completed": "FALSE"},
        {"assigned_exercise_missed": "TRUE"},
        {"assigned_reps": ""},
        {"actual_reps": "actual_reps"},
    ],
)
def test_turnkey_rows_that_are_skipped(overrides):
    assert parse_data([TURNKEY_HEADER, _turnkey_row(**overrides)]) == []


def test_btwb_reads_one_set_per_description_line():
    grid = [
        BTWB_HEADER,
        ["2024-03-01", "Strength", "", "felt good", "", "Back Squat\n5 | 100 kg\n3 | 110 kg\nrest 2 min"],
    ]
    records = parse_data(grid)
    assert [(r.reps, r.weight, r.unit_type) for r in records] == [(5, 100.0, "kg"), (3, 110.0, "kg")]
    assert all(r.lift_type == "Back Squat" and r.notes == "felt good" for r in records)


def test_btwb_skips_conditioning_workouts():
    grid = [
        BTWB_HEADER,
        ["2024-03-01", "Metcon", "", "", "", "AMRAP 12 min\n10 burpees"],
        ["2024-03-02", "Metcon", "", "", "", "FT\n21 thrusters 43 kg"],
    ]
    assert parse_data(grid) == []


def test_split_weight_and_unit():
    assert split_weight_and_unit("225lb") == (225.0, "lb")
    assert split_weight_and_unit("100 kg") == (100.0, "kg")
    assert split_weight_and_unit("102.5") == (102.5, "lb")
    assert split_weight_and_unit("") == (None, "lb")
    assert split_weight_and_unit("heavy") == (None, "lb")


def test_weights_with_separators_or_exponents():
    assert split_weight_and_unit("1,000lb") == (1000.0, "lb")
    assert split_weight_and_unit("1,102.5 kg") == (1102.5, "kg")
    assert split_weight_and_unit("1e5") == (None, "lb")
    assert split_weight_and_unit("1,00") == (None, "lb")


def test_unreadable_weights_skip_the_row():
    grid = [
        BESPOKE_HEADER,
        ["2024-01-01", "Deadlift", "1", "1,000lb", "", ""],
        ["2024-01-02", "Deadlift", "1", "1e5", "", ""],
        ["today", "Deadlift", "1", "400", "", ""],
    ]
    records = parse_data(grid)
    assert [(r.date, r.weight) for r in records] == [("2024-01-01", 1000.0)]
