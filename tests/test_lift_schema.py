from utils.lift_schema import BIG_FOUR_LIFT_TYPES, LiftRecord, default_lift_selection


def test_default_selection_prefers_big_four_present_in_data():
    lift_types = ["Snatch", "Deadlift", "Back Squat", "Front Squat"]
    assert default_lift_selection(lift_types) == ["Back Squat", "Deadlift"]


def test_default_selection_falls_back_to_every_lift():
    assert default_lift_selection(["Snatch", "Clean"]) == ["Clean", "Snatch"]
    assert default_lift_selection([]) == []
    assert default_lift_selection(None) == []


def test_default_selection_with_all_of_the_big_four():
    assert default_lift_selection(BIG_FOUR_LIFT_TYPES + ["Snatch"]) == BIG_FOUR_LIFT_TYPES


def test_record_to_dict_uses_camel_case():
    record = LiftRecord(date="2024-01-01", lift_type="Deadlift", reps=3, weight=140, unit_type="kg", is_goal=True)
    assert record.to_dict() == {
        "date": "2024-01-01",
        "liftType": "Deadlift",
        "reps": 3,
        "weight": 140,
        "unitType": "kg",
        "notes": "",
        "url": "",
        "isGoal": True,
    }
