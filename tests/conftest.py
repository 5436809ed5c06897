import pytest

from utils.lift_schema import LiftRecord


@pytest.fixture
def make_record():
    def _make(date, lift_type="Back Squat", reps=1, weight=100.0, unit_type="lb", **kwargs):
        return LiftRecord(date=date, lift_type=lift_type, reps=reps, weight=weight, unit_type=unit_type, **kwargs)
    return _make
