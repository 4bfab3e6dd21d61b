import pytest
import uuid
from datetime import date, datetime, timezone

from tracker.domain import completion
from tracker.domain.entities import (
    PatternStep,
    ReviewDate,
    new_item,
    new_pattern,
    new_pattern_step,
    new_review_date,
    validate_steps,
)
from tracker.domain.enums import OverduePolicy, TargetWeight
from tracker.domain.errors import ValidationError
from tracker.utils.dates import add_days, days_between, format_date, is_before


# Calendar arithmetic

def test_date_helpers():
    assert add_days(date(2024, 2, 28), 2) == date(2024, 3, 1)
    assert days_between(date(2024, 1, 2), date(2024, 1, 5)) == 3
    assert days_between(date(2024, 1, 5), date(2024, 1, 2)) == -3
    assert is_before(date(2024, 1, 1), date(2024, 1, 2))
    assert not is_before(date(2024, 1, 2), date(2024, 1, 2))
    assert format_date(date(2024, 1, 5)) == "2024-01-05"


# Constructors

@pytest.mark.parametrize("step_number,interval_days,field", [
    (0, 1, "step_number"),
    (32768, 1, "step_number"),
    (1, 0, "interval_days"),
    (1, -4, "interval_days"),
    (0, 0, "step_number"),
])
def test_new_pattern_step_reports_first_failure(step_number, interval_days, field):
    with pytest.raises(ValidationError) as exc:
        new_pattern_step(step_number, interval_days)
    assert exc.value.field == field


def test_new_pattern_step_accepts_valid_values():
    assert new_pattern_step(1, 3) == PatternStep(1, 3)


@pytest.mark.parametrize("steps,message", [
    ([], "a pattern needs at least one step"),
    ([PatternStep(2, 1)], "step numbers must start at 1"),
    ([PatternStep(1, 1), PatternStep(1, 3)], "step numbers must not repeat"),
    ([PatternStep(1, 3), PatternStep(2, 3)], "interval days must not repeat"),
    ([PatternStep(1, 5), PatternStep(2, 3)], "interval days must be ascending"),
    ([PatternStep(1, 1), PatternStep(3, 3)], "step numbers must increase by 1"),
])
def test_validate_steps(steps, message):
    with pytest.raises(ValidationError) as exc:
        validate_steps(steps)
    assert exc.value.message == message


def test_new_pattern():
    pattern = new_pattern(uuid.uuid4(), uuid.uuid4(), "weekly", "heavy", [PatternStep(1, 1), PatternStep(2, 7)])
    assert pattern.target_weight is TargetWeight.HEAVY
    assert len(pattern.steps) == 2

    with pytest.raises(ValidationError) as exc:
        new_pattern(uuid.uuid4(), uuid.uuid4(), "weekly", "extreme", [PatternStep(1, 1)])
    assert exc.value.field == "target_weight"


def test_new_review_date_requires_dates():
    with pytest.raises(ValidationError) as exc:
        new_review_date(uuid.uuid4(), uuid.uuid4(), uuid.uuid4(), None, None, 1, date(2024, 1, 1), None, False)
    assert exc.value.field == "scheduled_date"


def test_new_item_requires_name():
    with pytest.raises(ValidationError) as exc:
        new_item(uuid.uuid4(), uuid.uuid4(), None, None, None, "", "", date(2024, 1, 1),
                 datetime.now(timezone.utc))
    assert exc.value.field == "name"


# Completion propagation

def review_dates(*step_numbers):
    item_id = uuid.uuid4()
    return [
        ReviewDate(uuid.uuid4(), uuid.uuid4(), item_id, None, None, n, date(2024, 1, n), date(2024, 1, n))
        for n in step_numbers
    ]


def test_finished_after_generation():
    assert completion.finished_after_generation(OverduePolicy.MARK_COMPLETED, True, False) is True
    assert completion.finished_after_generation(OverduePolicy.MARK_COMPLETED, False, False) is False
    assert completion.finished_after_generation(OverduePolicy.MARK_INCOMPLETE, True, False) is False
    assert completion.finished_after_generation(OverduePolicy.MARK_COMPLETED, False, True) is True


def test_only_last_step_completes_item():
    rds = review_dates(1, 2, 3)
    assert completion.completes_item(rds, 3) is True
    assert completion.completes_item(rds, 2) is False
    assert completion.completes_item([], 1) is False


def test_uncompleting_reopens_finished_item():
    assert completion.reopens_item(True) is True
    assert completion.reopens_item(False) is False
