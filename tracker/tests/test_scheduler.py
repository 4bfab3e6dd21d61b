import pytest
import logging
import uuid
from datetime import date

from tracker.domain import scheduler
from tracker.domain.entities import PatternStep
from tracker.domain.enums import OverduePolicy
from tracker.domain.errors import MismatchedIdsAndSteps
from tracker.domain.scheduler import ReviewOwner
from tracker.utils.dates import add_days, days_between

logger = logging.getLogger(__name__)

# Helpers

OWNER = ReviewOwner(uuid.uuid4(), uuid.uuid4(), None, None)


def steps(*intervals):
    return [PatternStep(i + 1, interval) for i, interval in enumerate(intervals)]


# Tests

def test_completed_policy_marks_overdue_dates():
    """Scenario: everything before today is already done."""
    result, finished = scheduler.generate_marking_overdue_completed(
        steps(1, 3), OWNER, date(2024, 1, 1), date(2024, 1, 10)
    )

    assert [rd.scheduled_date for rd in result] == [date(2024, 1, 2), date(2024, 1, 4)]
    assert [rd.is_completed for rd in result] == [True, True]
    assert finished is True
    logger.info("✓ Passed: overdue dates completed, item finished")


def test_completed_policy_dates_follow_anchor():
    anchor, today = date(2024, 3, 1), date(2024, 3, 5)
    pattern = steps(1, 3, 7, 14)

    result, finished = scheduler.generate_marking_overdue_completed(pattern, OWNER, anchor, today)

    for rd, step in zip(result, pattern):
        assert rd.scheduled_date == add_days(anchor, step.interval_days)
        assert rd.initial_scheduled_date == rd.scheduled_date
        assert rd.is_completed == (rd.scheduled_date < today)
        assert rd.step_number == step.step_number
    assert finished is False


def test_date_equal_to_today_is_not_overdue():
    result, finished = scheduler.generate_marking_overdue_completed(
        steps(1, 4), OWNER, date(2024, 1, 1), date(2024, 1, 5)
    )

    assert result[0].is_completed is True
    assert result[1].scheduled_date == date(2024, 1, 5)
    assert result[1].is_completed is False
    assert finished is False


def test_empty_steps_generate_nothing():
    result, finished = scheduler.generate_marking_overdue_completed([], OWNER, date(2024, 1, 1), date(2024, 1, 10))
    assert result == []
    assert finished is False

    assert scheduler.generate_marking_overdue_incomplete([], OWNER, date(2024, 1, 1), date(2024, 1, 10)) == []


def test_incomplete_policy_slides_schedule():
    """Scenario: first step overdue by 3 days, whole schedule moves 3 days."""
    result = scheduler.generate_marking_overdue_incomplete(
        steps(1, 3), OWNER, date(2024, 1, 1), date(2024, 1, 5)
    )

    assert [rd.scheduled_date for rd in result] == [date(2024, 1, 5), date(2024, 1, 7)]
    assert all(rd.is_completed is False for rd in result)
    assert all(rd.initial_scheduled_date == rd.scheduled_date for rd in result)
    logger.info("✓ Passed: incomplete policy slid schedule to today")


def test_incomplete_policy_keeps_spacing():
    pattern = steps(2, 5, 9, 30)
    result = scheduler.generate_marking_overdue_incomplete(pattern, OWNER, date(2023, 6, 1), date(2024, 1, 1))

    assert result[0].scheduled_date == date(2024, 1, 1)
    for i in range(1, len(result)):
        gap = days_between(result[i - 1].scheduled_date, result[i].scheduled_date)
        assert gap == pattern[i].interval_days - pattern[i - 1].interval_days


def test_incomplete_policy_no_shift_when_not_overdue():
    result = scheduler.generate_marking_overdue_incomplete(
        steps(1, 3), OWNER, date(2024, 1, 1), date(2024, 1, 2)
    )
    assert [rd.scheduled_date for rd in result] == [date(2024, 1, 2), date(2024, 1, 4)]


def test_generated_dates_carry_owner_and_fresh_ids():
    owner = ReviewOwner(uuid.uuid4(), uuid.uuid4(), uuid.uuid4(), uuid.uuid4())
    result, _ = scheduler.generate_marking_overdue_completed(steps(1, 2, 3), owner, date(2024, 1, 1), date(2024, 1, 1))

    assert len({rd.id for rd in result}) == 3
    for rd in result:
        assert (rd.user_id, rd.item_id, rd.category_id, rd.box_id) == tuple(owner)


def test_with_ids_preserves_identities_in_order():
    ids = [uuid.uuid4(), uuid.uuid4()]

    completed, _ = scheduler.generate_marking_overdue_completed_with_ids(
        steps(1, 3), ids, OWNER, date(2024, 1, 1), date(2024, 1, 3)
    )
    incomplete = scheduler.generate_marking_overdue_incomplete_with_ids(
        steps(1, 3), ids, OWNER, date(2024, 1, 1), date(2024, 1, 3)
    )

    assert [rd.id for rd in completed] == ids
    assert [rd.id for rd in incomplete] == ids
    assert [rd.is_completed for rd in completed] == [True, False]


@pytest.mark.parametrize("id_count,step_count", [(0, 2), (2, 0), (1, 3), (3, 2)])
def test_with_ids_rejects_length_mismatch(id_count, step_count):
    ids = [uuid.uuid4() for _ in range(id_count)]
    pattern = steps(*range(1, step_count + 1))

    with pytest.raises(MismatchedIdsAndSteps):
        scheduler.generate_marking_overdue_completed_with_ids(pattern, ids, OWNER, date(2024, 1, 1), date(2024, 1, 1))
    with pytest.raises(MismatchedIdsAndSteps):
        scheduler.generate_marking_overdue_incomplete_with_ids(pattern, ids, OWNER, date(2024, 1, 1), date(2024, 1, 1))
    with pytest.raises(MismatchedIdsAndSteps):
        scheduler.generate_incomplete_for_back_shift(pattern, ids, OWNER, date(2024, 1, 1), 0)


def test_back_shift_moves_effective_date_only():
    ids = [uuid.uuid4(), uuid.uuid4()]
    result = scheduler.generate_incomplete_for_back_shift(steps(1, 3), ids, OWNER, date(2024, 1, 1), -3)

    assert [rd.initial_scheduled_date for rd in result] == [date(2024, 1, 2), date(2024, 1, 4)]
    assert [rd.scheduled_date for rd in result] == [date(2024, 1, 5), date(2024, 1, 7)]
    assert all(rd.is_completed is False for rd in result)

    earlier = scheduler.generate_incomplete_for_back_shift(steps(1, 3), ids, OWNER, date(2024, 1, 1), 1)
    assert [rd.scheduled_date for rd in earlier] == [date(2024, 1, 1), date(2024, 1, 3)]


def test_generate_dispatches_on_policy():
    anchor, today = date(2024, 1, 1), date(2024, 1, 10)

    completed, finished = scheduler.generate(OverduePolicy.MARK_COMPLETED, steps(1, 3), OWNER, anchor, today)
    assert finished is True
    assert all(rd.is_completed for rd in completed)

    incomplete, finished = scheduler.generate(OverduePolicy.MARK_INCOMPLETE, steps(1, 3), OWNER, anchor, today)
    assert finished is False
    assert incomplete[0].scheduled_date == today

    ids = [uuid.uuid4(), uuid.uuid4()]
    reused, _ = scheduler.generate(OverduePolicy.MARK_INCOMPLETE, steps(1, 3), OWNER, anchor, today, ids=ids)
    assert [rd.id for rd in reused] == ids
