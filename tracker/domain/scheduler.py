"""Expansion of pattern steps into concrete review dates.

Every function here is pure. Steps must already be sorted by step number
(see ``entities.validate_steps``); nothing in this module re-sorts them.
"""
import uuid
from collections import namedtuple
from datetime import date
from typing import List, Optional, Sequence, Tuple

from ..utils.dates import add_days, days_between, is_before
from .entities import PatternStep, ReviewDate, new_review_date
from .enums import OverduePolicy
from .errors import MismatchedIdsAndSteps

# Who the generated review dates belong to.
ReviewOwner = namedtuple("ReviewOwner", ["user_id", "item_id", "category_id", "box_id"])


def _new_ids(steps):
    return [uuid.uuid4() for _ in steps]


def _checked_ids(steps, ids):
    if len(ids) != len(steps):
        raise MismatchedIdsAndSteps(len(ids), len(steps))
    return list(ids)


def _review_date(owner, review_date_id, step, initial, scheduled, is_completed):
    return new_review_date(
        review_date_id,
        owner.user_id,
        owner.item_id,
        owner.category_id,
        owner.box_id,
        step.step_number,
        initial,
        scheduled,
        is_completed,
    )


def _overdue_shift(steps, anchor, today) -> int:
    # Slide the whole schedule so the first step is not already overdue.
    if not steps:
        return 0
    first = add_days(anchor, steps[0].interval_days)
    if is_before(first, today):
        return max(0, days_between(first, today))
    return 0


def _completed(steps, ids, owner, anchor, today):
    result = []
    for review_date_id, step in zip(ids, steps):
        scheduled = add_days(anchor, step.interval_days)
        result.append(
            _review_date(owner, review_date_id, step, scheduled, scheduled, is_before(scheduled, today))
        )
    # Finished when even the last step is already behind us.
    finished = bool(result) and is_before(result[-1].scheduled_date, today)
    return result, finished


def _incomplete(steps, ids, owner, anchor, today):
    shift = _overdue_shift(steps, anchor, today)
    result = []
    for review_date_id, step in zip(ids, steps):
        scheduled = add_days(anchor, step.interval_days + shift)
        result.append(_review_date(owner, review_date_id, step, scheduled, scheduled, False))
    return result


def generate_marking_overdue_completed(
    steps: Sequence[PatternStep], owner: ReviewOwner, anchor: date, today: date
) -> Tuple[List[ReviewDate], bool]:
    return _completed(steps, _new_ids(steps), owner, anchor, today)


def generate_marking_overdue_incomplete(
    steps: Sequence[PatternStep], owner: ReviewOwner, anchor: date, today: date
) -> List[ReviewDate]:
    return _incomplete(steps, _new_ids(steps), owner, anchor, today)


def generate_marking_overdue_completed_with_ids(
    steps: Sequence[PatternStep], ids, owner: ReviewOwner, anchor: date, today: date
) -> Tuple[List[ReviewDate], bool]:
    return _completed(steps, _checked_ids(steps, ids), owner, anchor, today)


def generate_marking_overdue_incomplete_with_ids(
    steps: Sequence[PatternStep], ids, owner: ReviewOwner, anchor: date, today: date
) -> List[ReviewDate]:
    return _incomplete(steps, _checked_ids(steps, ids), owner, anchor, today)


def generate_incomplete_for_back_shift(
    steps: Sequence[PatternStep], ids, owner: ReviewOwner, anchor: date, shift_back: int
) -> List[ReviewDate]:
    """Recompute dates around a manual override of one review date.

    ``initial_scheduled_date`` stays at ``anchor + interval`` while the
    effective date moves by ``shift_back`` days (a negative value pushes it
    later).
    """
    ids = _checked_ids(steps, ids)
    result = []
    for review_date_id, step in zip(ids, steps):
        initial = add_days(anchor, step.interval_days)
        result.append(
            _review_date(owner, review_date_id, step, initial, add_days(initial, -shift_back), False)
        )
    return result


def generate(
    policy: OverduePolicy,
    steps: Sequence[PatternStep],
    owner: ReviewOwner,
    anchor: date,
    today: date,
    ids: Optional[Sequence] = None,
) -> Tuple[List[ReviewDate], bool]:
    """Run the generator matching ``policy``.

    New identities are minted when ``ids`` is None. The incomplete policy
    never reports the item as finished.
    """
    if policy is OverduePolicy.MARK_COMPLETED:
        if ids is None:
            return generate_marking_overdue_completed(steps, owner, anchor, today)
        return generate_marking_overdue_completed_with_ids(steps, ids, owner, anchor, today)

    if ids is None:
        return generate_marking_overdue_incomplete(steps, owner, anchor, today), False
    return generate_marking_overdue_incomplete_with_ids(steps, ids, owner, anchor, today), False
