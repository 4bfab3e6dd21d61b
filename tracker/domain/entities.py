"""Domain objects of the tracker.

Each object is a frozen dataclass built through a ``new_*`` constructor that
runs its checks in order and raises ``ValidationError`` for the first rule
that fails. Objects read back from storage are built directly, since the
stored rows already passed those checks.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from ..config import MAX_INTERVAL_DAYS, MAX_STEP_NUMBER
from .enums import TargetWeight
from .errors import ValidationError


@dataclass(frozen=True)
class PatternStep:
    step_number: int
    interval_days: int


@dataclass(frozen=True)
class Pattern:
    id: UUID
    user_id: UUID
    name: str
    target_weight: TargetWeight
    steps: tuple


@dataclass(frozen=True)
class ReviewDate:
    id: UUID
    user_id: UUID
    item_id: UUID
    category_id: Optional[UUID]
    box_id: Optional[UUID]
    step_number: int
    initial_scheduled_date: date
    scheduled_date: date
    is_completed: bool = False


@dataclass(frozen=True)
class Item:
    id: UUID
    user_id: UUID
    category_id: Optional[UUID]
    box_id: Optional[UUID]
    pattern_id: Optional[UUID]
    name: str
    detail: str
    learned_date: date
    is_finished: bool
    registered_at: datetime
    edited_at: datetime


def _check(rules):
    for field, failed, message in rules:
        if failed():
            raise ValidationError(field, message)


def new_pattern_step(step_number: int, interval_days: int) -> PatternStep:
    _check([
        ("step_number", lambda: step_number is None, "step number is required"),
        ("step_number", lambda: step_number < 1, "step number must be 1 or greater"),
        ("step_number", lambda: step_number > MAX_STEP_NUMBER,
         f"step number cannot exceed {MAX_STEP_NUMBER}"),
        ("interval_days", lambda: interval_days is None, "interval days is required"),
        ("interval_days", lambda: interval_days < 1, "interval days must be 1 or greater"),
        ("interval_days", lambda: interval_days > MAX_INTERVAL_DAYS,
         f"interval days cannot exceed {MAX_INTERVAL_DAYS}"),
    ])
    return PatternStep(step_number=step_number, interval_days=interval_days)


def validate_steps(steps: List[PatternStep]) -> None:
    """Enforce the ordering every pattern must satisfy before it is stored.

    The scheduler relies on steps arriving sorted by step number, numbered
    1, 2, 3... and with strictly increasing intervals.
    """
    if not steps:
        raise ValidationError("steps", "a pattern needs at least one step")
    if steps[0].step_number != 1:
        raise ValidationError("steps", "step numbers must start at 1")

    for prev, curr in zip(steps, steps[1:]):
        if curr.step_number == prev.step_number:
            raise ValidationError("steps", "step numbers must not repeat")
        if curr.interval_days == prev.interval_days:
            raise ValidationError("steps", "interval days must not repeat")
        if curr.step_number < prev.step_number:
            raise ValidationError("steps", "step numbers must be ascending")
        if curr.interval_days < prev.interval_days:
            raise ValidationError("steps", "interval days must be ascending")
        if curr.step_number != prev.step_number + 1:
            raise ValidationError("steps", "step numbers must increase by 1")


def new_pattern(pattern_id, user_id, name, target_weight, steps) -> Pattern:
    _check([
        ("name", lambda: not name, "pattern name is required"),
        ("target_weight", lambda: not target_weight, "target weight is required"),
        ("target_weight",
         lambda: target_weight not in {w.value for w in TargetWeight},
         "target weight is not valid"),
    ])
    validate_steps(steps)
    return Pattern(
        id=pattern_id,
        user_id=user_id,
        name=name,
        target_weight=TargetWeight(target_weight),
        steps=tuple(steps),
    )


def new_review_date(
    review_date_id,
    user_id,
    item_id,
    category_id,
    box_id,
    step_number,
    initial_scheduled_date,
    scheduled_date,
    is_completed,
) -> ReviewDate:
    _check([
        ("step_number", lambda: step_number is None, "step number is required"),
        ("step_number", lambda: step_number < 1, "step number must be 1 or greater"),
        ("step_number", lambda: step_number > MAX_STEP_NUMBER,
         f"step number cannot exceed {MAX_STEP_NUMBER}"),
        ("initial_scheduled_date", lambda: initial_scheduled_date is None,
         "initial scheduled date is required"),
        ("scheduled_date", lambda: scheduled_date is None, "scheduled date is required"),
    ])
    return ReviewDate(
        id=review_date_id,
        user_id=user_id,
        item_id=item_id,
        category_id=category_id,
        box_id=box_id,
        step_number=step_number,
        initial_scheduled_date=initial_scheduled_date,
        scheduled_date=scheduled_date,
        is_completed=is_completed,
    )


def new_item(
    item_id,
    user_id,
    category_id,
    box_id,
    pattern_id,
    name,
    detail,
    learned_date,
    registered_at,
) -> Item:
    _check([
        ("name", lambda: not name, "item name is required"),
        ("learned_date", lambda: learned_date is None, "learned date is required"),
    ])
    return Item(
        id=item_id,
        user_id=user_id,
        category_id=category_id,
        box_id=box_id,
        pattern_id=pattern_id,
        name=name,
        detail=detail or "",
        learned_date=learned_date,
        is_finished=False,
        registered_at=registered_at,
        edited_at=registered_at,
    )
