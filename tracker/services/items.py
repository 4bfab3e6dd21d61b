import uuid
from dataclasses import replace

import structlog
from django.db import transaction
from django.utils import timezone

from ..data import repos
from ..domain import completion, scheduler
from ..domain.entities import new_item
from ..domain.enums import OverduePolicy, Regeneration
from ..domain.errors import HasCompletedReviewDate, NewDateBeforeInitial, NoDiff
from ..domain.reconciliation import PatternState, classify
from ..domain.scheduler import ReviewOwner
from ..utils.dates import add_days, days_between, format_date, is_before

logger = structlog.get_logger()


def _owner(item):
    return ReviewOwner(item.user_id, item.id, item.category_id, item.box_id)


def create_item(
    user_id,
    name,
    learned_date,
    today,
    detail="",
    category_id=None,
    box_id=None,
    pattern_id=None,
    mark_overdue_as_completed=False,
):
    item = new_item(
        uuid.uuid4(), user_id, category_id, box_id, pattern_id,
        name, detail, learned_date, timezone.now(),
    )

    review_dates = []
    if pattern_id is not None:
        steps = repos.steps_for_pattern(user_id, pattern_id)
        policy = OverduePolicy.from_flag(mark_overdue_as_completed)
        review_dates, item_finished = scheduler.generate(policy, steps, _owner(item), learned_date, today)
        item = replace(
            item,
            is_finished=completion.finished_after_generation(policy, item_finished, item.is_finished),
        )

    with transaction.atomic():
        repos.create_item(item)
        repos.create_review_dates(review_dates)

    logger.info("item_created",
        user_id=str(user_id),
        item_id=str(item.id),
        pattern_id=str(pattern_id) if pattern_id else None,
        learned_date=format_date(learned_date),
        review_date_count=len(review_dates),
        is_finished=item.is_finished,
    )
    return item, review_dates


def update_item(
    user_id,
    item_id,
    name,
    learned_date,
    today,
    detail="",
    category_id=None,
    box_id=None,
    pattern_id=None,
    mark_overdue_as_completed=False,
):
    """Apply an edit to an item and reconcile its review dates.

    The classifier decides whether completed progress must be protected,
    which generator runs and whether rows are replaced or updated in place.
    The item row and its review dates are written in one transaction.
    """
    current = repos.get_item(user_id, item_id)

    unchanged = (
        current.name == name
        and current.detail == (detail or "")
        and current.category_id == category_id
        and current.box_id == box_id
        and current.pattern_id == pattern_id
        and current.learned_date == learned_date
    )
    if unchanged:
        raise NoDiff()

    requested_steps = []
    if pattern_id is not None:
        requested_steps = repos.steps_for_pattern(user_id, pattern_id)
    current_steps = None
    if current.pattern_id is not None and pattern_id is not None and current.pattern_id != pattern_id:
        current_steps = repos.steps_for_pattern(user_id, current.pattern_id)

    plan = classify(
        PatternState(current.pattern_id, current.learned_date),
        PatternState(pattern_id, learned_date),
        current_steps,
        requested_steps,
    )

    if plan.requires_completed_check and repos.has_completed_review_date(user_id, item_id):
        logger.info("item_update_rejected",
            user_id=str(user_id),
            item_id=str(item_id),
            transition=plan.transition.value,
            learned_date_changed=plan.learned_date_changed,
        )
        raise HasCompletedReviewDate()

    item = replace(
        current,
        category_id=category_id,
        box_id=box_id,
        pattern_id=pattern_id,
        name=name,
        detail=detail or "",
        learned_date=learned_date,
        edited_at=timezone.now(),
    )

    review_dates = []
    policy = OverduePolicy.from_flag(mark_overdue_as_completed)
    if plan.regeneration is not Regeneration.NONE:
        ids = None
        if plan.regeneration is Regeneration.EXISTING_IDENTITIES:
            ids = repos.review_date_ids_for_item(user_id, item_id)
        review_dates, item_finished = scheduler.generate(
            policy, requested_steps, _owner(item), learned_date, today, ids=ids
        )
        item = replace(
            item,
            is_finished=completion.finished_after_generation(policy, item_finished, item.is_finished),
        )

    relabel = (
        plan.regeneration is Regeneration.NONE
        and pattern_id is not None
        and (current.category_id != category_id or current.box_id != box_id)
    )

    with transaction.atomic():
        repos.update_item(item)
        if plan.deletes_existing:
            repos.delete_review_dates(user_id, item_id)
        if plan.inserts_generated:
            repos.create_review_dates(review_dates)
        elif plan.updates_in_place:
            repos.update_review_dates(review_dates)
        elif relabel:
            repos.relabel_review_dates(user_id, item_id, category_id, box_id)

    if plan.regeneration is Regeneration.NONE:
        review_dates = repos.review_dates_for_item(user_id, item_id)

    logger.info("item_updated",
        user_id=str(user_id),
        item_id=str(item_id),
        transition=plan.transition.value,
        learned_date_changed=plan.learned_date_changed,
        regeneration=plan.regeneration.value,
        review_date_count=len(review_dates),
        is_finished=item.is_finished,
    )
    return item, review_dates


def shift_review_date(user_id, item_id, step_number, requested_date, today, mark_overdue_as_completed=False):
    """Move one review date and reschedule every later step with it.

    Earlier steps keep their dates. Returns the item and all of its review
    dates as stored after the change.
    """
    target = repos.get_review_date_by_step(user_id, item_id, step_number)
    if is_before(requested_date, target.initial_scheduled_date):
        raise NewDateBeforeInitial()

    item = repos.get_item(user_id, item_id)
    steps = repos.steps_for_pattern(user_id, item.pattern_id)
    ids = repos.review_date_ids_for_item(user_id, item_id)
    shift = days_between(target.initial_scheduled_date, requested_date)

    # The whole schedule is regenerated from the learned date moved by the
    # shift; only the requested step and later ones are written back.
    policy = OverduePolicy.from_flag(mark_overdue_as_completed)
    regenerated, item_finished = scheduler.generate(
        policy, steps, _owner(item), add_days(item.learned_date, shift), today, ids=ids
    )

    tail = [rd for rd in regenerated if rd.step_number >= step_number]
    is_finished = completion.finished_after_generation(policy, item_finished, item.is_finished)

    with transaction.atomic():
        repos.update_review_dates(tail)
        if is_finished != item.is_finished:
            item = replace(item, is_finished=is_finished, edited_at=timezone.now())
            repos.set_item_finished(user_id, item_id, is_finished, item.edited_at)

    logger.info("review_date_shifted",
        user_id=str(user_id),
        item_id=str(item_id),
        step_number=step_number,
        shift_days=shift,
        rescheduled_count=len(tail),
        is_finished=item.is_finished,
    )
    return item, repos.review_dates_for_item(user_id, item_id)


def force_finish(user_id, item_id):
    item = repos.get_item(user_id, item_id)
    item = replace(item, is_finished=True, edited_at=timezone.now())
    repos.set_item_finished(user_id, item_id, True, item.edited_at)

    logger.info("item_force_finished", user_id=str(user_id), item_id=str(item_id))
    return item


def force_resume(user_id, item_id, today):
    """Reopen a finished item.

    When the first open review date is still ahead, only the flag changes.
    Otherwise that step and every later one are rescheduled from today.
    """
    item = repos.get_item(user_id, item_id)
    review_dates = repos.review_dates_for_item(user_id, item_id)
    first_open = next((rd for rd in review_dates if not rd.is_completed), None)

    tail = []
    if first_open is not None and not is_before(today, first_open.scheduled_date):
        steps = repos.steps_for_pattern(user_id, item.pattern_id)
        anchor = add_days(item.learned_date, days_between(first_open.initial_scheduled_date, today))
        regenerated = scheduler.generate_marking_overdue_incomplete_with_ids(
            steps, [rd.id for rd in review_dates], _owner(item), anchor, today
        )
        tail = [rd for rd in regenerated if rd.step_number >= first_open.step_number]

    item = replace(item, is_finished=False, edited_at=timezone.now())
    with transaction.atomic():
        repos.set_item_finished(user_id, item_id, False, item.edited_at)
        if tail:
            repos.update_review_dates(tail)

    logger.info("item_force_resumed",
        user_id=str(user_id),
        item_id=str(item_id),
        rescheduled_count=len(tail),
    )
    return item, repos.review_dates_for_item(user_id, item_id)


def complete_review_date(user_id, item_id, review_date_id):
    review_dates = repos.review_dates_for_item(user_id, item_id)
    target = repos.get_review_date(user_id, item_id, review_date_id)
    item = repos.get_item(user_id, item_id)

    finishes = completion.completes_item(review_dates, target.step_number) and not item.is_finished
    with transaction.atomic():
        repos.set_review_date_completed(user_id, review_date_id, True)
        if finishes:
            item = replace(item, is_finished=True, edited_at=timezone.now())
            repos.set_item_finished(user_id, item_id, True, item.edited_at)

    logger.info("review_date_completed",
        user_id=str(user_id),
        item_id=str(item_id),
        step_number=target.step_number,
        is_finished=item.is_finished,
    )
    return item, replace(target, is_completed=True)


def uncomplete_review_date(user_id, item_id, review_date_id):
    target = repos.get_review_date(user_id, item_id, review_date_id)
    item = repos.get_item(user_id, item_id)

    reopens = completion.reopens_item(item.is_finished)
    with transaction.atomic():
        repos.set_review_date_completed(user_id, review_date_id, False)
        if reopens:
            item = replace(item, is_finished=False, edited_at=timezone.now())
            repos.set_item_finished(user_id, item_id, False, item.edited_at)

    logger.info("review_date_uncompleted",
        user_id=str(user_id),
        item_id=str(item_id),
        step_number=target.step_number,
        is_finished=item.is_finished,
    )
    return item, replace(target, is_completed=False)


def delete_item(user_id, item_id):
    repos.delete_item(user_id, item_id)
    logger.info("item_deleted", user_id=str(user_id), item_id=str(item_id))


def list_items(user_id, box_id=None, category_id=None, finished=False):
    return repos.list_items(user_id, box_id=box_id, category_id=category_id, finished=finished)


def due_review_dates(user_id, until):
    return repos.due_review_dates(user_id, until)


def item_counts(user_id):
    """Unfinished items per box, per category outside boxes, and fully unclassified."""
    return {
        "by_box": repos.count_items_by_box(user_id),
        "unclassified_by_category": repos.count_unclassified_items_by_category(user_id),
        "unclassified": repos.count_unclassified_items(user_id),
    }


def daily_review_date_counts(user_id, day):
    """Review dates scheduled on ``day``, grouped the same way as ``item_counts``."""
    return {
        "by_box": repos.count_daily_review_dates_by_box(user_id, day),
        "unclassified_by_category": repos.count_daily_unclassified_review_dates_by_category(user_id, day),
        "unclassified": repos.count_daily_unclassified_review_dates(user_id, day),
        "total": repos.count_daily_review_dates(user_id, day),
    }
