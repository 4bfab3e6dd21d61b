"""Storage collaborators of the item orchestrator.

Reads return domain objects; writes take them. None of these functions open
a transaction of their own except ``create_pattern``: callers group writes in
``transaction.atomic()`` so an item and its review dates commit together.
"""
from django.db import transaction
from django.db.models import Count, Prefetch

from ..domain import entities
from ..domain.enums import TargetWeight
from .models import Item, Pattern, PatternStep, ReviewDate

REVIEW_DATE_FIELDS = [
    "category_id",
    "box_id",
    "step_number",
    "initial_scheduled_date",
    "scheduled_date",
    "is_completed",
]


def _item(row):
    return entities.Item(
        id=row.id,
        user_id=row.user_id,
        category_id=row.category_id,
        box_id=row.box_id,
        pattern_id=row.pattern_id,
        name=row.name,
        detail=row.detail,
        learned_date=row.learned_date,
        is_finished=row.is_finished,
        registered_at=row.registered_at,
        edited_at=row.edited_at,
    )


def _review_date(row):
    return entities.ReviewDate(
        id=row.id,
        user_id=row.user_id,
        item_id=row.item_id,
        category_id=row.category_id,
        box_id=row.box_id,
        step_number=row.step_number,
        initial_scheduled_date=row.initial_scheduled_date,
        scheduled_date=row.scheduled_date,
        is_completed=row.is_completed,
    )


def _review_date_row(rd):
    return ReviewDate(
        id=rd.id,
        user_id=rd.user_id,
        item_id=rd.item_id,
        category_id=rd.category_id,
        box_id=rd.box_id,
        step_number=rd.step_number,
        initial_scheduled_date=rd.initial_scheduled_date,
        scheduled_date=rd.scheduled_date,
        is_completed=rd.is_completed,
    )


# Patterns

def create_pattern(pattern):
    with transaction.atomic():
        Pattern.objects.create(
            id=pattern.id,
            user_id=pattern.user_id,
            name=pattern.name,
            target_weight=pattern.target_weight.value,
        )
        PatternStep.objects.bulk_create([
            PatternStep(
                user_id=pattern.user_id,
                pattern_id=pattern.id,
                step_number=step.step_number,
                interval_days=step.interval_days,
            )
            for step in pattern.steps
        ])
    return pattern


def steps_for_pattern(user_id, pattern_id):
    """Steps of a pattern, ascending by step number."""
    if not Pattern.objects.filter(pk=pattern_id, user_id=user_id).exists():
        raise Pattern.DoesNotExist(f"pattern {pattern_id} not found")
    rows = PatternStep.objects.filter(pattern_id=pattern_id).order_by("step_number")
    return [entities.PatternStep(row.step_number, row.interval_days) for row in rows]


def patterns_for_user(user_id):
    qs = (
        Pattern.objects.filter(user_id=user_id)
        .order_by("registered_at", "id")
        .prefetch_related(Prefetch("steps", queryset=PatternStep.objects.order_by("step_number")))
    )
    return [
        entities.Pattern(
            id=row.id,
            user_id=row.user_id,
            name=row.name,
            target_weight=TargetWeight(row.target_weight),
            steps=tuple(entities.PatternStep(s.step_number, s.interval_days) for s in row.steps.all()),
        )
        for row in qs
    ]


# Items

def get_item(user_id, item_id):
    return _item(Item.objects.get(pk=item_id, user_id=user_id))


def create_item(item):
    Item.objects.create(
        id=item.id,
        user_id=item.user_id,
        category_id=item.category_id,
        box_id=item.box_id,
        pattern_id=item.pattern_id,
        name=item.name,
        detail=item.detail,
        learned_date=item.learned_date,
        is_finished=item.is_finished,
        registered_at=item.registered_at,
        edited_at=item.edited_at,
    )


def update_item(item):
    updated = Item.objects.filter(pk=item.id, user_id=item.user_id).update(
        category_id=item.category_id,
        box_id=item.box_id,
        pattern_id=item.pattern_id,
        name=item.name,
        detail=item.detail,
        learned_date=item.learned_date,
        is_finished=item.is_finished,
        edited_at=item.edited_at,
    )
    if not updated:
        raise Item.DoesNotExist(f"item {item.id} not found")


def set_item_finished(user_id, item_id, is_finished, edited_at):
    updated = Item.objects.filter(pk=item_id, user_id=user_id).update(
        is_finished=is_finished, edited_at=edited_at
    )
    if not updated:
        raise Item.DoesNotExist(f"item {item_id} not found")


def delete_item(user_id, item_id):
    deleted, _ = Item.objects.filter(pk=item_id, user_id=user_id).delete()
    if not deleted:
        raise Item.DoesNotExist(f"item {item_id} not found")


def list_items(user_id, box_id=None, category_id=None, finished=False):
    """Items with their review dates.

    A box id selects that box; otherwise a category id selects the items of
    the category that sit in no box; with neither, the fully unclassified items.
    """
    qs = Item.objects.filter(user_id=user_id, is_finished=finished)
    if box_id is not None:
        qs = qs.filter(box_id=box_id)
    elif category_id is not None:
        qs = qs.filter(category_id=category_id, box_id__isnull=True)
    else:
        qs = qs.filter(category_id__isnull=True, box_id__isnull=True)

    qs = qs.order_by("registered_at", "id").prefetch_related(
        Prefetch("review_dates", queryset=ReviewDate.objects.order_by("step_number"))
    )
    return [
        (_item(row), [_review_date(rd) for rd in row.review_dates.all()])
        for row in qs
    ]


# Review dates

def create_review_dates(review_dates):
    ReviewDate.objects.bulk_create([_review_date_row(rd) for rd in review_dates])


def update_review_dates(review_dates):
    ReviewDate.objects.bulk_update(
        [_review_date_row(rd) for rd in review_dates], fields=REVIEW_DATE_FIELDS
    )


def delete_review_dates(user_id, item_id):
    ReviewDate.objects.filter(item_id=item_id, user_id=user_id).delete()


def review_dates_for_item(user_id, item_id):
    rows = ReviewDate.objects.filter(item_id=item_id, user_id=user_id).order_by("step_number")
    return [_review_date(row) for row in rows]


def review_date_ids_for_item(user_id, item_id):
    return list(
        ReviewDate.objects.filter(item_id=item_id, user_id=user_id)
        .order_by("step_number")
        .values_list("id", flat=True)
    )


def get_review_date(user_id, item_id, review_date_id):
    return _review_date(ReviewDate.objects.get(pk=review_date_id, item_id=item_id, user_id=user_id))


def get_review_date_by_step(user_id, item_id, step_number):
    return _review_date(
        ReviewDate.objects.get(item_id=item_id, user_id=user_id, step_number=step_number)
    )


def has_completed_review_date(user_id, item_id):
    return ReviewDate.objects.filter(item_id=item_id, user_id=user_id, is_completed=True).exists()


def set_review_date_completed(user_id, review_date_id, is_completed):
    updated = ReviewDate.objects.filter(pk=review_date_id, user_id=user_id).update(
        is_completed=is_completed
    )
    if not updated:
        raise ReviewDate.DoesNotExist(f"review date {review_date_id} not found")


def relabel_review_dates(user_id, item_id, category_id, box_id):
    ReviewDate.objects.filter(item_id=item_id, user_id=user_id).update(
        category_id=category_id, box_id=box_id
    )


def due_review_dates(user_id, until):
    rows = (
        ReviewDate.objects.filter(
            user_id=user_id,
            is_completed=False,
            item__is_finished=False,
            scheduled_date__lte=until,
        )
        .order_by("scheduled_date", "step_number")
    )
    return [_review_date(row) for row in rows]


# Summary counts

def _grouped_counts(qs, *fields):
    return list(qs.values(*fields).annotate(count=Count("id")).order_by(*fields))


def count_items_by_box(user_id):
    qs = Item.objects.filter(user_id=user_id, is_finished=False, box_id__isnull=False)
    return _grouped_counts(qs, "category_id", "box_id")


def count_unclassified_items_by_category(user_id):
    qs = Item.objects.filter(
        user_id=user_id, is_finished=False, box_id__isnull=True, category_id__isnull=False
    )
    return _grouped_counts(qs, "category_id")


def count_unclassified_items(user_id):
    return Item.objects.filter(
        user_id=user_id, is_finished=False, box_id__isnull=True, category_id__isnull=True
    ).count()


def _daily_review_dates(user_id, day):
    # Completed rows still belong to the day's list; finished items do not.
    return ReviewDate.objects.filter(user_id=user_id, scheduled_date=day, item__is_finished=False)


def count_daily_review_dates_by_box(user_id, day):
    qs = _daily_review_dates(user_id, day).filter(box_id__isnull=False)
    return _grouped_counts(qs, "category_id", "box_id")


def count_daily_unclassified_review_dates_by_category(user_id, day):
    qs = _daily_review_dates(user_id, day).filter(box_id__isnull=True, category_id__isnull=False)
    return _grouped_counts(qs, "category_id")


def count_daily_unclassified_review_dates(user_id, day):
    return _daily_review_dates(user_id, day).filter(
        box_id__isnull=True, category_id__isnull=True
    ).count()


def count_daily_review_dates(user_id, day):
    return _daily_review_dates(user_id, day).count()
