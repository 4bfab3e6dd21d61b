import uuid

from django.db import models
from django.utils import timezone

from ..config import DEFAULT_TARGET_WEIGHT


class Pattern(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField()
    name = models.CharField(max_length=255)
    target_weight = models.CharField(max_length=16, default=DEFAULT_TARGET_WEIGHT)
    registered_at = models.DateTimeField(default=timezone.now)
    edited_at = models.DateTimeField(default=timezone.now)

    class Meta:
        indexes = [
            models.Index(fields=["user_id"]),
        ]


class PatternStep(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField()
    pattern = models.ForeignKey(Pattern, on_delete=models.CASCADE, related_name="steps")
    step_number = models.PositiveSmallIntegerField()
    interval_days = models.PositiveSmallIntegerField()

    class Meta:
        unique_together = (("pattern", "step_number"),)
        ordering = ["step_number"]


class Item(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField()
    category_id = models.UUIDField(null=True, blank=True)  # NULL = unclassified
    box_id = models.UUIDField(null=True, blank=True)
    # Items own review dates generated from the pattern, so it cannot vanish under them.
    pattern = models.ForeignKey(
        Pattern, null=True, blank=True, on_delete=models.PROTECT, related_name="items"
    )
    name = models.CharField(max_length=255)
    detail = models.TextField(blank=True, default="")
    learned_date = models.DateField()
    is_finished = models.BooleanField(default=False)
    registered_at = models.DateTimeField(default=timezone.now)
    edited_at = models.DateTimeField(default=timezone.now)

    class Meta:
        indexes = [
            models.Index(fields=["user_id", "box_id"]),
            models.Index(fields=["user_id", "category_id"]),
        ]


class ReviewDate(models.Model):
    id = models.UUIDField(primary_key=True, editable=False)
    user_id = models.UUIDField()
    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name="review_dates")
    category_id = models.UUIDField(null=True, blank=True)
    box_id = models.UUIDField(null=True, blank=True)
    step_number = models.PositiveSmallIntegerField()
    initial_scheduled_date = models.DateField()
    scheduled_date = models.DateField()
    is_completed = models.BooleanField(default=False)

    class Meta:
        unique_together = (("item", "step_number"),)
        indexes = [
            models.Index(fields=["user_id", "scheduled_date"]),
        ]
