from rest_framework import serializers

from ..config import DATE_FORMAT, DEFAULT_TARGET_WEIGHT
from ..domain.enums import TargetWeight

DATE_INPUT_FORMATS = [DATE_FORMAT]


class PatternStepInSerializer(serializers.Serializer):
    step_number = serializers.IntegerField()
    interval_days = serializers.IntegerField()


class PatternInSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    target_weight = serializers.ChoiceField(
        choices=[w.value for w in TargetWeight], default=DEFAULT_TARGET_WEIGHT
    )
    steps = PatternStepInSerializer(many=True)


class ItemInSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    detail = serializers.CharField(allow_blank=True, default="")
    category_id = serializers.UUIDField(allow_null=True, default=None)
    box_id = serializers.UUIDField(allow_null=True, default=None)
    pattern_id = serializers.UUIDField(allow_null=True, default=None)
    learned_date = serializers.DateField(input_formats=DATE_INPUT_FORMATS)
    today = serializers.DateField(input_formats=DATE_INPUT_FORMATS, required=False)
    mark_overdue_as_completed = serializers.BooleanField(default=False)


class ShiftInSerializer(serializers.Serializer):
    scheduled_date = serializers.DateField(input_formats=DATE_INPUT_FORMATS)
    today = serializers.DateField(input_formats=DATE_INPUT_FORMATS, required=False)
    mark_overdue_as_completed = serializers.BooleanField(default=False)


class ResumeInSerializer(serializers.Serializer):
    today = serializers.DateField(input_formats=DATE_INPUT_FORMATS, required=False)


class ItemListQuerySerializer(serializers.Serializer):
    box_id = serializers.UUIDField(required=False)
    category_id = serializers.UUIDField(required=False)
    finished = serializers.BooleanField(default=False)


class DueQuerySerializer(serializers.Serializer):
    until = serializers.DateField(input_formats=DATE_INPUT_FORMATS)


class DailyCountQuerySerializer(serializers.Serializer):
    today = serializers.DateField(input_formats=DATE_INPUT_FORMATS, required=False)
