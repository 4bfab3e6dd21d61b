from rest_framework import views, status
from rest_framework.response import Response
from django.utils import timezone
import structlog
import uuid
from ..domain.enums import TARGET_WEIGHT_LABELS
from ..services import items as item_service
from ..services import patterns as pattern_service
from ..utils.dates import format_date
from .serializers import (
    DailyCountQuerySerializer,
    DueQuerySerializer,
    ItemInSerializer,
    ItemListQuerySerializer,
    PatternInSerializer,
    ResumeInSerializer,
    ShiftInSerializer,
)

base_logger = structlog.get_logger()


def _request_logger():
    # Create a unique request_id
    return base_logger.bind(request_id=str(uuid.uuid4()))


def _id(value):
    return str(value) if value is not None else None


def review_date_payload(rd):
    return {
        "review_date_id": str(rd.id),
        "item_id": str(rd.item_id),
        "category_id": _id(rd.category_id),
        "box_id": _id(rd.box_id),
        "step_number": rd.step_number,
        "initial_scheduled_date": format_date(rd.initial_scheduled_date),
        "scheduled_date": format_date(rd.scheduled_date),
        "is_completed": rd.is_completed,
    }


def item_payload(item, review_dates=None):
    payload = {
        "item_id": str(item.id),
        "user_id": str(item.user_id),
        "category_id": _id(item.category_id),
        "box_id": _id(item.box_id),
        "pattern_id": _id(item.pattern_id),
        "name": item.name,
        "detail": item.detail,
        "learned_date": format_date(item.learned_date),
        "is_finished": item.is_finished,
        "edited_at": item.edited_at.isoformat(),
    }
    if review_dates is not None:
        payload["review_dates"] = [review_date_payload(rd) for rd in review_dates]
    return payload


def pattern_payload(pattern):
    return {
        "pattern_id": str(pattern.id),
        "name": pattern.name,
        "target_weight": pattern.target_weight.value,
        "target_weight_label": TARGET_WEIGHT_LABELS[pattern.target_weight],
        "steps": [
            {"step_number": step.step_number, "interval_days": step.interval_days}
            for step in pattern.steps
        ],
    }


def count_payload(rows):
    return [
        {key: value if key == "count" else _id(value) for key, value in row.items()}
        for row in rows
    ]


class PatternsView(views.APIView):
    def get(self, request, user_id):
        logger = _request_logger()

        patterns = pattern_service.list_patterns(user_id)

        logger.info("patterns_api_response", user_id=str(user_id), pattern_count=len(patterns))
        return Response({
            "user_id": str(user_id),
            "patterns": [pattern_payload(p) for p in patterns],
        })

    def post(self, request, user_id):
        logger = _request_logger()

        s = PatternInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        pattern = pattern_service.create_pattern(
            user_id,
            data["name"],
            [(step["step_number"], step["interval_days"]) for step in data["steps"]],
            target_weight=data["target_weight"],
        )

        logger.info("pattern_api_response",
            user_id=str(user_id),
            pattern_id=str(pattern.id),
            status=status.HTTP_201_CREATED,
        )
        return Response(pattern_payload(pattern), status=status.HTTP_201_CREATED)


class ItemsView(views.APIView):
    def get(self, request, user_id):
        logger = _request_logger()

        qs = ItemListQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        query = qs.validated_data

        results = item_service.list_items(
            user_id,
            box_id=query.get("box_id"),
            category_id=query.get("category_id"),
            finished=query["finished"],
        )

        logger.info("items_api_response",
            user_id=str(user_id),
            finished=query["finished"],
            item_count=len(results),
        )
        return Response({
            "user_id": str(user_id),
            "items": [item_payload(item, review_dates) for item, review_dates in results],
        })

    def post(self, request, user_id):
        logger = _request_logger()

        s = ItemInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        item, review_dates = item_service.create_item(
            user_id,
            data["name"],
            data["learned_date"],
            data.get("today") or timezone.localdate(),
            detail=data["detail"],
            category_id=data["category_id"],
            box_id=data["box_id"],
            pattern_id=data["pattern_id"],
            mark_overdue_as_completed=data["mark_overdue_as_completed"],
        )

        logger.info("item_api_response",
            user_id=str(user_id),
            item_id=str(item.id),
            review_date_count=len(review_dates),
            status=status.HTTP_201_CREATED,
        )
        return Response(item_payload(item, review_dates), status=status.HTTP_201_CREATED)


class ItemDetailView(views.APIView):
    def put(self, request, user_id, item_id):
        logger = _request_logger()

        s = ItemInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        item, review_dates = item_service.update_item(
            user_id,
            item_id,
            data["name"],
            data["learned_date"],
            data.get("today") or timezone.localdate(),
            detail=data["detail"],
            category_id=data["category_id"],
            box_id=data["box_id"],
            pattern_id=data["pattern_id"],
            mark_overdue_as_completed=data["mark_overdue_as_completed"],
        )

        logger.info("item_update_api_response",
            user_id=str(user_id),
            item_id=str(item_id),
            review_date_count=len(review_dates),
            is_finished=item.is_finished,
        )
        return Response(item_payload(item, review_dates))

    def delete(self, request, user_id, item_id):
        logger = _request_logger()

        item_service.delete_item(user_id, item_id)

        logger.info("item_delete_api_response", user_id=str(user_id), item_id=str(item_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


class ItemFinishView(views.APIView):
    def post(self, request, user_id, item_id):
        logger = _request_logger()

        item = item_service.force_finish(user_id, item_id)

        logger.info("item_finish_api_response", user_id=str(user_id), item_id=str(item_id))
        return Response(item_payload(item))


class ItemResumeView(views.APIView):
    def post(self, request, user_id, item_id):
        logger = _request_logger()

        s = ResumeInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        today = s.validated_data.get("today") or timezone.localdate()

        item, review_dates = item_service.force_resume(user_id, item_id, today)

        logger.info("item_resume_api_response",
            user_id=str(user_id),
            item_id=str(item_id),
            today=format_date(today),
        )
        return Response(item_payload(item, review_dates))


class ReviewDateScheduleView(views.APIView):
    def put(self, request, user_id, item_id, step_number):
        logger = _request_logger()

        s = ShiftInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        item, review_dates = item_service.shift_review_date(
            user_id,
            item_id,
            step_number,
            data["scheduled_date"],
            data.get("today") or timezone.localdate(),
            mark_overdue_as_completed=data["mark_overdue_as_completed"],
        )

        logger.info("review_date_schedule_api_response",
            user_id=str(user_id),
            item_id=str(item_id),
            step_number=step_number,
            scheduled_date=format_date(data["scheduled_date"]),
        )
        return Response(item_payload(item, review_dates))


class ReviewDateCompletionView(views.APIView):
    def post(self, request, user_id, item_id, review_date_id):
        logger = _request_logger()

        item, review_date = item_service.complete_review_date(user_id, item_id, review_date_id)

        logger.info("review_date_completion_api_response",
            user_id=str(user_id),
            review_date_id=str(review_date_id),
            is_completed=True,
            is_finished=item.is_finished,
        )
        return Response({
            "review_date": review_date_payload(review_date),
            "is_finished": item.is_finished,
        })

    def delete(self, request, user_id, item_id, review_date_id):
        logger = _request_logger()

        item, review_date = item_service.uncomplete_review_date(user_id, item_id, review_date_id)

        logger.info("review_date_completion_api_response",
            user_id=str(user_id),
            review_date_id=str(review_date_id),
            is_completed=False,
            is_finished=item.is_finished,
        )
        return Response({
            "review_date": review_date_payload(review_date),
            "is_finished": item.is_finished,
        })


class DueReviewDatesView(views.APIView):
    def get(self, request, user_id):
        logger = _request_logger()

        qs = DueQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        until = qs.validated_data["until"]

        results = item_service.due_review_dates(user_id, until)

        logger.info(
            "due_review_dates_api_response",
            user_id=str(user_id),
            until=format_date(until),
            review_date_count=len(results),
        )

        return Response(
            {
                "user_id": str(user_id),
                "until": format_date(until),
                "review_dates": [review_date_payload(rd) for rd in results],
            }
        )


class ItemCountsView(views.APIView):
    def get(self, request, user_id):
        logger = _request_logger()

        counts = item_service.item_counts(user_id)

        logger.info("item_counts_api_response", user_id=str(user_id), unclassified=counts["unclassified"])
        return Response({
            "user_id": str(user_id),
            "by_box": count_payload(counts["by_box"]),
            "unclassified_by_category": count_payload(counts["unclassified_by_category"]),
            "unclassified": counts["unclassified"],
        })


class DailyReviewDateCountsView(views.APIView):
    def get(self, request, user_id):
        logger = _request_logger()

        qs = DailyCountQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        today = qs.validated_data.get("today") or timezone.localdate()

        counts = item_service.daily_review_date_counts(user_id, today)

        logger.info(
            "daily_review_date_counts_api_response",
            user_id=str(user_id),
            today=format_date(today),
            total=counts["total"],
        )
        return Response({
            "user_id": str(user_id),
            "today": format_date(today),
            "by_box": count_payload(counts["by_box"]),
            "unclassified_by_category": count_payload(counts["unclassified_by_category"]),
            "unclassified": counts["unclassified"],
            "total": counts["total"],
        })
