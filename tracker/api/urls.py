from django.urls import path
from .views import (
    DailyReviewDateCountsView,
    DueReviewDatesView,
    ItemCountsView,
    ItemDetailView,
    ItemFinishView,
    ItemResumeView,
    ItemsView,
    PatternsView,
    ReviewDateCompletionView,
    ReviewDateScheduleView,
)

urlpatterns = [
    path("users/<uuid:user_id>/patterns", PatternsView.as_view(), name="patterns"),
    path("users/<uuid:user_id>/items", ItemsView.as_view(), name="items"),
    path("users/<uuid:user_id>/items/counts", ItemCountsView.as_view(), name="item-counts"),
    path("users/<uuid:user_id>/items/<uuid:item_id>", ItemDetailView.as_view(), name="item-detail"),
    path("users/<uuid:user_id>/items/<uuid:item_id>/finish", ItemFinishView.as_view(), name="item-finish"),
    path("users/<uuid:user_id>/items/<uuid:item_id>/resume", ItemResumeView.as_view(), name="item-resume"),
    path(
        "users/<uuid:user_id>/items/<uuid:item_id>/review-dates/<int:step_number>/schedule",
        ReviewDateScheduleView.as_view(),
        name="review-date-schedule",
    ),
    path(
        "users/<uuid:user_id>/items/<uuid:item_id>/review-dates/<uuid:review_date_id>/completion",
        ReviewDateCompletionView.as_view(),
        name="review-date-completion",
    ),
    path("users/<uuid:user_id>/due-review-dates", DueReviewDatesView.as_view(), name="due-review-dates"),
    path(
        "users/<uuid:user_id>/daily-review-dates/counts",
        DailyReviewDateCountsView.as_view(),
        name="daily-review-date-counts",
    ),
]
