from django.core.exceptions import ObjectDoesNotExist
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from ..domain import errors

ERROR_STATUS = {
    errors.ValidationError: status.HTTP_400_BAD_REQUEST,
    errors.NoDiff: status.HTTP_400_BAD_REQUEST,
    errors.NewDateBeforeInitial: status.HTTP_400_BAD_REQUEST,
    errors.HasCompletedReviewDate: status.HTTP_409_CONFLICT,
    errors.MismatchedIdsAndSteps: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def tracker_exception_handler(exc, context):
    """Turn rejected tracker operations and missing rows into JSON errors."""
    if isinstance(exc, errors.TrackerError):
        body = {"error": str(exc), "code": type(exc).__name__}
        if isinstance(exc, errors.ValidationError):
            body["field"] = exc.field
        return Response(body, status=ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST))

    if isinstance(exc, ObjectDoesNotExist):
        return Response({"error": str(exc) or "not found"}, status=status.HTTP_404_NOT_FOUND)

    return exception_handler(exc, context)
