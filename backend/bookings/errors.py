"""Translate booking service errors into API responses."""

from rest_framework import status
from rest_framework.response import Response

from services.booking_management.exceptions import (
    BookingError,
    ValidationError,
    NotFoundError,
    InvalidTransitionError,
    TransientStorageError,
)

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (TransientStorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def booking_error_response(exc: BookingError) -> Response:
    """Error kind and reason only; no internal details reach the client."""
    body = {
        'success': False,
        'error': exc.code,
        'message': exc.message,
    }
    if isinstance(exc, InvalidTransitionError):
        body['current_status'] = exc.current
        body['attempted_status'] = exc.attempted

    http_status = status.HTTP_400_BAD_REQUEST
    for error_class, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            http_status = code
            break
    return Response(body, status=http_status)
