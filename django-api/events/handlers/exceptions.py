"""Map domain errors to HTTP responses without leaking internals."""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from events.domain.errors import (
    CapacityExceededError,
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    TooLateError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (CapacityExceededError, status.HTTP_409_CONFLICT),
    (TooLateError, status.HTTP_400_BAD_REQUEST),
    (ValidationFailedError, status.HTTP_400_BAD_REQUEST),
)


def status_for(error: DomainError) -> int:
    for error_type, http_status in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    if isinstance(exc, DomainError):
        logger.info("Request rejected: %s", exc)
        return Response({"code": exc.code.value, "message": exc.message}, status=status_for(exc))
    return exception_handler(exc, context)
