"""
Custom DRF exception handlers for the application.
"""

import logging
from typing import Optional

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.client.exceptions import (
    ClientCodeCapacityExceeded,
    DuplicateLinkError,
    NotFoundError,
)
from apps.workflow.exceptions import AlreadyLoggedException

logger = logging.getLogger(__name__)

DOMAIN_ERROR_STATUSES = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateLinkError, status.HTTP_409_CONFLICT),
    (ClientCodeCapacityExceeded, status.HTTP_409_CONFLICT),
)


def _describe_view(context: dict) -> str:
    request = context.get("request")
    view = context.get("view")
    endpoint = request.path if request else "unknown"
    method = request.method if request else "unknown"
    view_name = (
        f"{view.__class__.__module__}.{view.__class__.__name__}" if view else "unknown"
    )
    return f"endpoint={endpoint} method={method} view={view_name}"


def custom_exception_handler(exc: Exception, context: dict) -> Optional[Response]:
    """
    Custom exception handler that turns domain errors into JSON responses.

    DRF's own exceptions keep their default handling. Domain errors raised by
    the service layer are mapped to their HTTP status and logged with the
    endpoint, method and view that raised them. Errors already persisted as
    AppError rows become 500 responses carrying the error id.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    for error_class, status_code in DOMAIN_ERROR_STATUSES:
        if isinstance(exc, error_class):
            logger.warning("%s: %s %s", error_class.__name__, exc, _describe_view(context))
            return Response(
                {"success": False, "error": str(exc)}, status=status_code
            )

    if isinstance(exc, AlreadyLoggedException):
        logger.error("Unhandled error %s %s", exc.original, _describe_view(context))
        payload = {"success": False, "error": "Internal server error"}
        payload["details"] = str(exc.original)
        if exc.app_error_id:
            payload["error_id"] = str(exc.app_error_id)
        return Response(payload, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return None
