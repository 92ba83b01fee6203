import logging
from datetime import datetime
from typing import Callable

from django.http import HttpRequest, HttpResponse

from apps.workflow.services.error_persistence import persist_app_error

# Get access logger configured in Django settings
access_logger = logging.getLogger("access")


class AccessLoggingMiddleware:
    """Write one tab-separated line per request to the ``access`` logger."""

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        response = self.get_response(request)

        try:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            user = getattr(request, "user", None)
            if user is not None and user.is_authenticated:
                user_label = getattr(user, "email", None) or str(user)
            else:
                user_label = "anonymous"

            access_logger.info(
                f"{timestamp}\t{request.method}\t{user_label}\t{request.path}\t{response.status_code}"
            )
        except Exception as e:
            # Log any errors that occur during logging
            access_logger.error(f"Error logging access: {e}")
            persist_app_error(e)
        return response
