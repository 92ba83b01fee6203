import inspect
import logging
import traceback
from pathlib import Path
from typing import NoReturn

from apps.workflow.exceptions import AlreadyLoggedException
from apps.workflow.models import AppError

logger = logging.getLogger(__name__)


def _extract_caller_context(depth: int = 2):
    """Automatically extract context from the calling function.

    ``depth`` counts frames above this helper: 2 is the caller of the public
    function that invoked it.
    """
    frame = inspect.currentframe()
    try:
        caller_frame = frame
        for _ in range(depth):
            caller_frame = caller_frame.f_back

        # Get file path and extract relative path from project root
        file_path = Path(caller_frame.f_code.co_filename)

        # Extract app name from path (e.g., apps/client/services/x.py -> client)
        parts = file_path.parts
        if "apps" in parts:
            app_index = parts.index("apps")
            if len(parts) > app_index + 1:
                app_name = parts[app_index + 1]
            else:
                app_name = None
        else:
            app_name = None

        # Get relative file path from apps directory
        if "apps" in parts:
            app_index = parts.index("apps")
            relative_file = "/".join(parts[app_index + 1 :])
        else:
            relative_file = file_path.name

        function_name = caller_frame.f_code.co_name

        return {"app": app_name, "file": relative_file, "function": function_name}
    finally:
        del frame


def extract_request_context(request):
    """Extract context from Django request object."""
    user = getattr(request, "user", None)
    return {
        "user": str(user) if user and user.is_authenticated else None,
        "request_path": request.path,
        "request_method": request.method,
    }


def persist_app_error(
    exception: Exception,
    app: str = None,
    file: str = None,
    function: str = None,
    severity: int = logging.ERROR,
    client_id: str = None,
    contact_id: str = None,
    additional_context: dict = None,
    _caller_depth: int = 2,
) -> AppError:
    """Create and save an AppError with enhanced context.

    The app, file, and function parameters are automatically extracted from the calling code.
    If the auto-extraction doesn't work correctly, you can override by providing these parameters explicitly.

    Args:
        exception: The exception to persist
        app: App name (auto-extracted from file path if not provided)
        file: File path (auto-extracted from caller if not provided)
        function: Function name (auto-extracted from caller if not provided)
        severity: Logging severity level (default: logging.ERROR)
        client_id: Client UUID for client-related errors
        contact_id: Contact UUID for contact-related errors
        additional_context: Additional context data to store in JSON field

    Returns:
        Created AppError instance
    """
    caller_context = _extract_caller_context(_caller_depth)

    context_data = {"trace": traceback.format_exc()}
    if additional_context:
        context_data.update(additional_context)

    return AppError.objects.create(
        message=str(exception),
        data=context_data,
        app=app or caller_context["app"],
        file=file or caller_context["file"],
        function=function or caller_context["function"],
        severity=severity,
        client_id=client_id,
        contact_id=contact_id,
    )


def persist_and_raise(exception: Exception, **kwargs) -> NoReturn:
    """Persist ``exception`` as an AppError, then raise it wrapped once-logged.

    Accepts the same keyword arguments as :func:`persist_app_error`.
    """
    app_error = persist_app_error(exception, _caller_depth=3, **kwargs)
    logger.error(
        "Persisted AppError %s: %s", app_error.id, exception, exc_info=exception
    )
    raise AlreadyLoggedException(exception, app_error.id) from exception
