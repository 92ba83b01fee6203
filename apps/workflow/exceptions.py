from typing import Optional
from uuid import UUID


class AlreadyLoggedException(Exception):
    """Exception wrapper raised once the original error is stored as an AppError.

    Outer layers catch this and re-raise it untouched, so a failure is
    persisted exactly once however many service calls it passes through.

    Args:
        original: The exception that was persisted.
        app_error_id: Primary key of the stored AppError, if any.
    """

    def __init__(self, original: Exception, app_error_id: Optional[UUID]) -> None:
        self.original = original
        self.app_error_id = app_error_id
        super().__init__(str(original))
