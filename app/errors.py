"""
Error types raised by the task store and rendered by the API layer.

Each error carries the HTTP status code it maps to, so the application
factory can register a single handler for the whole family.
"""


class TaskError(Exception):
    """Base class for all task-related failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskError):
    """Malformed or missing required input."""

    status_code = 400


class NotFound(TaskError):
    """No task exists for the given identifier."""

    status_code = 404


class InvalidId(TaskError):
    """The identifier is not in the expected format."""

    # Malformed ids can never name a stored task, so they read as missing.
    status_code = 404


class StoreUnavailable(TaskError):
    """The backing store is unreachable or timed out."""

    status_code = 500
