from __future__ import annotations


class TaskTrackerError(Exception):
    """Base error carrying a client-safe message and the HTTP status it maps to."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskTrackerError):
    status_code = 400


class NotFoundError(TaskTrackerError):
    status_code = 404


class PersistenceError(TaskTrackerError):
    """Storage or connection failure. The cause is logged, never returned."""

    status_code = 500
