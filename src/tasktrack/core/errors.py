# src/tasktrack/core/errors.py

"""
Service-level error taxonomy.

Services raise these at the point of violation; the interactive front-end is
the only place that turns them into text. Storage errors (sqlalchemy.exc.DBAPIError) are
not wrapped and propagate as-is.
"""

from __future__ import annotations


class TaskTrackError(Exception):
    """Base class for every error the services raise on purpose."""

    default_message = "Operation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0])


class ValidationError(TaskTrackError):
    default_message = "Invalid input"


class DuplicateIdentityError(TaskTrackError):
    default_message = "Username already exists"


class AuthenticationError(TaskTrackError):
    # Unknown user and wrong password must read the same.
    default_message = "Invalid username or password"

    def __init__(self) -> None:
        super().__init__(self.default_message)


class NotFoundOrUnauthorized(TaskTrackError):
    # Missing task and someone else's task must read the same.
    default_message = "Task not found or unauthorized"

    def __init__(self) -> None:
        super().__init__(self.default_message)


class DeletedTaskError(TaskTrackError):
    default_message = "Cannot modify deleted task"


class InvalidTransitionError(TaskTrackError):
    default_message = "Task can only be resumed from Ready to Pick or Blocked status"
