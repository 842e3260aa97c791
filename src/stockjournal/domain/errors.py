from __future__ import annotations


class AppError(Exception):
    """Base app error."""


class ValidationError(AppError):
    """Local validation failed; `issues` holds every violation found."""

    def __init__(self, issues, message: str | None = None):
        self.issues = list(issues)
        if message is None:
            message = self.issues[0].message if self.issues else "Validation failed."
        super().__init__(message)


class NotFoundError(AppError):
    pass


class SubmissionError(AppError):
    """The server rejected a request. The message is the server's, verbatim."""

    def __init__(self, message: str, status_code: int | None = None, field_errors: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.field_errors = field_errors or {}


class TransitionError(AppError):
    pass


class EntryLockedError(TransitionError):
    pass
