"""Domain error taxonomy shared by services and the HTTP layer."""
from __future__ import annotations


class AppError(Exception):
    """Base class for errors raised deliberately by the application."""

    code = "APP_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Caller-supplied input failed a precondition."""

    code = "VALIDATION_ERROR"


class NotFoundError(AppError):
    """A referenced record does not exist or belongs to someone else."""

    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: object) -> None:
        super().__init__(f"{resource} with id {identifier} not found")
        self.resource = resource
        self.identifier = identifier


class UnauthorizedError(AppError):
    """No authenticated identity where one is required."""

    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class ForbiddenError(AppError):
    """The caller is authenticated but lacks the required role."""

    code = "FORBIDDEN"

    def __init__(self, message: str = "Admin access required") -> None:
        super().__init__(message)
