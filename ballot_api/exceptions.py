"""Error types raised by the ballot API and mapped to HTTP responses in main.py."""

from typing import Optional


class BallotError(Exception):
    """Base class for all errors that end a request with an ``{"error": ...}`` body."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(BallotError):
    """Raised when a candidate or user does not exist."""

    status_code = 404

    def __init__(self, entity_type: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"{entity_type.capitalize()} not found")
        self.entity_type = entity_type


class AlreadyVotedError(BallotError):
    status_code = 400

    def __init__(self, message: str = "User has already voted") -> None:
        super().__init__(message)


class ForbiddenError(BallotError):
    """Raised when the caller lacks the role an operation needs."""

    status_code = 403


class AuthenticationError(BallotError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class PayloadValidationError(BallotError):
    """Raised when a request body fails validation."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[list] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class InternalError(BallotError):
    status_code = 500

    def __init__(self, message: str = "Internal Server Error") -> None:
        super().__init__(message)
