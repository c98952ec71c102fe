"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_USERNAME = "INVALID_USERNAME"

    # Upstream (GitHub) errors, status passed through
    UPSTREAM_NOT_FOUND = "UPSTREAM_NOT_FOUND"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"
    PARTIAL_LISTING = "PARTIAL_LISTING"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class InvalidUsernameError(AppException):
    """Username is not a valid GitHub login."""

    def __init__(self, username: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_USERNAME,
            message=f"Invalid GitHub username: {username!r}",
            status_code=400,
            details={"username": username},
        )


class UpstreamNotFoundError(AppException):
    """The profile source has no user with this name."""

    def __init__(self, username: str, status_code: int = 404) -> None:
        super().__init__(
            error_code=ErrorCode.UPSTREAM_NOT_FOUND,
            message=f"GitHub user not found: {username}",
            status_code=status_code,
            details={"username": username},
        )


class UpstreamError(AppException):
    """The profile source was reachable but failed, or could not be reached."""

    def __init__(
        self,
        message: str = "GitHub API error",
        status_code: int = 502,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=ErrorCode.UPSTREAM_ERROR,
            message=message,
            status_code=status_code,
            details=details,
        )


class StorageError(AppException):
    """Object store or metadata store operation failed."""

    def __init__(self, operation: str, message: str = "Storage operation failed") -> None:
        super().__init__(
            error_code=ErrorCode.STORAGE_ERROR,
            message=f"{message} ({operation})",
            status_code=500,
            details={"operation": operation},
        )
        self.operation = operation


class PartialListingError(AppException):
    """A single gallery entry could not be hydrated.

    Returned per record by the gallery fan-out; it never fails the
    listing as a whole.
    """

    def __init__(self, username: str, cause: BaseException) -> None:
        super().__init__(
            error_code=ErrorCode.PARTIAL_LISTING,
            message=f"Could not sign avatar URL for {username}",
            status_code=500,
            details={"username": username, "cause": type(cause).__name__},
        )
        self.username = username
        self.cause = cause
