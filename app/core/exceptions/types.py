from fastapi import status


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | list | None = None,
    ):
        self.message = message
        self.status_code = status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
        self.details = details
        super().__init__(message)


class SubmissionValidationException(AppException):
    """Exception raised when a submitted form has one or more invalid fields."""

    def __init__(
        self,
        details: list[dict[str, str]],
        message: str = "Validation failed",
    ):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class RateLimitExceededException(AppException):
    """Exception raised when a client submits a form too often."""

    def __init__(
        self,
        message: str = "Rate limit exceeded. Please try again later.",
        retry_after: int | None = None,
    ):
        super().__init__(message, status.HTTP_429_TOO_MANY_REQUESTS)
        self.retry_after = retry_after


class StorageException(AppException):
    """Exception raised when the submission store cannot complete an operation."""

    def __init__(self, message: str = "A storage error occurred."):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class DatabaseException(StorageException):
    """Exception raised for relational database errors."""

    def __init__(self, message: str = "A database error occurred."):
        super().__init__(message)


class SubmissionFailedException(AppException):
    """Exception raised when an accepted submission could not be saved."""

    def __init__(
        self,
        message: str = "Failed to submit form",
        hint: str = "Please try again later or contact us directly",
    ):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.hint = hint


class NotFoundException(AppException):
    """Exception raised when a resource is not found."""

    def __init__(self, message: str = "Resource not found."):
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class SubmissionNotFoundException(NotFoundException):
    """Exception raised when no stored submission has the requested ID."""

    def __init__(self, message: str = "Submission not found."):
        super().__init__(message)


class NotificationException(AppException):
    """Exception raised when a submission notification cannot be delivered."""

    def __init__(self, message: str = "Notification delivery failed."):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


__all__ = [
    "AppException",
    "SubmissionValidationException",
    "RateLimitExceededException",
    "StorageException",
    "DatabaseException",
    "SubmissionFailedException",
    "NotFoundException",
    "SubmissionNotFoundException",
    "NotificationException",
]
