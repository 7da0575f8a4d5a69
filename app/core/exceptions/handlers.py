from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import request_logger
from app.core.exceptions.types import (
    AppException,
    NotFoundException,
    RateLimitExceededException,
    StorageException,
    SubmissionFailedException,
    SubmissionValidationException,
)


async def general_exception_handler(request: Request, exc: AppException):
    """
    Handles any application exception without a more specific handler.

    Args:
        request: The request object.
        exc (AppException): The exception instance.

    Returns:
        JSONResponse: A response with the exception's status code and message.
    """
    log = request_logger.error if exc.status_code >= 500 else request_logger.warning
    log(f"AppException on {request.url.path}: {exc}")
    content: dict = {"error": exc.message}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


async def submission_validation_exception_handler(
    request: Request, exc: SubmissionValidationException
):
    """
    Handles invalid form submissions.

    Args:
        request: The request object.
        exc (SubmissionValidationException): Carries every field error found.

    Returns:
        JSONResponse: A 400 response listing each offending field.
    """
    fields = ", ".join(error["field"] for error in exc.details or [])
    request_logger.warning(
        f"Validation failed on {request.url.path}: fields=[{fields}]"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "details": exc.details},
    )


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    """
    Handles FastAPI request parsing errors with the same body shape as
    form validation errors.

    Args:
        request: The request object.
        exc (RequestValidationError): The FastAPI validation error.

    Returns:
        JSONResponse: A 400 response listing each offending field.
    """
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        details.append(
            {
                "field": loc[-1] if loc else "body",
                "message": error.get("msg", "Invalid value"),
            }
        )
    request_logger.warning(f"Malformed request on {request.url.path}: {details}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": details},
    )


async def rate_limit_exception_handler(
    request: Request, exc: RateLimitExceededException
):
    """
    Handles rate limit exceeded exceptions by returning a JSON response.

    Args:
        request: The request object.
        exc (RateLimitExceededException): The rate limit exception instance.

    Returns:
        JSONResponse: A response with status code 429 and optional Retry-After header.
    """
    request_logger.warning(f"RateLimitExceededException on {request.url.path}: {exc}")
    headers = {}
    if exc.retry_after:
        headers["Retry-After"] = str(exc.retry_after)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=headers,
    )


async def not_found_exception_handler(request: Request, exc: NotFoundException):
    """
    Handles not found exceptions by returning a JSON response.

    Args:
        request: The request object.
        exc (NotFoundException): The not found exception instance.

    Returns:
        JSONResponse: A response containing the error message and status code 404.
    """
    request_logger.info(f"NotFoundException on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
    )


async def submission_failed_exception_handler(
    request: Request, exc: SubmissionFailedException
):
    """
    Handles submissions that passed validation but could not be stored.

    Args:
        request: The request object.
        exc (SubmissionFailedException): The exception instance.

    Returns:
        JSONResponse: A 500 response with a generic message and a hint.
    """
    request_logger.error(f"SubmissionFailedException on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "message": exc.hint},
    )


async def storage_exception_handler(request: Request, exc: StorageException):
    """
    Handles storage errors that reached the application boundary.

    The exception text may describe file paths or SQL; it is logged and
    replaced with a generic message in the response.

    Args:
        request: The request object.
        exc (StorageException): The storage exception instance.

    Returns:
        JSONResponse: A response containing a generic error and status code 500.
    """
    request_logger.error(f"StorageException on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "A storage error occurred."},
    )


exception_schema = {
    status.HTTP_400_BAD_REQUEST: {
        "description": "Validation Failed",
        "content": {
            "application/json": {
                "example": {
                    "error": "Validation failed",
                    "details": [
                        {
                            "field": "email",
                            "message": "Please enter a valid email address",
                        }
                    ],
                },
            }
        },
    },
    status.HTTP_500_INTERNAL_SERVER_ERROR: {
        "description": "Internal Server Error",
        "content": {
            "application/json": {
                "example": {
                    "error": "Failed to submit quote request",
                    "message": "Please try again later or contact us directly",
                },
            }
        },
    },
}


__all__ = [
    "general_exception_handler",
    "submission_validation_exception_handler",
    "request_validation_exception_handler",
    "rate_limit_exception_handler",
    "not_found_exception_handler",
    "submission_failed_exception_handler",
    "storage_exception_handler",
    "exception_schema",
]
