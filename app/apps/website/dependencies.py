"""
Dependencies for the website routers.

"""

from typing import Annotated

from fastapi import Depends, Request

from app.apps.website.services import SubmissionService


def get_submission_service(request: Request) -> SubmissionService:
    """Return the service created during application startup."""
    return request.app.state.submission_service


SubmissionServiceDep = Annotated[SubmissionService, Depends(get_submission_service)]

__all__ = [
    "SubmissionServiceDep",
    "get_submission_service",
]
