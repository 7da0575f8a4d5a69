from app.apps.website.services.notification import SubmissionNotifier
from app.apps.website.services.submission import SubmissionService
from app.apps.website.services.validation import validate_submission

__all__ = [
    "SubmissionNotifier",
    "SubmissionService",
    "validate_submission",
]
