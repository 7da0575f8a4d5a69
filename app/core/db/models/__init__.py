from app.core.db.models.base import SubmissionModel, utc_now

__all__ = [
    "SubmissionModel",
    "utc_now",
]
