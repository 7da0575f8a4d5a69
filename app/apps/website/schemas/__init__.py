"""
Schemas for the website form endpoints.

"""

from app.apps.website.schemas.contact import (
    DEFAULT_SUBJECT,
    ContactCreate,
    ContactDetail,
    ContactDetailResponse,
    ContactListResponse,
    ContactRecord,
    ContactSubmitResponse,
    ContactSummary,
)
from app.apps.website.schemas.quote import (
    QuoteCreate,
    QuoteDetail,
    QuoteDetailResponse,
    QuoteListResponse,
    QuoteRecord,
    QuoteSubmitResponse,
    QuoteSummary,
)

SubmissionCreate = QuoteCreate | ContactCreate
SubmissionRecord = QuoteRecord | ContactRecord

__all__ = [
    "DEFAULT_SUBJECT",
    "ContactCreate",
    "ContactDetail",
    "ContactDetailResponse",
    "ContactListResponse",
    "ContactRecord",
    "ContactSubmitResponse",
    "ContactSummary",
    "QuoteCreate",
    "QuoteDetail",
    "QuoteDetailResponse",
    "QuoteListResponse",
    "QuoteRecord",
    "QuoteSubmitResponse",
    "QuoteSummary",
    "SubmissionCreate",
    "SubmissionRecord",
]
