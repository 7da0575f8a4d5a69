"""
Per-form configuration for the website submission pipeline.

Each form type has its own schema, storage collection, rate limit policy
and user-facing messages. Everything downstream looks them up here instead
of branching on the form type.
"""

from dataclasses import dataclass
from typing import Type

from pydantic import BaseModel

from app.apps.website.db.crud import contact_message_db, quote_request_db
from app.apps.website.schemas import (
    ContactCreate,
    ContactDetail,
    ContactRecord,
    ContactSummary,
    QuoteCreate,
    QuoteDetail,
    QuoteRecord,
    QuoteSummary,
)
from app.core.config import settings
from app.core.db.crud import BaseDB
from app.core.enums import FormType


@dataclass(frozen=True)
class FormDefinition:
    """
    Static description of one website form.

    Attributes:
        form_type: The form this definition describes.
        collection: JSON document name and SQL table name.
        create_schema: Schema validating a raw submission.
        record_schema: Schema of a stored record.
        summary_schema: Public list view of a record.
        detail_schema: Full view of a record.
        crud: Relational CRUD helper for the form's table.
        rate_limit: Maximum submissions per client within the window.
        rate_window: Rate limit window in seconds.
        rate_limit_message: Error returned once the limit is reached.
        submit_failed_message: Error returned when a submission cannot be stored.
        list_failed_message: Error returned when records cannot be listed.
        fetch_failed_message: Error returned when a record cannot be read.
        not_found_message: Error returned for an unknown ID.
    """

    form_type: FormType
    collection: str
    create_schema: Type[BaseModel]
    record_schema: Type[BaseModel]
    summary_schema: Type[BaseModel]
    detail_schema: Type[BaseModel]
    crud: BaseDB
    rate_limit: int
    rate_window: int
    rate_limit_message: str
    submit_failed_message: str
    list_failed_message: str
    fetch_failed_message: str
    not_found_message: str


FORMS: dict[FormType, FormDefinition] = {
    FormType.QUOTE: FormDefinition(
        form_type=FormType.QUOTE,
        collection="quotes",
        create_schema=QuoteCreate,
        record_schema=QuoteRecord,
        summary_schema=QuoteSummary,
        detail_schema=QuoteDetail,
        crud=quote_request_db,
        rate_limit=settings.QUOTE_RATE_LIMIT_REQUESTS,
        rate_window=settings.QUOTE_RATE_LIMIT_WINDOW,
        rate_limit_message=(
            "Too many quote requests from this IP, please try again after an hour."
        ),
        submit_failed_message="Failed to submit quote request",
        list_failed_message="Failed to fetch quotes",
        fetch_failed_message="Failed to fetch quote",
        not_found_message="Quote not found",
    ),
    FormType.CONTACT: FormDefinition(
        form_type=FormType.CONTACT,
        collection="contacts",
        create_schema=ContactCreate,
        record_schema=ContactRecord,
        summary_schema=ContactSummary,
        detail_schema=ContactDetail,
        crud=contact_message_db,
        rate_limit=settings.CONTACT_RATE_LIMIT_REQUESTS,
        rate_window=settings.CONTACT_RATE_LIMIT_WINDOW,
        rate_limit_message=(
            "Too many contact requests from this IP, please try again after an hour."
        ),
        submit_failed_message="Failed to send contact message",
        list_failed_message="Failed to fetch contacts",
        fetch_failed_message="Failed to fetch contact",
        not_found_message="Contact not found",
    ),
}


def get_form(form_type: FormType) -> FormDefinition:
    return FORMS[form_type]


__all__ = [
    "FORMS",
    "FormDefinition",
    "get_form",
]
