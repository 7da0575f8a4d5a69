"""
Schemas for contact message endpoints.

"""

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from app.apps.website.schemas.fields import (
    EMAIL_MESSAGE,
    NAME_LENGTH_MESSAGE,
    check_length,
    require_text,
    validate_email_address,
    validate_name,
)
from app.core.enums import SubmissionStatus

DEFAULT_SUBJECT = "General Inquiry"
SUBJECT_MESSAGE = "Subject must be less than 200 characters"
MESSAGE_MESSAGE = "Message must be between 10 and 1000 characters"


class ContactCreate(BaseModel):
    """Validated and normalized contact form."""

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "name": "John Smith",
                "email": "john@example.com",
                "subject": "Partnership",
                "message": "I would like to discuss a distribution partnership.",
            }
        },
    )

    field_messages: ClassVar[dict[str, str]] = {
        "name": NAME_LENGTH_MESSAGE,
        "email": EMAIL_MESSAGE,
        "subject": SUBJECT_MESSAGE,
        "message": MESSAGE_MESSAGE,
    }

    name: str = Field(description="Full name, letters and spaces only (2-100 chars)")
    email: str = Field(description="Contact email address")
    subject: str = Field(
        default=DEFAULT_SUBJECT,
        validate_default=True,
        description=f"Optional subject (max 200 chars), defaults to '{DEFAULT_SUBJECT}'",
    )
    message: str = Field(description="Message body (10-1000 chars)")

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> str:
        return validate_name(value)

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: Any) -> str:
        return validate_email_address(value)

    @field_validator("subject", mode="before")
    @classmethod
    def _check_subject(cls, value: Any) -> str:
        if value is None:
            return DEFAULT_SUBJECT
        subject = require_text(value, SUBJECT_MESSAGE)
        if not subject:
            return DEFAULT_SUBJECT
        if len(subject) > 200:
            raise PydanticCustomError("invalid_length", SUBJECT_MESSAGE)
        return subject

    @field_validator("message", mode="before")
    @classmethod
    def _check_message(cls, value: Any) -> str:
        return check_length(
            require_text(value, MESSAGE_MESSAGE), 10, 1000, MESSAGE_MESSAGE
        )


class ContactRecord(BaseModel):
    """A stored contact message, as kept by every storage backend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    email: str
    subject: str = DEFAULT_SUBJECT
    message: str
    ip_address: str | None = None
    user_agent: str | None = None
    status: SubmissionStatus = SubmissionStatus.NEW
    timestamp: datetime
    created_at: datetime
    updated_at: datetime


class ContactSummary(BaseModel):
    """Public list view of a contact message; email and body are left out."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    subject: str
    timestamp: datetime
    status: SubmissionStatus


class ContactDetail(ContactSummary):
    """Full view of a contact message."""

    email: str
    message: str


class ContactSubmitResponse(BaseModel):
    """Response schema for a successful contact submission."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "success": True,
                "message": "Contact message sent successfully",
                "contactId": "7",
                "timestamp": "2026-10-18T09:30:00Z",
            }
        },
    )

    success: bool = True
    message: str = "Contact message sent successfully"
    contact_id: str = Field(alias="contactId")
    timestamp: datetime


class ContactListResponse(BaseModel):
    success: bool = True
    count: int
    contacts: list[ContactSummary]


class ContactDetailResponse(BaseModel):
    success: bool = True
    contact: ContactDetail


__all__ = [
    "DEFAULT_SUBJECT",
    "ContactCreate",
    "ContactRecord",
    "ContactSummary",
    "ContactDetail",
    "ContactSubmitResponse",
    "ContactListResponse",
    "ContactDetailResponse",
]
