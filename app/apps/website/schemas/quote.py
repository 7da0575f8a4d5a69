"""
Schemas for quote request endpoints.

"""

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.apps.website.schemas.fields import (
    EMAIL_MESSAGE,
    MOBILE_MESSAGE,
    NAME_LENGTH_MESSAGE,
    check_length,
    require_text,
    validate_email_address,
    validate_mobile,
    validate_name,
)
from app.core.enums import SubmissionStatus

COMPANY_MESSAGE = "Company name must be between 2 and 200 characters"
REQUIREMENTS_MESSAGE = "Requirements must be between 10 and 2000 characters"


class QuoteCreate(BaseModel):
    """Validated and normalized quote request form."""

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "name": "Jane Doe",
                "mobile": "+14155550100",
                "email": "jane@example.com",
                "company": "Acme Ltd",
                "requirements": "Need 500 units of bracket X per month",
            }
        },
    )

    # Reported when a field is missing altogether
    field_messages: ClassVar[dict[str, str]] = {
        "name": NAME_LENGTH_MESSAGE,
        "mobile": MOBILE_MESSAGE,
        "email": EMAIL_MESSAGE,
        "company": COMPANY_MESSAGE,
        "requirements": REQUIREMENTS_MESSAGE,
    }

    name: str = Field(description="Full name, letters and spaces only (2-100 chars)")
    mobile: str = Field(description="Mobile number in any regional format")
    email: str = Field(description="Contact email address")
    company: str = Field(description="Company name (2-200 chars)")
    requirements: str = Field(description="Description of the request (10-2000 chars)")

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> str:
        return validate_name(value)

    @field_validator("mobile", mode="before")
    @classmethod
    def _check_mobile(cls, value: Any) -> str:
        return validate_mobile(value)

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: Any) -> str:
        return validate_email_address(value)

    @field_validator("company", mode="before")
    @classmethod
    def _check_company(cls, value: Any) -> str:
        return check_length(
            require_text(value, COMPANY_MESSAGE), 2, 200, COMPANY_MESSAGE
        )

    @field_validator("requirements", mode="before")
    @classmethod
    def _check_requirements(cls, value: Any) -> str:
        return check_length(
            require_text(value, REQUIREMENTS_MESSAGE), 10, 2000, REQUIREMENTS_MESSAGE
        )


class QuoteRecord(BaseModel):
    """A stored quote request, as kept by every storage backend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    mobile: str
    email: str
    company: str
    requirements: str
    ip_address: str | None = None
    user_agent: str | None = None
    status: SubmissionStatus = SubmissionStatus.NEW
    timestamp: datetime
    created_at: datetime
    updated_at: datetime


class QuoteSummary(BaseModel):
    """Public list view of a quote request; contact details are left out."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    company: str
    timestamp: datetime
    status: SubmissionStatus


class QuoteDetail(QuoteSummary):
    """Full view of a quote request."""

    email: str
    mobile: str
    requirements: str


class QuoteSubmitResponse(BaseModel):
    """Response schema for a successful quote submission."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "success": True,
                "message": "Quote request submitted successfully",
                "quoteId": "42",
                "timestamp": "2026-10-18T09:30:00Z",
            }
        },
    )

    success: bool = True
    message: str = "Quote request submitted successfully"
    quote_id: str = Field(alias="quoteId")
    timestamp: datetime


class QuoteListResponse(BaseModel):
    success: bool = True
    count: int
    quotes: list[QuoteSummary]


class QuoteDetailResponse(BaseModel):
    success: bool = True
    quote: QuoteDetail


__all__ = [
    "QuoteCreate",
    "QuoteRecord",
    "QuoteSummary",
    "QuoteDetail",
    "QuoteSubmitResponse",
    "QuoteListResponse",
    "QuoteDetailResponse",
]
