"""
Contact message router.

"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request, status

from app.apps.website.dependencies import SubmissionServiceDep
from app.apps.website.schemas import (
    ContactCreate,
    ContactDetailResponse,
    ContactListResponse,
    ContactSubmitResponse,
)
from app.core.config import request_logger
from app.core.enums import FormType
from app.core.utils import get_client_address, get_user_agent

router = APIRouter(prefix="/contact")


@router.post(
    "",
    response_model=ContactSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a contact message",
    description="""
## Send Contact Message

### Rate Limiting

- **10 requests per client address per hour**

### Request Body

| Field | Type | Required | Description |
|-------|------|----------|-------------|
| `name` | string | Yes | 2-100 chars, letters and spaces only |
| `email` | string | Yes | Valid email address |
| `subject` | string | No | Max 200 chars, defaults to "General Inquiry" |
| `message` | string | Yes | 10-1000 chars |
""",
    responses={
        429: {
            "description": "Rate limit exceeded",
            "content": {
                "application/json": {
                    "example": {
                        "error": "Too many contact requests from this IP, please try again after an hour."
                    }
                }
            },
        },
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": ContactCreate.model_json_schema()}
            },
        }
    },
)
async def submit_contact(
    request: Request,
    service: SubmissionServiceDep,
    payload: Annotated[Any, Body()] = None,
) -> ContactSubmitResponse:
    """Send a new contact message."""
    client_address = get_client_address(request)
    request_logger.info(f"POST /api/contact - client={client_address}")

    record = await service.submit(
        FormType.CONTACT,
        payload,
        client_address=client_address,
        user_agent=get_user_agent(request),
    )

    request_logger.info(f"POST /api/contact - created contact={record.id}")
    return ContactSubmitResponse(contact_id=record.id, timestamp=record.timestamp)


@router.get(
    "",
    response_model=ContactListResponse,
    summary="List recent contact messages",
)
async def list_contacts(service: SubmissionServiceDep) -> ContactListResponse:
    """Most recent contact messages first, without email or message body."""
    contacts = await service.list_recent(FormType.CONTACT)
    return ContactListResponse(count=len(contacts), contacts=contacts)  # type: ignore[arg-type]


@router.get(
    "/{contact_id}",
    response_model=ContactDetailResponse,
    summary="Get a contact message",
    responses={
        404: {
            "description": "Contact not found",
            "content": {"application/json": {"example": {"error": "Contact not found"}}},
        },
    },
)
async def get_contact(
    contact_id: str, service: SubmissionServiceDep
) -> ContactDetailResponse:
    """Fetch one contact message with every submitted field."""
    contact = await service.get(FormType.CONTACT, contact_id)
    return ContactDetailResponse(contact=contact)  # type: ignore[arg-type]


__all__ = ["router"]
