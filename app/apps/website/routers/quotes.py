"""
Quote request router.

"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request, status

from app.apps.website.dependencies import SubmissionServiceDep
from app.apps.website.schemas import (
    QuoteCreate,
    QuoteDetailResponse,
    QuoteListResponse,
    QuoteSubmitResponse,
)
from app.core.config import request_logger
from app.core.enums import FormType
from app.core.utils import get_client_address, get_user_agent

router = APIRouter(prefix="/quotes")


@router.post(
    "",
    response_model=QuoteSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a quote request",
    description="""
## Submit Quote Request

### Rate Limiting

- **5 requests per client address per hour**

### Request Body

| Field | Type | Required | Description |
|-------|------|----------|-------------|
| `name` | string | Yes | 2-100 chars, letters and spaces only |
| `mobile` | string | Yes | Mobile number in any regional format, stored in E.164 form |
| `email` | string | Yes | Valid email address |
| `company` | string | Yes | 2-200 chars |
| `requirements` | string | Yes | 10-2000 chars |

All invalid fields are reported together in `details`.
""",
    responses={
        429: {
            "description": "Rate limit exceeded",
            "content": {
                "application/json": {
                    "example": {
                        "error": "Too many quote requests from this IP, please try again after an hour."
                    }
                }
            },
        },
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": QuoteCreate.model_json_schema()}},
        }
    },
)
async def submit_quote(
    request: Request,
    service: SubmissionServiceDep,
    payload: Annotated[Any, Body()] = None,
) -> QuoteSubmitResponse:
    """Submit a new quote request."""
    client_address = get_client_address(request)
    request_logger.info(f"POST /api/quotes - client={client_address}")

    record = await service.submit(
        FormType.QUOTE,
        payload,
        client_address=client_address,
        user_agent=get_user_agent(request),
    )

    request_logger.info(f"POST /api/quotes - created quote={record.id}")
    return QuoteSubmitResponse(quote_id=record.id, timestamp=record.timestamp)


@router.get(
    "",
    response_model=QuoteListResponse,
    summary="List recent quote requests",
)
async def list_quotes(service: SubmissionServiceDep) -> QuoteListResponse:
    """Most recent quote requests first, without contact details."""
    quotes = await service.list_recent(FormType.QUOTE)
    return QuoteListResponse(count=len(quotes), quotes=quotes)  # type: ignore[arg-type]


@router.get(
    "/{quote_id}",
    response_model=QuoteDetailResponse,
    summary="Get a quote request",
    responses={
        404: {
            "description": "Quote not found",
            "content": {"application/json": {"example": {"error": "Quote not found"}}},
        },
    },
)
async def get_quote(quote_id: str, service: SubmissionServiceDep) -> QuoteDetailResponse:
    """Fetch one quote request with every submitted field."""
    quote = await service.get(FormType.QUOTE, quote_id)
    return QuoteDetailResponse(quote=quote)  # type: ignore[arg-type]


__all__ = ["router"]
