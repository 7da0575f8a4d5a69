"""
Tests for the submission pipeline: rate limit, validate, store, notify.

"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.apps.website.schemas import ContactSummary, QuoteDetail, QuoteSummary
from app.apps.website.services import SubmissionService
from app.core.enums import FormType
from app.core.exceptions.types import (
    AppException,
    DatabaseException,
    RateLimitExceededException,
    StorageException,
    SubmissionFailedException,
    SubmissionNotFoundException,
    SubmissionValidationException,
)


class TestSubmit:

    async def test_submit_stores_and_notifies(self, submission_service, quote_payload):
        with patch.object(submission_service.notifier, "dispatch") as mock_dispatch:
            record = await submission_service.submit(
                FormType.QUOTE, quote_payload, client_address="10.0.0.1", user_agent="pytest"
            )

        assert record.ip_address == "10.0.0.1"
        assert record.user_agent == "pytest"
        mock_dispatch.assert_called_once_with(FormType.QUOTE, record)
        stored = await submission_service.store.find_by_id(FormType.QUOTE, record.id)
        assert stored.company == "Acme Ltd"

    async def test_sixth_quote_is_rate_limited(self, submission_service, quote_payload):
        for _ in range(5):
            await submission_service.submit(FormType.QUOTE, quote_payload, "10.0.0.1")

        with pytest.raises(RateLimitExceededException) as exc_info:
            await submission_service.submit(FormType.QUOTE, quote_payload, "10.0.0.1")

        assert exc_info.value.message == (
            "Too many quote requests from this IP, please try again after an hour."
        )
        assert exc_info.value.retry_after == 3600

    async def test_rate_limit_applies_before_validation(self, submission_service):
        for _ in range(10):
            with pytest.raises(SubmissionValidationException):
                await submission_service.submit(FormType.CONTACT, {}, "10.0.0.1")

        with pytest.raises(RateLimitExceededException):
            await submission_service.submit(FormType.CONTACT, {}, "10.0.0.1")

    async def test_limits_are_per_form_and_address(
        self, submission_service, quote_payload, contact_payload
    ):
        for _ in range(5):
            await submission_service.submit(FormType.QUOTE, quote_payload, "10.0.0.1")

        await submission_service.submit(FormType.QUOTE, quote_payload, "10.0.0.2")
        await submission_service.submit(FormType.CONTACT, contact_payload, "10.0.0.1")

    async def test_invalid_submission_is_not_stored(self, submission_service):
        with pytest.raises(SubmissionValidationException):
            await submission_service.submit(
                FormType.CONTACT,
                {"name": "A", "email": "bad-email", "message": "hi"},
                "10.0.0.1",
            )

        assert await submission_service.store.list_recent(FormType.CONTACT, 50) == []

    async def test_storage_failure_becomes_submission_failed(
        self, submission_service, quote_payload
    ):
        submission_service.notifier.dispatch = MagicMock()
        with patch.object(
            submission_service.store,
            "insert",
            new=AsyncMock(side_effect=StorageException("disk full")),
        ):
            with pytest.raises(SubmissionFailedException) as exc_info:
                await submission_service.submit(FormType.QUOTE, quote_payload, "10.0.0.1")

        assert exc_info.value.message == "Failed to submit quote request"
        assert exc_info.value.hint == "Please try again later or contact us directly"
        submission_service.notifier.dispatch.assert_not_called()

    async def test_notification_failure_does_not_change_outcome(
        self, submission_service, contact_payload
    ):
        with patch.object(
            submission_service.notifier,
            "deliver",
            new=AsyncMock(side_effect=RuntimeError("smtp down")),
        ):
            record = await submission_service.submit(
                FormType.CONTACT, contact_payload, "10.0.0.1"
            )
            await submission_service.notifier.drain()

        assert record.id


class TestRead:

    async def test_list_recent_returns_summaries(
        self, submission_service, quote_payload, contact_payload
    ):
        await submission_service.submit(FormType.QUOTE, quote_payload, "10.0.0.1")
        await submission_service.submit(FormType.CONTACT, contact_payload, "10.0.0.1")

        quotes = await submission_service.list_recent(FormType.QUOTE)
        contacts = await submission_service.list_recent(FormType.CONTACT)

        assert isinstance(quotes[0], QuoteSummary)
        assert set(quotes[0].model_dump()) == {"id", "name", "company", "timestamp", "status"}
        assert isinstance(contacts[0], ContactSummary)
        assert set(contacts[0].model_dump()) == {"id", "name", "subject", "timestamp", "status"}

    async def test_list_recent_respects_page_size(
        self, document_store, rate_limiter, notifier, quote_payload
    ):
        service = SubmissionService(document_store, rate_limiter, notifier, page_size=2)
        for address in ("10.0.0.1", "10.0.0.2", "10.0.0.3"):
            await service.submit(FormType.QUOTE, quote_payload, address)

        assert len(await service.list_recent(FormType.QUOTE)) == 2

    async def test_get_returns_detail(self, submission_service, quote_payload):
        record = await submission_service.submit(FormType.QUOTE, quote_payload, "10.0.0.1")

        detail = await submission_service.get(FormType.QUOTE, record.id)

        assert isinstance(detail, QuoteDetail)
        assert detail.requirements == quote_payload["requirements"]
        assert not hasattr(detail, "ip_address")

    async def test_get_unknown_id(self, submission_service):
        with pytest.raises(SubmissionNotFoundException) as exc_info:
            await submission_service.get(FormType.CONTACT, "missing")

        assert exc_info.value.message == "Contact not found"

    async def test_read_failures_are_reported_generically(self, submission_service):
        with patch.object(
            submission_service.store,
            "list_recent",
            new=AsyncMock(side_effect=DatabaseException("connection refused")),
        ):
            with pytest.raises(AppException) as exc_info:
                await submission_service.list_recent(FormType.QUOTE)

        assert exc_info.value.message == "Failed to fetch quotes"
        assert exc_info.value.status_code == 500

        with patch.object(
            submission_service.store,
            "find_by_id",
            new=AsyncMock(side_effect=StorageException("corrupt")),
        ):
            with pytest.raises(AppException) as exc_info:
                await submission_service.get(FormType.QUOTE, "1")

        assert exc_info.value.message == "Failed to fetch quote"
