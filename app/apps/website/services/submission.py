"""
Submission handling for the website forms.

A submission goes through rate limiting, validation, storage and
notification, in that order. Rate limit and validation failures stop the
pipeline before anything is stored; a storage failure is reported once and
never retried; a notification failure never changes the outcome.
"""

from typing import Any

from pydantic import BaseModel

from app.apps.website.forms import FormDefinition, get_form
from app.apps.website.schemas import SubmissionRecord
from app.apps.website.services.notification import SubmissionNotifier
from app.apps.website.services.validation import validate_submission
from app.apps.website.storage import SubmissionStore
from app.core.config import request_logger, settings
from app.core.enums import FormType
from app.core.exceptions.types import (
    AppException,
    RateLimitExceededException,
    StorageException,
    SubmissionFailedException,
    SubmissionNotFoundException,
)
from app.core.services.rate_limit import RateLimiter, format_rate_limit_key


class SubmissionService:
    """
    Orchestrates the submission pipeline and the read endpoints.

    Args:
        store: Where submissions are kept.
        rate_limiter: Shared limiter holding per-client counters.
        notifier: Receives every stored submission.
        page_size: Cap on list results. Defaults to settings.LIST_PAGE_SIZE.
    """

    def __init__(
        self,
        store: SubmissionStore,
        rate_limiter: RateLimiter,
        notifier: SubmissionNotifier,
        page_size: int | None = None,
    ):
        self.store = store
        self.rate_limiter = rate_limiter
        self.notifier = notifier
        self.page_size = page_size or settings.LIST_PAGE_SIZE

    async def _admit(self, form: FormDefinition, client_address: str) -> None:
        key = format_rate_limit_key(form.form_type.value, client_address)
        result = await self.rate_limiter.check(key, form.rate_limit, form.rate_window)
        if not result.allowed:
            raise RateLimitExceededException(
                message=form.rate_limit_message,
                retry_after=result.retry_after,
            )

    async def submit(
        self,
        form_type: FormType,
        payload: Any,
        client_address: str,
        user_agent: str | None = None,
    ) -> SubmissionRecord:
        """
        Run one submission through the pipeline.

        Args:
            form_type: The form being submitted.
            payload: The decoded request body.
            client_address: Submitter address, used for rate limiting and stored.
            user_agent: Submitter user agent, stored as-is.

        Returns:
            The stored record.

        Raises:
            RateLimitExceededException: If the client has used up its window.
            SubmissionValidationException: If any field is invalid.
            SubmissionFailedException: If the record could not be stored.
        """
        form = get_form(form_type)

        await self._admit(form, client_address)

        submission = validate_submission(form_type, payload)
        data = {
            **submission.model_dump(),
            "ip_address": client_address,
            "user_agent": user_agent,
        }

        try:
            record = await self.store.insert(form_type, data)
        except StorageException as e:
            request_logger.error(
                f"{form_type.value} submission from {client_address} not stored: {str(e)}"
            )
            raise SubmissionFailedException(form.submit_failed_message) from e

        self.notifier.dispatch(form_type, record)
        return record

    async def list_recent(self, form_type: FormType) -> list[BaseModel]:
        """Summaries of the most recent submissions, newest first."""
        form = get_form(form_type)
        try:
            records = await self.store.list_recent(form_type, self.page_size)
        except StorageException as e:
            request_logger.error(f"Listing {form.collection} failed: {str(e)}")
            raise AppException(form.list_failed_message) from e

        return [form.summary_schema.model_validate(record) for record in records]

    async def get(self, form_type: FormType, submission_id: str) -> BaseModel:
        """Full view of one submission."""
        form = get_form(form_type)
        try:
            record = await self.store.find_by_id(form_type, submission_id)
        except SubmissionNotFoundException as e:
            raise SubmissionNotFoundException(form.not_found_message) from e
        except StorageException as e:
            request_logger.error(
                f"Reading {form.collection} record {submission_id} failed: {str(e)}"
            )
            raise AppException(form.fetch_failed_message) from e

        return form.detail_schema.model_validate(record)


__all__ = ["SubmissionService"]
