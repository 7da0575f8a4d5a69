"""
Storage interface for website form submissions.

"""

from abc import ABC, abstractmethod
from typing import Any

from app.apps.website.schemas import SubmissionRecord
from app.core.enums import FormType


class SubmissionStore(ABC):
    """
    Persistence for stored submissions, one collection per form type.

    The store owns the write path: it assigns the identifier, the status
    and every timestamp. Callers pass only the validated form fields and
    the submitter's address and user agent.
    """

    backend_name: str = ""

    async def init(self) -> None:
        """Prepare the backing medium (directories, tables)."""

    async def close(self) -> None:
        """Release connections or other resources."""

    @abstractmethod
    async def insert(self, form_type: FormType, data: dict[str, Any]) -> SubmissionRecord:
        """
        Store a new submission.

        Args:
            form_type: The form the submission belongs to.
            data: Validated form fields plus ``ip_address`` and ``user_agent``.

        Returns:
            The stored record, including its new ``id`` and ``timestamp``.

        Raises:
            StorageException: If the medium is unavailable or the write fails.
        """

    @abstractmethod
    async def list_recent(self, form_type: FormType, limit: int) -> list[SubmissionRecord]:
        """
        Most recent submissions first, at most ``limit`` of them.

        Raises:
            StorageException: If the collection cannot be read.
        """

    @abstractmethod
    async def find_by_id(self, form_type: FormType, submission_id: str) -> SubmissionRecord:
        """
        Fetch one submission.

        Raises:
            SubmissionNotFoundException: If no submission has this ID.
            StorageException: If the collection cannot be read.
        """

    @abstractmethod
    async def health(self) -> dict[str, Any]:
        """Reachability of the backing medium, with backend specific gauges."""


__all__ = ["SubmissionStore"]
