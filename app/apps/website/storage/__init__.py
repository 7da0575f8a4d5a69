"""
Submission storage backends.

Exactly one backend is active per process, chosen by STORAGE_BACKEND.
"""

from app.apps.website.storage.base import SubmissionStore
from app.apps.website.storage.document import DocumentSubmissionStore
from app.apps.website.storage.sql import SQLSubmissionStore
from app.core.config import settings
from app.core.enums import StorageBackend


def create_store(backend: StorageBackend | str | None = None) -> SubmissionStore:
    """
    Build the configured submission store.

    Args:
        backend: "document" or "sql". Defaults to settings.STORAGE_BACKEND.

    Returns:
        SubmissionStore: An uninitialized store; call ``init()`` before use.
    """
    backend = StorageBackend(backend or settings.STORAGE_BACKEND)

    if backend == StorageBackend.SQL:
        return SQLSubmissionStore(settings.DATABASE_URL)
    return DocumentSubmissionStore(settings.DATA_DIR)


__all__ = [
    "DocumentSubmissionStore",
    "SQLSubmissionStore",
    "SubmissionStore",
    "create_store",
]
