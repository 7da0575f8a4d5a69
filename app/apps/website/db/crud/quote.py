"""
CRUD operations for quote requests.

"""

from app.apps.website.db.models.quote import QuoteRequest
from app.core.db.crud.base import BaseDB


class QuoteRequestDB(BaseDB[QuoteRequest]):
    """CRUD operations for QuoteRequest model."""

    def __init__(self):
        super().__init__(QuoteRequest)


quote_request_db = QuoteRequestDB()


__all__ = [
    "QuoteRequestDB",
    "quote_request_db",
]
