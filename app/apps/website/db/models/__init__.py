from app.apps.website.db.models.contact import ContactMessage
from app.apps.website.db.models.quote import QuoteRequest

__all__ = [
    "ContactMessage",
    "QuoteRequest",
]
