from app.apps.website.db.crud.contact import ContactMessageDB, contact_message_db
from app.apps.website.db.crud.quote import QuoteRequestDB, quote_request_db

__all__ = [
    "ContactMessageDB",
    "QuoteRequestDB",
    "contact_message_db",
    "quote_request_db",
]
