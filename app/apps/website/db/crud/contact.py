"""
CRUD operations for contact messages.

"""

from app.apps.website.db.models.contact import ContactMessage
from app.core.db.crud.base import BaseDB


class ContactMessageDB(BaseDB[ContactMessage]):
    """CRUD operations for ContactMessage model."""

    def __init__(self):
        super().__init__(ContactMessage)


contact_message_db = ContactMessageDB()


__all__ = [
    "ContactMessageDB",
    "contact_message_db",
]
