from enum import Enum


class FormType(str, Enum):
    """Website form a submission came from."""

    QUOTE = "quote"
    CONTACT = "contact"


class SubmissionStatus(str, Enum):
    """Follow-up status of a stored submission."""

    NEW = "new"
    CONTACTED = "contacted"
    CLOSED = "closed"


class StorageBackend(str, Enum):
    """Backing medium for stored submissions."""

    DOCUMENT = "document"  # One JSON file per form type
    SQL = "sql"  # Relational tables via SQLAlchemy
