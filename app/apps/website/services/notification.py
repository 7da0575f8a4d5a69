"""
Notification of new submissions.

Notifications only go to the notification log for now. A mail integration
would replace ``SubmissionNotifier.deliver``; nothing else changes.
"""

import asyncio

from app.apps.website.schemas import SubmissionRecord
from app.core.config import notification_logger, settings
from app.core.enums import FormType
from app.core.exceptions.types import NotificationException

NOTIFICATION_SUBJECTS = {
    FormType.QUOTE: "New Quote Request",
    FormType.CONTACT: "New Contact Message",
}

NOTIFICATION_FIELDS = {
    FormType.QUOTE: ("name", "email", "mobile", "company", "requirements"),
    FormType.CONTACT: ("name", "email", "subject", "message"),
}


def format_notification(form_type: FormType, record: SubmissionRecord) -> str:
    lines = [f"{NOTIFICATION_SUBJECTS[form_type]} ({record.id})"]
    for field in NOTIFICATION_FIELDS[form_type]:
        lines.append(f"{field.capitalize()}: {getattr(record, field)}")
    lines.append(f"Timestamp: {record.timestamp.isoformat()}")
    return "\n".join(lines)


class SubmissionNotifier:
    """
    Tells the site owner about new submissions without holding up responses.

    ``dispatch`` schedules the notification on the running event loop and
    returns immediately. Failures are logged here and never reach the
    caller.
    """

    def __init__(self, recipient: str | None = None):
        self.recipient = recipient if recipient is not None else settings.NOTIFICATION_RECIPIENT
        self._pending: set[asyncio.Task] = set()

    async def deliver(self, form_type: FormType, record: SubmissionRecord) -> None:
        """
        Send one notification.

        Raises:
            NotificationException: If no recipient is configured.
        """
        if not self.recipient:
            raise NotificationException("No notification recipient configured")

        notification_logger.info(
            f"Notification for {self.recipient}:\n{format_notification(form_type, record)}"
        )

    async def notify(self, form_type: FormType, record: SubmissionRecord) -> None:
        """Deliver a notification, logging and suppressing any failure."""
        try:
            await self.deliver(form_type, record)
        except Exception as e:
            notification_logger.error(
                f"{form_type.value.capitalize()} notification for {record.id} failed: "
                f"{type(e).__name__} - {str(e)}"
            )

    def dispatch(self, form_type: FormType, record: SubmissionRecord) -> None:
        """Schedule ``notify`` without waiting for it."""
        task = asyncio.get_running_loop().create_task(self.notify(form_type, record))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every scheduled notification to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)


__all__ = [
    "SubmissionNotifier",
    "format_notification",
]
