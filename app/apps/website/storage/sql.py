"""
Relational storage through SQLAlchemy.

Quote requests live in the ``quotes`` table and contact messages in
``contacts``. Each insert is a single-row INSERT, so concurrent submissions
need no extra locking.
"""

import os
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import desc, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.apps.website.forms import FormDefinition, get_form
from app.apps.website.schemas import SubmissionRecord
from app.apps.website.storage.base import SubmissionStore
from app.core.config import storage_logger
from app.core.db import (
    create_db_engine,
    create_session_factory,
    dispose_db,
    init_db,
    pool_status,
)
from app.core.enums import FormType, SubmissionStatus
from app.core.exceptions.types import DatabaseException, SubmissionNotFoundException
from app.core.services.rate_limit import Clock, utc_clock

# Largest value a signed 64-bit INTEGER primary key can hold
MAX_PRIMARY_KEY = 2**63 - 1


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SQLSubmissionStore(SubmissionStore):
    """Store backed by the ``quotes`` and ``contacts`` tables."""

    backend_name = "sql"

    def __init__(
        self,
        database_url: str | None = None,
        engine: AsyncEngine | None = None,
        clock: Clock | None = None,
    ):
        self.engine = engine or create_db_engine(database_url)
        self.session_factory = create_session_factory(self.engine)
        self._clock: Clock = clock or utc_clock

    async def init(self) -> None:
        url = self.engine.url
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            directory = os.path.dirname(url.database)
            if directory:
                os.makedirs(directory, exist_ok=True)

        try:
            await init_db(self.engine)
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseException(f"Database initialization failed: {str(e)}") from e

    async def close(self) -> None:
        await dispose_db(self.engine)

    def _to_record(self, form: FormDefinition, obj: Any) -> SubmissionRecord:
        values = {
            column.key: getattr(obj, column.key)
            for column in obj.__table__.columns
            if getattr(obj, column.key) is not None
        }
        values["id"] = str(values["id"])
        for key in ("timestamp", "created_at", "updated_at"):
            values[key] = _as_utc(values[key])
        return form.record_schema.model_validate(values)

    async def insert(self, form_type: FormType, data: dict[str, Any]) -> SubmissionRecord:
        form = get_form(form_type)
        now = self._clock()

        try:
            async with self.session_factory() as session:
                async with session.begin():
                    obj = await form.crud.create(
                        session,
                        data={
                            **data,
                            "status": SubmissionStatus.NEW.value,
                            "timestamp": now,
                            "created_at": now,
                            "updated_at": now,
                        },
                        commit_self=False,
                    )
                    record = self._to_record(form, obj)
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseException(
                f"Error storing {form_type.value} submission: {str(e)}"
            ) from e

        storage_logger.info(
            f"Stored {form_type.value} submission {record.id} in {form.collection}"
        )
        return record

    async def list_recent(self, form_type: FormType, limit: int) -> list[SubmissionRecord]:
        form = get_form(form_type)
        model = form.crud.model

        try:
            async with self.session_factory() as session:
                rows = await form.crud.get_all(
                    session,
                    order_by=[desc(model.timestamp), desc(model.id)],
                    limit=limit,
                )
                return [self._to_record(form, row) for row in rows]
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseException(
                f"Error listing {form_type.value} submissions: {str(e)}"
            ) from e

    async def find_by_id(self, form_type: FormType, submission_id: str) -> SubmissionRecord:
        form = get_form(form_type)

        try:
            primary_key = int(submission_id)
        except ValueError:
            raise SubmissionNotFoundException(
                f"No {form_type.value} submission with ID {submission_id}"
            ) from None

        if not 1 <= primary_key <= MAX_PRIMARY_KEY:
            raise SubmissionNotFoundException(
                f"No {form_type.value} submission with ID {submission_id}"
            )

        try:
            async with self.session_factory() as session:
                obj = await form.crud.get_by_id(session, primary_key)
                record = self._to_record(form, obj) if obj is not None else None
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseException(
                f"Error reading {form_type.value} submission {submission_id}: {str(e)}"
            ) from e

        if record is None:
            raise SubmissionNotFoundException(
                f"No {form_type.value} submission with ID {submission_id}"
            )
        return record

    async def health(self) -> dict[str, Any]:
        report: dict[str, Any] = {
            "status": "healthy",
            "backend": self.backend_name,
            "database": self.engine.url.get_backend_name(),
        }

        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(text("SELECT 1"))
                if result.scalar() != 1:
                    report["status"] = "unhealthy"
        except (SQLAlchemyError, OSError) as e:
            storage_logger.error(f"Database health check failed: {str(e)}")
            report["status"] = "unhealthy"

        report["pool"] = pool_status(self.engine)
        return report


__all__ = ["SQLSubmissionStore"]
