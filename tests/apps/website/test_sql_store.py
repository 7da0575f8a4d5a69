"""
Tests for the relational store on in-memory SQLite.

"""

from unittest.mock import patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.apps.website.db.models import ContactMessage, QuoteRequest
from app.apps.website.storage import SQLSubmissionStore
from app.core.enums import FormType, SubmissionStatus
from app.core.exceptions.types import DatabaseException, SubmissionNotFoundException


def quote_data(**overrides) -> dict:
    data = {
        "name": "Jane Doe",
        "mobile": "+14155550100",
        "email": "jane@example.com",
        "company": "Acme Ltd",
        "requirements": "Need 500 units of bracket X per month",
        "ip_address": "10.0.0.1",
        "user_agent": "pytest",
    }
    data.update(overrides)
    return data


def contact_data(**overrides) -> dict:
    data = {
        "name": "John Smith",
        "email": "john@example.com",
        "subject": "General Inquiry",
        "message": "I would like to discuss a partnership.",
        "ip_address": "10.0.0.2",
        "user_agent": None,
    }
    data.update(overrides)
    return data


class TestSQLInsert:

    async def test_insert_assigns_identity_and_timestamps(self, sql_store, clock):
        first = await sql_store.insert(FormType.QUOTE, quote_data())
        second = await sql_store.insert(FormType.QUOTE, quote_data())

        assert first.id == "1"
        assert second.id == "2"
        assert first.status == SubmissionStatus.NEW
        assert first.timestamp == clock()
        assert first.timestamp.tzinfo is not None

    async def test_insert_writes_row(self, sql_store):
        record = await sql_store.insert(FormType.CONTACT, contact_data())

        async with sql_store.session_factory() as session:
            row = (
                await session.execute(
                    select(ContactMessage).where(ContactMessage.id == int(record.id))
                )
            ).scalar_one()

        assert row.email == "john@example.com"
        assert row.status == "new"
        assert row.user_agent is None

    async def test_forms_use_separate_tables(self, sql_store):
        await sql_store.insert(FormType.QUOTE, quote_data())

        async with sql_store.session_factory() as session:
            quotes = (await session.execute(select(QuoteRequest))).scalars().all()
            contacts = (await session.execute(select(ContactMessage))).scalars().all()

        assert len(quotes) == 1
        assert contacts == []

    async def test_insert_failure_raises_database_exception(self, sql_store):
        with patch.object(
            sql_store,
            "session_factory",
            side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")),
        ):
            with pytest.raises(DatabaseException):
                await sql_store.insert(FormType.QUOTE, quote_data())


class TestSQLRead:

    async def test_list_recent_newest_first_and_limited(self, sql_store, clock):
        for index in range(3):
            await sql_store.insert(FormType.QUOTE, quote_data(company=f"Company {index}"))
            clock.advance(60)

        records = await sql_store.list_recent(FormType.QUOTE, 2)

        assert [record.company for record in records] == ["Company 2", "Company 1"]

    async def test_equal_timestamps_ordered_by_id(self, sql_store):
        for index in range(3):
            await sql_store.insert(FormType.QUOTE, quote_data(company=f"Company {index}"))

        records = await sql_store.list_recent(FormType.QUOTE, 50)

        assert [record.id for record in records] == ["3", "2", "1"]

    async def test_find_by_id(self, sql_store):
        stored = await sql_store.insert(FormType.CONTACT, contact_data())

        found = await sql_store.find_by_id(FormType.CONTACT, stored.id)

        assert found.message == "I would like to discuss a partnership."
        assert found.subject == "General Inquiry"
        assert found.timestamp == stored.timestamp

    @pytest.mark.parametrize(
        "submission_id", ["99", "abc", "", "0", "-1", "9" * 25, str(2**63)]
    )
    async def test_find_by_unknown_id(self, sql_store, submission_id):
        with pytest.raises(SubmissionNotFoundException):
            await sql_store.find_by_id(FormType.QUOTE, submission_id)


class TestSQLHealth:

    async def test_health(self, sql_store):
        report = await sql_store.health()

        assert report["status"] == "healthy"
        assert report["backend"] == "sql"
        assert report["database"] == "sqlite"
        assert isinstance(report["pool"], dict)

    async def test_health_unreachable(self, sql_store):
        with patch.object(
            AsyncEngine,
            "connect",
            side_effect=OperationalError("SELECT 1", {}, Exception("unreachable")),
        ):
            report = await sql_store.health()

        assert report["status"] == "unhealthy"


class TestSQLInit:

    async def test_init_creates_sqlite_directory(self, tmp_path):
        store = SQLSubmissionStore(f"sqlite+aiosqlite:///{tmp_path}/db/website.db")

        await store.init()
        try:
            record = await store.insert(FormType.QUOTE, quote_data())
        finally:
            await store.close()

        assert (tmp_path / "db" / "website.db").exists()
        assert record.id == "1"
