"""
JSON document storage.

Each form type is kept as one JSON array in ``<data_dir>/<collection>.json``.
Every insert reads the whole array, appends to it and rewrites the file.
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Any
from uuid import uuid4

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from app.apps.website.forms import get_form
from app.apps.website.schemas import SubmissionRecord
from app.apps.website.storage.base import SubmissionStore
from app.core.config import storage_logger
from app.core.enums import FormType, SubmissionStatus
from app.core.exceptions.types import StorageException, SubmissionNotFoundException
from app.core.services.rate_limit import Clock, utc_clock


class DocumentSubmissionStore(SubmissionStore):
    """
    Flat-file store for low volume, single process deployments.

    Writes for the same form type are serialized by an in-process lock and
    land through a temporary file plus ``os.replace``, so readers never see
    a partially written document. Several processes writing the same file
    can still overwrite each other's inserts.
    """

    backend_name = "document"

    def __init__(self, data_dir: str | Path, clock: Clock | None = None):
        self.data_dir = Path(data_dir)
        self._clock: Clock = clock or utc_clock
        self._locks: dict[FormType, asyncio.Lock] = {
            form_type: asyncio.Lock() for form_type in FormType
        }

    def path_for(self, form_type: FormType) -> Path:
        return self.data_dir / f"{get_form(form_type).collection}.json"

    async def init(self) -> None:
        try:
            await aiofiles.os.makedirs(self.data_dir, exist_ok=True)
        except OSError as e:
            raise StorageException(
                f"Error creating data directory {self.data_dir}: {str(e)}"
            ) from e
        storage_logger.info(f"Document store ready in {self.data_dir}")

    async def _read(self, form_type: FormType) -> list[dict[str, Any]]:
        path = self.path_for(form_type)
        try:
            async with aiofiles.open(path, mode="r", encoding="utf-8") as file:
                raw = await file.read()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageException(f"Error reading {path}: {str(e)}") from e

        if not raw.strip():
            return []

        try:
            documents = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageException(f"Corrupt document {path}: {str(e)}") from e

        if not isinstance(documents, list):
            raise StorageException(f"Corrupt document {path}: expected a JSON array")
        return documents

    async def _write(self, form_type: FormType, documents: list[dict[str, Any]]) -> None:
        path = self.path_for(form_type)
        tmp_path = path.with_name(f"{path.name}.tmp")
        try:
            await aiofiles.os.makedirs(self.data_dir, exist_ok=True)
            async with aiofiles.open(tmp_path, mode="w", encoding="utf-8") as file:
                await file.write(json.dumps(documents, indent=2, ensure_ascii=False))
            await aiofiles.os.replace(tmp_path, path)
        except OSError as e:
            raise StorageException(f"Error writing {path}: {str(e)}") from e

    def _parse(self, form_type: FormType, document: dict[str, Any]) -> SubmissionRecord:
        try:
            return get_form(form_type).record_schema.model_validate(document)
        except ValidationError as e:
            raise StorageException(
                f"Malformed {form_type.value} document {document.get('id')}: {str(e)}"
            ) from e

    async def insert(self, form_type: FormType, data: dict[str, Any]) -> SubmissionRecord:
        form = get_form(form_type)
        now = self._clock()
        record = form.record_schema.model_validate(
            {
                **data,
                "id": uuid4().hex,
                "status": SubmissionStatus.NEW,
                "timestamp": now,
                "created_at": now,
                "updated_at": now,
            }
        )

        async with self._locks[form_type]:
            documents = await self._read(form_type)
            documents.append(record.model_dump(mode="json", by_alias=True))
            await self._write(form_type, documents)

        storage_logger.info(
            f"Stored {form_type.value} submission {record.id} "
            f"({len(documents)} in {self.path_for(form_type).name})"
        )
        return record

    async def list_recent(self, form_type: FormType, limit: int) -> list[SubmissionRecord]:
        # Documents are appended, so a later position breaks timestamp ties
        records = [
            self._parse(form_type, document) for document in await self._read(form_type)
        ]
        ordered = sorted(
            enumerate(records),
            key=lambda item: (item[1].timestamp, item[0]),
            reverse=True,
        )
        return [record for _, record in ordered[:limit]]

    async def find_by_id(self, form_type: FormType, submission_id: str) -> SubmissionRecord:
        for document in await self._read(form_type):
            if str(document.get("id")) == submission_id:
                return self._parse(form_type, document)

        raise SubmissionNotFoundException(
            f"No {form_type.value} submission with ID {submission_id}"
        )

    async def health(self) -> dict[str, Any]:
        directory = self.data_dir if self.data_dir.exists() else self.data_dir.parent
        writable = os.access(directory, os.W_OK)
        return {
            "status": "healthy" if writable else "unhealthy",
            "backend": self.backend_name,
            "data_dir": str(self.data_dir),
            "writable": writable,
        }


__all__ = ["DocumentSubmissionStore"]
