"""
Local Note Repository.

Keeps every note in a single JSON document on disk, under one fixed
storage key. The whole collection is rewritten on each mutation.

File layout:
    {"notes-app-data": [{"id": "...", "created_at": "2026-01-01T09:30:00", ...}]}

A missing file is an empty collection. An unreadable file (bad JSON,
wrong shape, records that fail validation) is logged and also treated as
an empty collection; the next write replaces it.
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Any
from uuid import uuid4

from pydantic import TypeAdapter

from notekeeper.backend.core.exceptions import NotFoundError, TransportError
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.core.utils import advance_timestamp, utc_now
from notekeeper.backend.repositories.base import NoteRepository, check_fields
from notekeeper.backend.schemas.note import NoteRecord
from notekeeper.backend.services.projection import sort_notes

logger = get_logger(__name__)

DEFAULT_STORAGE_KEY = "notes-app-data"

_records_adapter = TypeAdapter(list[NoteRecord])


class LocalNoteRepository(NoteRepository):
    """
    Repository backed by a local JSON file.

    The file is read once, on first access. Writes go to a temporary
    file that then replaces the original, and the in-memory copy only
    changes after the write succeeded.
    """

    def __init__(self, path: Path | str, storage_key: str = DEFAULT_STORAGE_KEY) -> None:
        self.path = Path(path)
        self.storage_key = storage_key
        self._notes: list[NoteRecord] | None = None

    async def get_all(self) -> list[NoteRecord]:
        return sort_notes(await self._load())

    async def get_by_id(self, note_id: str) -> NoteRecord:
        for note in await self._load():
            if note.id == note_id:
                return note
        raise NotFoundError("Note not found")

    async def create(self, **fields: Any) -> NoteRecord:
        check_fields(fields, creating=True)
        notes = await self._load()

        now = utc_now()
        note = NoteRecord.model_validate({
            **fields,
            "id": str(uuid4()),
            "created_at": now,
            "updated_at": now,
        })

        await self._save([note, *notes])
        logger.debug("Note stored locally", note_id=note.id)
        return note

    async def update(self, note_id: str, **fields: Any) -> NoteRecord:
        check_fields(fields)
        notes = await self._load()
        index = self._index_of(notes, note_id)
        current = notes[index]

        updated = NoteRecord.model_validate({
            **current.model_dump(),
            **fields,
            "updated_at": advance_timestamp(current.updated_at),
        })

        await self._save([*notes[:index], updated, *notes[index + 1:]])
        return updated

    async def delete(self, note_id: str) -> None:
        notes = await self._load()
        index = self._index_of(notes, note_id)
        await self._save([*notes[:index], *notes[index + 1:]])

    @staticmethod
    def _index_of(notes: list[NoteRecord], note_id: str) -> int:
        for index, note in enumerate(notes):
            if note.id == note_id:
                return index
        raise NotFoundError("Note not found")

    async def _load(self) -> list[NoteRecord]:
        if self._notes is None:
            self._notes = await asyncio.to_thread(self._read)
        return self._notes

    async def _save(self, notes: list[NoteRecord]) -> None:
        await asyncio.to_thread(self._write, notes)
        self._notes = notes

    def _read(self) -> list[NoteRecord]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error("Could not read notes file", path=str(self.path), error=str(e))
            raise TransportError("Could not read local notes") from e

        try:
            document = json.loads(raw.decode("utf-8"))
            if not isinstance(document, dict):
                raise ValueError("expected a JSON object at the top level")
            notes = _records_adapter.validate_python(document.get(self.storage_key, []))
        except ValueError as e:
            logger.warning(
                "Stored notes are unreadable, starting with no notes",
                path=str(self.path),
                error=str(e),
            )
            return []

        logger.debug("Loaded local notes", count=len(notes))
        return notes

    def _write(self, notes: list[NoteRecord]) -> None:
        document = {
            self.storage_key: [note.model_dump(mode="json") for note in notes],
        }
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Could not write notes file", path=str(self.path), error=str(e))
            raise TransportError("Could not save local notes") from e
