"""
Database Note Repository.

Data access for the authenticated variant. Every query is scoped to the
owner the repository was built for; another user's notes behave exactly
like missing ones.
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    TransportError,
)
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.core.utils import advance_timestamp, utc_now
from notekeeper.backend.models.note import Note
from notekeeper.backend.repositories.base import NoteRepository, check_fields
from notekeeper.backend.schemas.note import NoteRecord

logger = get_logger(__name__)

T = TypeVar("T")


class DatabaseNoteRepository(NoteRepository):
    """
    Repository for the Note table, restricted to one owner.

    Changes are flushed, not committed; the session owner (request
    dependency or CLI command) commits.
    """

    def __init__(self, session: AsyncSession, owner_id: str | None) -> None:
        self.session = session
        self.owner_id = owner_id

    async def get_all(self) -> list[NoteRecord]:
        owner_id = self._require_owner()
        result = await self._run(
            "list_notes",
            self.session.execute(
                select(Note)
                .where(Note.owner_id == owner_id)
                .order_by(Note.is_pinned.desc(), Note.updated_at.desc())
            ),
        )
        return [NoteRecord.model_validate(row) for row in result.scalars().all()]

    async def get_by_id(self, note_id: str) -> NoteRecord:
        return NoteRecord.model_validate(await self._get_row(note_id))

    async def create(self, **fields: Any) -> NoteRecord:
        owner_id = self._require_owner()
        check_fields(fields, creating=True)

        now = utc_now()
        instance = Note(
            owner_id=owner_id,
            title=fields["title"],
            content=fields.get("content", ""),
            tags=list(fields.get("tags", [])),
            is_pinned=fields.get("is_pinned", False),
            password_hash=fields.get("password_hash"),
            created_at=now,
            updated_at=now,
        )
        self.session.add(instance)
        await self._run("create_note", self.session.flush())
        await self._run("create_note", self.session.refresh(instance))
        return NoteRecord.model_validate(instance)

    async def update(self, note_id: str, **fields: Any) -> NoteRecord:
        check_fields(fields)
        instance = await self._get_row(note_id)

        for key, value in fields.items():
            if key == "tags":
                value = list(value)
            setattr(instance, key, value)
        instance.updated_at = advance_timestamp(instance.updated_at)

        await self._run("update_note", self.session.flush())
        await self._run("update_note", self.session.refresh(instance))
        return NoteRecord.model_validate(instance)

    async def delete(self, note_id: str) -> None:
        instance = await self._get_row(note_id)
        await self._run("delete_note", self.session.delete(instance))
        await self._run("delete_note", self.session.flush())

    async def _get_row(self, note_id: str) -> Note:
        owner_id = self._require_owner()
        result = await self._run(
            "get_note",
            self.session.execute(
                select(Note)
                .where(Note.id == note_id)
                .where(Note.owner_id == owner_id)
            ),
        )
        instance = result.scalar_one_or_none()
        if instance is None:
            raise NotFoundError("Note not found")
        return instance

    def _require_owner(self) -> str:
        if not self.owner_id:
            raise AuthenticationError("User not authenticated")
        return self.owner_id

    async def _run(self, operation: str, awaitable: Awaitable[T]) -> T:
        """Await a database call, converting driver failures to TransportError."""
        try:
            return await awaitable
        except SQLAlchemyError as e:
            logger.error("Database error", operation=operation, error=str(e))
            raise TransportError(f"Database operation failed: {operation}") from e
