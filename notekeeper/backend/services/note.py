"""
Note Service.

Business logic layer for notes. Validates input, hashes note passwords,
and delegates persistence to whichever repository it was given. Errors
are raised as application exceptions; the HTTP layer maps them to status
codes and the notes store maps them to notifications.
"""

import asyncio

from notekeeper.backend.core.exceptions import PasswordError, ValidationError
from notekeeper.backend.core.security import hash_password, password_too_long, verify_password
from notekeeper.backend.repositories.base import NoteRepository
from notekeeper.backend.schemas.note import NoteCreate, NoteRecord, NoteUpdate
from notekeeper.backend.services import presentation
from notekeeper.backend.services.base import BaseService
from notekeeper.backend.services.projection import project

# Fields that cannot be null; an explicit null for them changes nothing.
_NON_NULLABLE = ("content", "tags", "is_pinned")


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles note creation, updates, pinning, tagging and password
    checks on top of a NoteRepository.
    """

    def __init__(self, repo: NoteRepository) -> None:
        super().__init__()
        self.repo = repo

    async def list_notes(self, query: str = "") -> list[NoteRecord]:
        """
        List notes matching ``query``, pinned first then most recent.

        Args:
            query: Search text; blank returns every note
        """
        self._log_debug("Listing notes", query=query)
        return project(await self.repo.get_all(), query)

    async def get_note(self, note_id: str) -> NoteRecord:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If note not found
        """
        return await self.repo.get_by_id(note_id)

    async def create_note(self, data: NoteCreate) -> NoteRecord:
        """
        Create a new note.

        Args:
            data: Note creation data

        Returns:
            Created note

        Raises:
            ValidationError: If the title is blank or the password too long
        """
        self._validate_required({"title": data.title}, ["title"])
        password_hash = await self._hash_optional(data.password)

        self._log_operation(
            "Creating note",
            title=data.title,
            protected=password_hash is not None,
        )

        note = await self.repo.create(
            title=data.title,
            content=data.content,
            tags=presentation.dedupe_tags(data.tags),
            is_pinned=data.is_pinned,
            password_hash=password_hash,
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def update_note(self, note_id: str, data: NoteUpdate) -> NoteRecord:
        """
        Update an existing note.

        Only fields the caller actually sent are changed. ``password``
        sent as a non-blank string re-protects the note, sent blank or
        null removes protection, omitted leaves it alone.

        Raises:
            NotFoundError: If note not found
            ValidationError: If a sent title is blank
        """
        changes = data.model_dump(exclude_unset=True)

        if "title" in changes:
            self._validate_required(changes, ["title"])
        for name in _NON_NULLABLE:
            if name in changes and changes[name] is None:
                del changes[name]
        if "tags" in changes:
            changes["tags"] = presentation.dedupe_tags(changes["tags"])
        if "password" in changes:
            changes["password_hash"] = await self._hash_optional(changes.pop("password"))

        if not changes:
            return await self.repo.get_by_id(note_id)

        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=sorted(changes),
        )
        return await self.repo.update(note_id, **changes)

    async def delete_note(self, note_id: str) -> None:
        """
        Delete a note.

        Raises:
            NotFoundError: If note not found
        """
        self._log_operation("Deleting note", note_id=note_id)
        await self.repo.delete(note_id)

    async def toggle_pin(self, note_id: str) -> NoteRecord:
        """Flip the pin flag of a note."""
        note = await self.repo.get_by_id(note_id)
        self._log_operation("Toggling pin", note_id=note_id, pinned=not note.is_pinned)
        return await self.repo.update(note_id, is_pinned=not note.is_pinned)

    async def add_tag(self, note_id: str, tag: str) -> NoteRecord:
        """
        Append a tag to a note.

        Raises:
            ValidationError: If the tag is blank or already on the note
        """
        note = await self.repo.get_by_id(note_id)
        tags = presentation.add_tag(note.tags, tag)
        return await self.repo.update(note_id, tags=tags)

    async def remove_tag(self, note_id: str, tag: str) -> NoteRecord:
        note = await self.repo.get_by_id(note_id)
        if tag not in note.tags:
            return note
        return await self.repo.update(note_id, tags=presentation.remove_tag(note.tags, tag))

    async def verify_password(self, note: NoteRecord, password: str) -> bool:
        """Check a candidate password; unprotected notes always pass."""
        if not note.is_protected:
            return True
        return await asyncio.to_thread(verify_password, password, note.password_hash)

    async def unlock_note(self, note_id: str, password: str) -> NoteRecord:
        """
        Return a note after checking its password.

        Raises:
            NotFoundError: If note not found
            PasswordError: If the password does not match
        """
        note = await self.repo.get_by_id(note_id)
        if not await self.verify_password(note, password):
            self._log_operation("Note unlock refused", note_id=note_id)
            raise PasswordError("Incorrect password. Please try again.")
        return note

    async def _hash_optional(self, password: str | None) -> str | None:
        """Hash a non-blank password; blank or missing means no protection."""
        if password is None or not password.strip():
            return None
        if password_too_long(password):
            raise ValidationError(
                "Password too long",
                details={"password": "Maximum length is 72 bytes"},
            )
        return await asyncio.to_thread(hash_password, password)
