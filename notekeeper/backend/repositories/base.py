"""
Base Repository.

The persistence contract every note store implements. The notes store
and the note service only ever talk to this interface, so the local file
and the relational backend are interchangeable.

Contract:
    get_all()              -> notes, pinned first then most recently updated
    get_by_id(id)          -> note, NotFoundError if absent
    create(**fields)       -> note with fresh id, created_at == updated_at
    update(id, **fields)   -> note with only the given fields changed
    delete(id)             -> None, NotFoundError if absent
"""

from abc import ABC, abstractmethod
from typing import Any

from notekeeper.backend.core.exceptions import ValidationError
from notekeeper.backend.schemas.note import NoteRecord

WRITABLE_FIELDS = frozenset({"title", "content", "tags", "is_pinned", "password_hash"})


class NoteRepository(ABC):
    """Abstract note repository."""

    @abstractmethod
    async def get_all(self) -> list[NoteRecord]:
        """Return every visible note, pinned first, then newest update first."""

    @abstractmethod
    async def get_by_id(self, note_id: str) -> NoteRecord:
        """
        Get a single note by ID.

        Raises:
            NotFoundError: If the note does not exist
        """

    @abstractmethod
    async def create(self, **fields: Any) -> NoteRecord:
        """
        Create a note, assigning its id and timestamps.

        Raises:
            ValidationError: If the title is blank
        """

    @abstractmethod
    async def update(self, note_id: str, **fields: Any) -> NoteRecord:
        """
        Merge ``fields`` into an existing note and advance updated_at.

        Raises:
            NotFoundError: If the note does not exist
            ValidationError: If a supplied title is blank
        """

    @abstractmethod
    async def delete(self, note_id: str) -> None:
        """
        Delete a note.

        Raises:
            NotFoundError: If the note does not exist
        """


def check_fields(fields: dict[str, Any], creating: bool = False) -> None:
    """
    Validate note fields at the persistence boundary.

    Raises:
        ValidationError: For unknown fields or a blank title
    """
    unknown = set(fields) - WRITABLE_FIELDS
    if unknown:
        raise ValidationError(
            "Unknown note fields",
            details={"unknown_fields": sorted(unknown)},
        )
    if creating or "title" in fields:
        title = fields.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValidationError(
                "Title is required",
                details={"title": "Title must not be empty"},
            )
