"""
Notes Store.

In-memory note collection for one user session. The store is the only
owner of the collection; the repository behind the service owns the
durable copy. Every change is written through: the collection is only
updated with the record the repository returns, so a failed call leaves
it exactly as it was.

The store never raises application errors to its caller. Each failure
becomes an error notification plus a falsy return value.

Usage:
    service = NoteService(create_note_repository())
    store = NotesStore(service)
    await store.load()
    await store.create(NoteCreate(title="Groceries", content="<p>milk</p>"))
    store.search("milk")
    for note in store.visible_notes:
        ...
"""

from notekeeper.backend.core.exceptions import (
    ApplicationError,
    NotFoundError,
    PasswordError,
)
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.schemas.note import NoteCreate, NoteRecord, NoteUpdate
from notekeeper.backend.services.note import NoteService
from notekeeper.backend.services.notifications import Notifier
from notekeeper.backend.services.projection import project

logger = get_logger(__name__)


class NotesStore:
    """
    Session state over a NoteService.

    Besides the collection it keeps the current search query and the set
    of protected note ids unlocked during this session. Neither is
    persisted.
    """

    def __init__(self, service: NoteService, notifier: Notifier | None = None) -> None:
        self.service = service
        self.notifier = notifier or Notifier()
        self.loading = False
        self._notes: list[NoteRecord] = []
        self._query = ""
        self._unlocked: set[str] = set()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def notes(self) -> tuple[NoteRecord, ...]:
        """The raw collection, in insertion order."""
        return tuple(self._notes)

    @property
    def query(self) -> str:
        return self._query

    @property
    def visible_notes(self) -> list[NoteRecord]:
        """The collection filtered by the current query, pinned first."""
        return project(self._notes, self._query)

    def search(self, query: str) -> list[NoteRecord]:
        self._query = query
        return self.visible_notes

    def find(self, note_id: str) -> NoteRecord | None:
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def load(self) -> bool:
        """Replace the collection with the repository's notes."""
        self.loading = True
        try:
            notes = await self.service.list_notes()
        except ApplicationError as e:
            self.notifier.error("Error loading notes", e)
            return False
        finally:
            self.loading = False

        self._notes = notes
        self._unlocked &= {note.id for note in notes}
        logger.debug("Notes loaded", count=len(notes))
        return True

    refresh = load

    async def create(self, data: NoteCreate) -> NoteRecord | None:
        try:
            note = await self.service.create_note(data)
        except ApplicationError as e:
            self.notifier.error("Error creating note", e)
            return None

        self._notes = [note, *(n for n in self._notes if n.id != note.id)]
        self.notifier.success("Note created", "Your note has been created successfully.")
        return note

    async def update(self, note_id: str, data: NoteUpdate) -> NoteRecord | None:
        try:
            note = await self.service.update_note(note_id, data)
        except ApplicationError as e:
            self.notifier.error("Error updating note", e)
            return None

        self._replace(note)
        if "password" in data.model_fields_set:
            self._unlocked.discard(note_id)
        self.notifier.success("Note updated", "Your note has been updated successfully.")
        return note

    async def delete(self, note_id: str) -> bool:
        """
        Delete a note. A note the repository no longer has counts as
        deleted, since the end state is the same.
        """
        try:
            await self.service.delete_note(note_id)
        except NotFoundError:
            logger.debug("Note already absent from repository", note_id=note_id)
        except ApplicationError as e:
            self.notifier.error("Error deleting note", e)
            return False

        self._notes = [note for note in self._notes if note.id != note_id]
        self._unlocked.discard(note_id)
        self.notifier.success("Note deleted", "Your note has been deleted successfully.")
        return True

    async def toggle_pin(self, note_id: str) -> bool:
        """Flip the pin flag. Returns False without notifying for unknown ids."""
        note = self.find(note_id)
        if note is None:
            return False

        try:
            updated = await self.service.update_note(
                note_id, NoteUpdate(is_pinned=not note.is_pinned)
            )
        except ApplicationError as e:
            self.notifier.error("Error updating note", e)
            return False

        self._replace(updated)
        return True

    async def add_tag(self, note_id: str, tag: str) -> NoteRecord | None:
        try:
            note = await self.service.add_tag(note_id, tag)
        except ApplicationError as e:
            self.notifier.error("Error adding tag", e)
            return None

        self._replace(note)
        return note

    async def remove_tag(self, note_id: str, tag: str) -> NoteRecord | None:
        try:
            note = await self.service.remove_tag(note_id, tag)
        except ApplicationError as e:
            self.notifier.error("Error removing tag", e)
            return None

        self._replace(note)
        return note

    # -------------------------------------------------------------------------
    # Password-gated access
    # -------------------------------------------------------------------------

    async def unlock(self, note_id: str, password: str) -> bool:
        """Verify a note's password and remember it as unlocked for this session."""
        note = self.find(note_id)
        if note is None:
            self.notifier.error("Error unlocking note", NotFoundError("Note not found"))
            return False

        if await self.service.verify_password(note, password):
            if note.is_protected:
                self._unlocked.add(note_id)
            return True

        self.notifier.error(
            "Incorrect password",
            PasswordError("Incorrect password. Please try again."),
        )
        return False

    def is_unlocked(self, note_id: str) -> bool:
        """True for unprotected notes and protected notes unlocked this session."""
        note = self.find(note_id)
        if note is None:
            return False
        return not note.is_protected or note_id in self._unlocked

    def open_note(self, note_id: str) -> NoteRecord | None:
        """Return the note if its content may be shown, else None."""
        if not self.is_unlocked(note_id):
            return None
        return self.find(note_id)

    def lock(self, note_id: str) -> None:
        self._unlocked.discard(note_id)

    def lock_all(self) -> None:
        self._unlocked.clear()

    def _replace(self, note: NoteRecord) -> None:
        for index, existing in enumerate(self._notes):
            if existing.id == note.id:
                self._notes = [*self._notes[:index], note, *self._notes[index + 1:]]
                return
        self._notes = [note, *self._notes]
