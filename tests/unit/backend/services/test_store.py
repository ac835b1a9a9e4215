"""
Unit Tests for the Notes Store.

Most tests run the store over a real local repository in a temporary
directory; failure paths use a mocked service.
"""

from unittest.mock import AsyncMock

import pytest

from notekeeper.backend.core.exceptions import NotFoundError, TransportError
from notekeeper.backend.core.security import verify_password
from notekeeper.backend.schemas.note import NoteCreate, NoteUpdate
from notekeeper.backend.services.note import NoteService
from notekeeper.backend.services.store import NotesStore


@pytest.fixture
async def store(local_repo):
    """Loaded store over an empty local repository."""
    notes_store = NotesStore(NoteService(local_repo))
    assert await notes_store.load()
    return notes_store


@pytest.fixture
def failing_service():
    """Service whose every call fails with a transport error."""
    service = AsyncMock(spec=NoteService)
    error = TransportError("Could not save local notes")
    for name in ("list_notes", "create_note", "update_note", "delete_note", "add_tag", "remove_tag"):
        getattr(service, name).side_effect = error
    return service


class TestLoad:
    """Tests for loading."""

    @pytest.mark.asyncio
    async def test_empty(self, store):
        assert store.notes == ()
        assert store.loading is False

    @pytest.mark.asyncio
    async def test_undecodable_file_loads_empty(self, local_repo, notes_path):
        """Should treat a file that is not UTF-8 as no notes."""
        notes_path.parent.mkdir(parents=True)
        notes_path.write_bytes(b"\xff\xfe\x00garbage")
        notes_store = NotesStore(NoteService(local_repo))

        assert await notes_store.load() is True
        assert notes_store.notes == ()
        assert notes_store.notifier.pending == ()

    @pytest.mark.asyncio
    async def test_load_failure(self, failing_service):
        """Should report the failure and keep an empty collection."""
        notes_store = NotesStore(failing_service)

        assert await notes_store.load() is False
        assert notes_store.notes == ()
        assert notes_store.loading is False
        [notification] = notes_store.notifier.drain()
        assert notification.title == "Error loading notes"
        assert notification.is_error


class TestCreate:
    """Tests for creating notes."""

    @pytest.mark.asyncio
    async def test_groceries(self, store):
        """Should list the new note first and find it by content."""
        await store.create(NoteCreate(title="Older"))
        note = await store.create(
            NoteCreate(title="Groceries", content="<p>milk</p>", tags=["home"])
        )

        assert store.visible_notes[0].id == note.id
        assert [n.id for n in store.search("milk")] == [note.id]
        assert store.search("bread") == []
        assert store.query == "bread"

    @pytest.mark.asyncio
    async def test_success_notification(self, store):
        await store.create(NoteCreate(title="Groceries"))

        [notification] = store.notifier.drain()
        assert notification.title == "Note created"
        assert notification.description == "Your note has been created successfully."

    @pytest.mark.asyncio
    async def test_blank_title_reports_error(self, store):
        """Should leave the collection alone and notify."""
        assert await store.create(NoteCreate(title="")) is None
        assert store.notes == ()
        assert store.notifier.drain()[0].title == "Error creating note"

    @pytest.mark.asyncio
    async def test_password_hash_never_plaintext(self, store):
        note = await store.create(NoteCreate(title="Diary", password="abc123"))

        assert note.password_hash is not None
        assert "abc123" not in note.model_dump_json()
        assert verify_password("abc123", note.password_hash)
        assert not verify_password("wrong", note.password_hash)


class TestUpdate:
    """Tests for updates, pinning and tags."""

    @pytest.mark.asyncio
    async def test_update_replaces_in_place(self, store):
        note = await store.create(NoteCreate(title="Draft"))

        updated = await store.update(note.id, NoteUpdate(title="Final"))

        assert updated.title == "Final"
        assert store.find(note.id).title == "Final"
        assert len(store.notes) == 1
        assert updated.updated_at > note.updated_at
        assert updated.created_at == note.created_at

    @pytest.mark.asyncio
    async def test_update_missing_note(self, store):
        assert await store.update("missing", NoteUpdate(title="x")) is None
        assert store.notifier.drain()[-1].code == "RES_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_failed_update_leaves_state(self, store):
        """Should not touch the collection when the backend fails."""
        note = await store.create(NoteCreate(title="Draft"))
        before = store.notes
        store.service = AsyncMock(spec=NoteService)
        store.service.update_note.side_effect = TransportError()

        assert await store.update(note.id, NoteUpdate(title="Final")) is None
        assert store.notes == before

    @pytest.mark.asyncio
    async def test_toggle_pin_twice(self, store):
        """Should flip back and advance updated_at each time."""
        note = await store.create(NoteCreate(title="Groceries"))

        assert await store.toggle_pin(note.id)
        pinned = store.find(note.id)
        assert await store.toggle_pin(note.id)
        unpinned = store.find(note.id)

        assert pinned.is_pinned is True
        assert unpinned.is_pinned is False
        assert note.updated_at < pinned.updated_at < unpinned.updated_at

    @pytest.mark.asyncio
    async def test_toggle_pin_unknown_id(self, store):
        """Should do nothing and stay quiet."""
        assert await store.toggle_pin("missing") is False
        assert store.notifier.pending == ()

    @pytest.mark.asyncio
    async def test_pinned_note_listed_first(self, store):
        first = await store.create(NoteCreate(title="First"))
        await store.create(NoteCreate(title="Second"))

        await store.toggle_pin(first.id)

        assert store.visible_notes[0].id == first.id

    @pytest.mark.asyncio
    async def test_tags(self, store):
        note = await store.create(NoteCreate(title="T", tags=["home"]))

        assert (await store.add_tag(note.id, "work")).tags == ["home", "work"]
        assert await store.add_tag(note.id, "work") is None
        assert (await store.remove_tag(note.id, "home")).tags == ["work"]
        assert store.find(note.id).tags == ["work"]


class TestDelete:
    """Tests for deletion."""

    @pytest.mark.asyncio
    async def test_delete(self, store):
        note = await store.create(NoteCreate(title="Groceries"))

        assert await store.delete(note.id) is True
        assert store.notes == ()
        assert store.notifier.drain()[-1].title == "Note deleted"

    @pytest.mark.asyncio
    async def test_delete_missing_counts_as_deleted(self, store):
        assert await store.delete("missing") is True

    @pytest.mark.asyncio
    async def test_delete_failure(self, store):
        note = await store.create(NoteCreate(title="Groceries"))
        store.service = AsyncMock(spec=NoteService)
        store.service.delete_note.side_effect = TransportError()

        assert await store.delete(note.id) is False
        assert store.find(note.id) is not None

    @pytest.mark.asyncio
    async def test_delete_not_found_from_service(self, store):
        note = await store.create(NoteCreate(title="Groceries"))
        store.service = AsyncMock(spec=NoteService)
        store.service.delete_note.side_effect = NotFoundError()

        assert await store.delete(note.id) is True
        assert store.find(note.id) is None


class TestLocking:
    """Tests for password-gated access."""

    @pytest.mark.asyncio
    async def test_unlock(self, store):
        note = await store.create(NoteCreate(title="Diary", content="secret", password="abc123"))

        assert store.is_unlocked(note.id) is False
        assert store.open_note(note.id) is None

        assert await store.unlock(note.id, "abc123") is True
        assert store.open_note(note.id).content == "secret"

        store.lock(note.id)
        assert store.is_unlocked(note.id) is False

    @pytest.mark.asyncio
    async def test_wrong_password(self, store):
        note = await store.create(NoteCreate(title="Diary", password="abc123"))
        store.notifier.drain()

        assert await store.unlock(note.id, "wrong") is False
        [notification] = store.notifier.drain()
        assert notification.title == "Incorrect password"
        assert notification.code == "AUTH_PASSWORD_INVALID"

    @pytest.mark.asyncio
    async def test_clearing_password_removes_protection(self, store):
        """Should make any password verify after clearing it."""
        note = await store.create(NoteCreate(title="Diary", password="abc123"))

        cleared = await store.update(note.id, NoteUpdate(password=""))

        assert cleared.password_hash is None
        assert await store.unlock(note.id, "anything") is True
        assert store.is_unlocked(note.id)

    @pytest.mark.asyncio
    async def test_changing_password_relocks(self, store):
        note = await store.create(NoteCreate(title="Diary", password="abc123"))
        await store.unlock(note.id, "abc123")

        await store.update(note.id, NoteUpdate(password="newpass"))

        assert store.is_unlocked(note.id) is False
        assert await store.unlock(note.id, "abc123") is False
        assert await store.unlock(note.id, "newpass") is True

    @pytest.mark.asyncio
    async def test_unlock_unknown(self, store):
        assert await store.unlock("missing", "x") is False
        assert store.notifier.drain()[-1].title == "Error unlocking note"

    @pytest.mark.asyncio
    async def test_lock_all(self, store):
        note = await store.create(NoteCreate(title="Diary", password="abc123"))
        await store.unlock(note.id, "abc123")

        store.lock_all()

        assert store.is_unlocked(note.id) is False
