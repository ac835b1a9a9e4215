# Note repositories
from notekeeper.backend.repositories.base import NoteRepository
from notekeeper.backend.repositories.database import DatabaseNoteRepository
from notekeeper.backend.repositories.factory import create_note_repository
from notekeeper.backend.repositories.local import LocalNoteRepository

__all__ = [
    "DatabaseNoteRepository",
    "LocalNoteRepository",
    "NoteRepository",
    "create_note_repository",
]
