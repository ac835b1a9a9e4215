"""
Note Projection.

Pure functions that turn the raw note collection into the list shown to
the user for a search query: filter, then pinned first, then most
recently updated first.
"""

from collections.abc import Iterable

from notekeeper.backend.schemas.note import NoteRecord


def matches(note: NoteRecord, query: str) -> bool:
    """
    Case-insensitive substring match on title, content or any tag.

    Content is matched as stored, markup included. The query is used
    as given; only an empty or whitespace-only query matches every note.
    """
    if not query.strip():
        return True
    needle = query.lower()
    return (
        needle in note.title.lower()
        or needle in note.content.lower()
        or any(needle in tag.lower() for tag in note.tags)
    )


def sort_notes(notes: Iterable[NoteRecord]) -> list[NoteRecord]:
    """Pinned first, then newest ``updated_at``; ties keep input order."""
    ordered = sorted(notes, key=lambda note: note.updated_at, reverse=True)
    ordered.sort(key=lambda note: not note.is_pinned)
    return ordered


def project(notes: Iterable[NoteRecord], query: str = "") -> list[NoteRecord]:
    """Return the filtered, sorted view of ``notes``. The input is not modified."""
    return sort_notes(note for note in notes if matches(note, query))
