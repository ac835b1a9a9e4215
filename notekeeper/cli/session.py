"""
CLI Store Session.

Builds the notes store for one CLI invocation and, for the database
backend, owns the session that commits its changes.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.database import get_session_factory
from notekeeper.backend.core.exceptions import TransportError
from notekeeper.backend.core.logging import get_logger, log_with_source
from notekeeper.backend.core.security import user_id_from_token
from notekeeper.backend.repositories.factory import create_note_repository
from notekeeper.backend.services.note import NoteService
from notekeeper.backend.services.notifications import Notifier
from notekeeper.backend.services.store import NotesStore

logger = get_logger(__name__)


@asynccontextmanager
async def open_store(token: str | None = None) -> AsyncIterator[NotesStore]:
    """
    Yield a loaded NotesStore for the current user.

    Args:
        token: Bearer token. Without one the local notes file is used.

    Raises:
        AuthenticationError: If the token is invalid, or storage.yaml
            forces the database backend and there is no token
    """
    owner_id = user_id_from_token(token) if token else None

    if owner_id is None:
        store = NotesStore(NoteService(create_note_repository()), Notifier())
        log_with_source(logger, "cli", "debug", "Opened local notes store")
        await store.load()
        yield store
        return

    async with get_session_factory()() as session:
        repo = create_note_repository(owner_id=owner_id, session=session)
        store = NotesStore(NoteService(repo), Notifier())
        log_with_source(logger, "cli", "debug", "Opened notes store", owner_id=owner_id)
        await store.load()
        try:
            yield store
        except Exception:
            await _finish(session, commit=False)
            raise
        # A failed flush leaves the transaction unusable; keep nothing from it.
        await _finish(session, commit=store.notifier.failures == 0)


async def _finish(session: AsyncSession, commit: bool) -> None:
    """
    Commit or roll back the CLI session.

    Raises:
        TransportError: If the database rejects the commit or rollback
    """
    try:
        if commit:
            await session.commit()
        else:
            await session.rollback()
    except SQLAlchemyError as e:
        log_with_source(logger, "cli", "error", "Database session failed", error=str(e))
        if commit:
            await session.rollback()
        raise TransportError("Could not save notes to the database") from e
