"""
Repository Factory.

Chooses the note repository at startup from storage.yaml and whether an
authenticated user is present.
"""

from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.config import get_app_config, get_local_storage_path
from notekeeper.backend.core.exceptions import AuthenticationError
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.repositories.base import NoteRepository
from notekeeper.backend.repositories.database import DatabaseNoteRepository
from notekeeper.backend.repositories.local import LocalNoteRepository

logger = get_logger(__name__)


def create_note_repository(
    owner_id: str | None = None,
    session: AsyncSession | None = None,
    local_path: Path | None = None,
) -> NoteRepository:
    """
    Build the note repository for this session.

    Args:
        owner_id: Authenticated user id, if any
        session: Database session, required for the database backend
        local_path: Override for the local notes file

    Raises:
        AuthenticationError: If the database backend is forced but
            there is no authenticated user or session
    """
    storage = get_app_config().storage
    use_database = storage.backend == "database" or (
        storage.backend == "auto" and owner_id is not None and session is not None
    )

    if use_database:
        if owner_id is None or session is None:
            raise AuthenticationError("Database storage requires an authenticated user")
        logger.debug("Using database note repository", owner_id=owner_id)
        return DatabaseNoteRepository(session, owner_id)

    path = local_path or get_local_storage_path()
    logger.debug("Using local note repository", path=str(path))
    return LocalNoteRepository(path, storage.local.storage_key)
