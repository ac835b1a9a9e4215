"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from notekeeper.backend.repositories.base import NoteRepository
from notekeeper.backend.repositories.local import LocalNoteRepository


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_repository(mock_db_session: AsyncMock):
            repo = DatabaseNoteRepository(mock_db_session, "user-a")
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    return session


# =============================================================================
# Repository Fixtures
# =============================================================================


@pytest.fixture
def mock_repo() -> AsyncMock:
    """
    Mock note repository.

    Usage:
        async def test_service(mock_repo):
            mock_repo.get_all.return_value = [note]
            service = NoteService(mock_repo)
    """
    return AsyncMock(spec=NoteRepository)


@pytest.fixture
def notes_path(tmp_path: Path) -> Path:
    """Location of a local notes file that does not exist yet."""
    return tmp_path / "data" / "notes.json"


@pytest.fixture
def local_repo(notes_path: Path) -> LocalNoteRepository:
    """Local repository over an empty temporary file."""
    return LocalNoteRepository(notes_path)


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            log_with_source(mock_logger, "cli", "info", "Done")
            mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    return logger
