"""
FastAPI Dependencies.

Shared dependencies for request handling: database session, request id,
authenticated user and the note service bound to that user.
"""

import uuid
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.database import get_db_session
from notekeeper.backend.core.exceptions import AuthenticationError
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.core.security import user_id_from_token
from notekeeper.backend.repositories.database import DatabaseNoteRepository
from notekeeper.backend.services.note import NoteService

logger = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """Extract or generate request ID from headers."""
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


@dataclass(frozen=True)
class CurrentUser:
    """Identity taken from the bearer token."""

    id: str


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> CurrentUser:
    """
    Get current authenticated user from the Authorization header.

    Raises:
        AuthenticationError: If the header is missing or the token invalid
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    return CurrentUser(id=user_id_from_token(credentials.credentials))


AuthenticatedUser = Annotated[CurrentUser, Depends(get_current_user)]


async def get_note_service(db: DbSession, user: AuthenticatedUser) -> NoteService:
    """Note service scoped to the authenticated user's notes."""
    return NoteService(DatabaseNoteRepository(db, user.id))


NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]
