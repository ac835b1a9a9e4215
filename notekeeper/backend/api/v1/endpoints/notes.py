"""
Notes API Endpoints.

REST API endpoints for the authenticated user's notes. Every route needs
a bearer token; notes of other users are indistinguishable from missing
ones. Protected notes come back without content except from /unlock.
"""

from fastapi import APIRouter, Query, Response

from notekeeper.backend.core.dependencies import NoteServiceDep, RequestId
from notekeeper.backend.core.exceptions import NotFoundError
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.schemas.base import ApiResponse, ResponseMetadata
from notekeeper.backend.schemas.note import (
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    TagRequest,
    UnlockRequest,
)

logger = get_logger(__name__)

router = APIRouter()


def _envelope(data, request_id: str) -> ApiResponse:
    return ApiResponse(data=data, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes",
    description="List notes, pinned first then most recently updated, optionally filtered.",
)
async def list_notes(
    service: NoteServiceDep,
    request_id: RequestId,
    q: str = Query(
        default="",
        max_length=200,
        description="Case-insensitive match on title, content or tags",
    ),
) -> ApiResponse[list[NoteResponse]]:
    """List notes matching the query."""
    notes = await service.list_notes(q)
    return _envelope([NoteResponse.from_record(note) for note in notes], request_id)


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
)
async def create_note(
    data: NoteCreate,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Create a new note, optionally password protected."""
    note = await service.create_note(data)
    return _envelope(NoteResponse.from_record(note, unlocked=True), request_id)


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
)
async def get_note(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID. Content is withheld for protected notes."""
    note = await service.get_note(note_id)
    return _envelope(NoteResponse.from_record(note), request_id)


@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Only provided fields are updated. An empty password removes protection.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    note = await service.update_note(note_id, data)
    return _envelope(NoteResponse.from_record(note), request_id)


@router.delete(
    "/{note_id}",
    status_code=204,
    summary="Delete a note",
    description="Permanently delete a note. Deleting a missing note also succeeds.",
)
async def delete_note(
    note_id: str,
    service: NoteServiceDep,
) -> Response:
    """Delete a note."""
    try:
        await service.delete_note(note_id)
    except NotFoundError:
        logger.debug("Delete of absent note", note_id=note_id)
    return Response(status_code=204)


@router.post(
    "/{note_id}/pin",
    response_model=ApiResponse[NoteResponse],
    summary="Toggle pin",
)
async def toggle_pin(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Pin an unpinned note or unpin a pinned one."""
    note = await service.toggle_pin(note_id)
    return _envelope(NoteResponse.from_record(note), request_id)


@router.post(
    "/{note_id}/tags",
    response_model=ApiResponse[NoteResponse],
    summary="Add a tag",
)
async def add_tag(
    note_id: str,
    data: TagRequest,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Append a tag; duplicates are rejected."""
    note = await service.add_tag(note_id, data.tag)
    return _envelope(NoteResponse.from_record(note), request_id)


@router.delete(
    "/{note_id}/tags/{tag}",
    response_model=ApiResponse[NoteResponse],
    summary="Remove a tag",
)
async def remove_tag(
    note_id: str,
    tag: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Remove a tag if present."""
    note = await service.remove_tag(note_id, tag)
    return _envelope(NoteResponse.from_record(note), request_id)


@router.post(
    "/{note_id}/unlock",
    response_model=ApiResponse[NoteResponse],
    summary="Unlock a protected note",
    description="Verify the note password and return the note with its content.",
)
async def unlock_note(
    note_id: str,
    data: UnlockRequest,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Return a protected note's content after password verification."""
    note = await service.unlock_note(note_id, data.password)
    return _envelope(NoteResponse.from_record(note, unlocked=True), request_id)
