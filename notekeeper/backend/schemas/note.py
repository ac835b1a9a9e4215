"""
Note Schemas.

Pydantic models for the canonical note record, the create/update
payloads, and the API response shape.

``NoteUpdate`` relies on ``model_dump(exclude_unset=True)``: a field the
caller did not send is left alone, a field sent as ``None`` or ``""`` is
an explicit change. For ``password`` that is the difference between
"keep protection" and "remove protection".
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NoteRecord(BaseModel):
    """
    Canonical note as persisted by a repository.

    ``password_hash`` is only ever a bcrypt hash. It is never part of an
    API response or CLI output; see ``NoteResponse``.
    """

    id: str
    title: str
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    is_pinned: bool = False
    password_hash: str | None = None
    created_at: datetime
    updated_at: datetime
    owner_id: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_protected(self) -> bool:
        return self.password_hash is not None


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: str = Field(
        ...,
        max_length=255,
        description="Note title, must not be blank",
        examples=["Groceries"],
    )
    content: str = Field(
        default="",
        max_length=100_000,
        description="Formatted note body, stored as-is",
        examples=["<p>milk</p>"],
    )
    tags: list[str] = Field(
        default_factory=list,
        description="Tags in display order",
        examples=[["home"]],
    )
    is_pinned: bool = Field(default=False, description="Pin to the top of the list")
    password: str | None = Field(
        default=None,
        description="Optional password; blank means unprotected",
    )


class NoteUpdate(BaseModel):
    """Schema for updating an existing note. Only sent fields change."""

    title: str | None = Field(default=None, max_length=255, description="Note title")
    content: str | None = Field(default=None, max_length=100_000, description="Note body")
    tags: list[str] | None = Field(default=None, description="Replacement tag list")
    is_pinned: bool | None = Field(default=None, description="Pin status")
    password: str | None = Field(
        default=None,
        description="New password; an empty string removes protection",
    )


class TagRequest(BaseModel):
    """Schema for adding a tag to a note."""

    tag: str = Field(..., max_length=64, examples=["home"])


class UnlockRequest(BaseModel):
    """Schema for unlocking a protected note."""

    password: str


class NoteResponse(BaseModel):
    """
    Note in API responses.

    Protected notes are returned with ``content`` withheld unless the
    caller has just unlocked them.
    """

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: str | None = Field(description="Note body, null while locked")
    tags: list[str] = Field(description="Note tags")
    is_pinned: bool = Field(description="Whether the note is pinned")
    is_protected: bool = Field(description="Whether the note has a password")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    @classmethod
    def from_record(cls, note: NoteRecord, unlocked: bool = False) -> "NoteResponse":
        return cls(
            id=note.id,
            title=note.title,
            content=note.content if unlocked or not note.is_protected else None,
            tags=list(note.tags),
            is_pinned=note.is_pinned,
            is_protected=note.is_protected,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )
