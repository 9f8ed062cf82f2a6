"""
NoteKeeper Backend: Note Request/Response Schemas
=================================================

What:  Pydantic models defining the note API contract.
How:   FastAPI validates request bodies against these and serializes
       responses from them.

Design Decision:
    None of the request models carries an owner field. The owner is always
    taken from the authenticated identity, so a client cannot create or
    move a note into someone else's account by editing the payload.
    Response models are built by explicit mapping functions in
    NoteService rather than `from_attributes`, so what leaves the server
    is spelled out field by field.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from notekeeper.models.note import TITLE_MAX_LENGTH


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /api/notes."""
    title: str = Field(
        min_length=2,
        max_length=TITLE_MAX_LENGTH,
        description="Note title",
    )
    content: str = Field(max_length=8000, description="Note body text")

    model_config = {"extra": "forbid"}


class NoteUpdate(BaseModel):
    """
    Body of PUT /api/notes.

    The note id travels in the body; ownership of that id is re-checked by
    the service before anything is written.
    """
    id: int = Field(ge=1, description="ID of the note to update")
    title: str = Field(min_length=2, max_length=TITLE_MAX_LENGTH)
    content: str = Field(max_length=8000)

    model_config = {"extra": "forbid"}


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteListItem(BaseModel):
    """
    Summary projection returned by GET /api/notes.

    Content is intentionally absent; clients fetch the detail for that.
    """
    id: int = Field(description="Note identifier")
    title: str = Field(description="Note title")
    created_at: datetime = Field(description="Creation timestamp (UTC)")


class NoteDetail(BaseModel):
    """Full note returned by GET /api/notes/{note_id}."""
    id: int
    title: str
    content: str
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    modified_at: Optional[datetime] = Field(
        default=None,
        description="Last update timestamp (UTC); null if never updated",
    )
