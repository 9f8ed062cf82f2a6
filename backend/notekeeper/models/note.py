"""
NoteKeeper Backend: Note SQLAlchemy Model
=========================================

What:  ORM model representing the `notes` table.
Who:   Queried by NoteService; read by Alembic for schema management.

Table Design Rationale:
    - Integer primary key: notes are addressed as /api/notes/{id}
    - owner_id: foreign key to users.id, indexed because every query
      filters on it
    - created_at: set once at creation, never touched afterwards
    - modified_at: NULL until the first successful update
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.database import Base

TITLE_MAX_LENGTH = 100


class Note(Base):
    """
    A single user's note.

    Lifecycle:
        1. Created by the authenticated owner (modified_at is NULL)
        2. Updated only by the owner (modified_at set each time)
        3. Deleted only by the owner; there is no soft delete
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # ── Ownership ─────────────────────────────────────────────────────────
    # Always stamped from the caller's identity, never from request data
    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="User who owns this note",
    )

    # ── Content ───────────────────────────────────────────────────────────
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # ── Timestamps ────────────────────────────────────────────────────────
    # Timezone-aware UTC; conversion to local time is a client concern
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="When this note was created (UTC)",
    )
    modified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        comment="When this note was last updated (UTC); NULL if never",
    )

    __table_args__ = (
        Index("idx_notes_owner_id", "owner_id"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, owner_id={self.owner_id}, created_at='{self.created_at}')>"
