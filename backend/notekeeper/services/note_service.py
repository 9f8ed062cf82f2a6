"""
NoteKeeper Backend: Note Service (Ownership-Scoped Note Store)
==============================================================

What:  All create/list/read/update/delete operations on notes.
Why:   Authorization lives at the data-access boundary: every statement
       this module issues is filtered by, or stamped with, the caller's
       owner id. There is no separate policy layer to forget to call.
Who:   Called by the notes router with an `Identity` from the request.

Ownership Rules:
    - create:  owner_id is always `owner.user_id`, never request data
    - list:    WHERE owner_id = :owner
    - get:     WHERE id = :id AND owner_id = :owner; otherwise None
    - update:  SELECT ... FOR UPDATE with the same filter, then an UPDATE
               that repeats the filter; affected rows must equal 1
    - delete:  same as update, with DELETE

    A note that belongs to somebody else is indistinguishable from a note
    that does not exist: reads return None, writes return False.

Row-Count Policy:
    A write that affects anything other than exactly one row is a failure,
    even when the statement itself succeeded. This catches a row deleted by
    a concurrent request between the ownership check and the write.

Transactions:
    Each successful write commits before returning True, so True always
    means "durably stored". The request dependency's own commit then has
    nothing left to do.

Error Handling:
    Writes: storage errors (including a failing commit) are logged, the
            transaction is rolled back and the method returns False.
    Reads:  storage errors become DatabaseError (→ 500, generic message).
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.exceptions import DatabaseError
from notekeeper.identity import Identity
from notekeeper.models.note import Note
from notekeeper.schemas.note import NoteDetail, NoteListItem

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Mapping Functions
# ══════════════════════════════════════════════════════════════════════════


def to_list_item(row: Row) -> NoteListItem:
    """(id, title, created_at) row → summary."""
    return NoteListItem(id=row.id, title=row.title, created_at=row.created_at)


def to_detail(note: Note) -> NoteDetail:
    """Note entity → full detail. owner_id is not exposed."""
    return NoteDetail(
        id=note.id,
        title=note.title,
        content=note.content,
        created_at=note.created_at,
        modified_at=note.modified_at,
    )


class NoteService:
    """
    Business logic layer for note operations.

    Stateless: the session and the caller's identity are arguments to every
    method, so one instance serves all concurrent requests.
    """

    # ── Create ────────────────────────────────────────────────────────────

    async def create_note(
        self,
        db: AsyncSession,
        owner: Identity,
        title: str,
        content: str,
    ) -> bool:
        """
        Insert a new note owned by `owner`.

        Returns:
            True iff exactly one row was inserted.
        """
        stmt = (
            insert(Note)
            .values(
                owner_id=owner.user_id,
                title=title,
                content=content,
                created_at=datetime.now(timezone.utc),
                modified_at=None,
            )
            .returning(Note.id)
        )
        try:
            result = await db.execute(stmt)
            inserted_ids = list(result.scalars().all())
        except SQLAlchemyError as e:
            await self._rollback_after_failure(db, "create", owner, None, e)
            return False

        new_id = inserted_ids[0] if len(inserted_ids) == 1 else None
        return await self._commit_single_row(db, "create", owner, new_id, len(inserted_ids))

    # ── Read ──────────────────────────────────────────────────────────────

    async def list_notes(self, db: AsyncSession, owner: Identity) -> List[NoteListItem]:
        """
        Every note owned by `owner`, as summaries, in id (insertion) order.

        Only the summary columns are selected; content never leaves the
        database for this call.
        """
        stmt = (
            select(Note.id, Note.title, Note.created_at)
            .where(Note.owner_id == owner.user_id)
            .order_by(Note.id)
        )
        try:
            result = await db.execute(stmt)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Database error listing notes for user %s: %s", owner.user_id, str(e))
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [to_list_item(row) for row in rows]

    async def get_note(
        self, db: AsyncSession, owner: Identity, note_id: int
    ) -> Optional[NoteDetail]:
        """
        The note with `note_id` if `owner` owns it, otherwise None.

        None is returned both for missing ids and for other users' notes.
        """
        stmt = (
            select(Note)
            .where(Note.id == note_id, Note.owner_id == owner.user_id)
            # Always reload: an earlier statement in this session may have
            # updated the row behind the identity map's back.
            .execution_options(populate_existing=True)
        )
        try:
            result = await db.execute(stmt)
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": note_id, "error_type": type(e).__name__},
            )

        return to_detail(note) if note is not None else None

    # ── Update ────────────────────────────────────────────────────────────

    async def update_note(
        self,
        db: AsyncSession,
        owner: Identity,
        note_id: int,
        title: str,
        content: str,
    ) -> bool:
        """
        Overwrite title and content of an owned note and stamp modified_at.

        created_at and owner_id are never part of the UPDATE.

        Returns:
            False if the note is missing, foreign, or the write did not
            affect exactly one row. True otherwise.
        """
        try:
            if not await self._lock_owned_note(db, owner, note_id):
                return False

            stmt = (
                update(Note)
                .where(Note.id == note_id, Note.owner_id == owner.user_id)
                .values(
                    title=title,
                    content=content,
                    modified_at=datetime.now(timezone.utc),
                )
                .execution_options(synchronize_session=False)
            )
            result = await db.execute(stmt)
        except SQLAlchemyError as e:
            await self._rollback_after_failure(db, "update", owner, note_id, e)
            return False

        return await self._commit_single_row(db, "update", owner, note_id, result.rowcount)

    # ── Delete ────────────────────────────────────────────────────────────

    async def delete_note(self, db: AsyncSession, owner: Identity, note_id: int) -> bool:
        """
        Remove an owned note.

        Returns:
            True iff the note was owned by `owner` and exactly one row was
            removed. A second delete of the same id returns False.
        """
        try:
            if not await self._lock_owned_note(db, owner, note_id):
                return False

            stmt = (
                delete(Note)
                .where(Note.id == note_id, Note.owner_id == owner.user_id)
                .execution_options(synchronize_session=False)
            )
            result = await db.execute(stmt)
        except SQLAlchemyError as e:
            await self._rollback_after_failure(db, "delete", owner, note_id, e)
            return False

        return await self._commit_single_row(db, "delete", owner, note_id, result.rowcount)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _lock_owned_note(self, db: AsyncSession, owner: Identity, note_id: int) -> bool:
        """
        Fresh ownership check that also locks the row until commit.

        FOR UPDATE is ignored by SQLite, which serializes writers anyway.
        """
        stmt = (
            select(Note.id)
            .where(Note.id == note_id, Note.owner_id == owner.user_id)
            .with_for_update()
        )
        result = await db.execute(stmt)
        found = result.scalar_one_or_none() is not None
        if not found:
            logger.info("Note %s not found for user %s", note_id, owner.user_id)
        return found

    async def _commit_single_row(
        self,
        db: AsyncSession,
        operation: str,
        owner: Identity,
        note_id: Optional[int],
        affected: int,
    ) -> bool:
        """
        Commit a write that must have touched exactly one row.

        The commit happens here, before the route answers, so a failed
        commit is reported as False instead of after a 200 has been sent.
        Any other row count is rolled back.
        """
        if affected != 1:
            logger.warning(
                "%s of note %s for user %s affected %d rows",
                operation.capitalize(), note_id, owner.user_id, affected,
            )
            await db.rollback()
            return False

        try:
            await db.commit()
        except SQLAlchemyError as e:
            await self._rollback_after_failure(db, operation, owner, note_id, e)
            return False

        logger.info("Note %s: %s committed for user %s", note_id, operation, owner.user_id)
        return True

    async def _rollback_after_failure(
        self,
        db: AsyncSession,
        operation: str,
        owner: Identity,
        note_id: Optional[int],
        error: Exception,
    ) -> None:
        logger.error(
            "Database error during %s of note %s for user %s: %s",
            operation, note_id, owner.user_id, str(error),
        )
        await db.rollback()


# Singleton; NoteService keeps no per-request state
note_service = NoteService()
