"""
Note Repository.

Data access layer for notes. Every statement here is scoped to the owning
user: the caller's user_id is part of the WHERE clause, never an optional
filter.
"""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from notecode.backend.core.exceptions import NotFoundError
from notecode.backend.core.utils import utc_now
from notecode.backend.models.note import Note
from notecode.backend.repositories.base import BaseRepository

UPDATABLE_FIELDS = frozenset({"title", "content", "language"})


class NoteRepository(BaseRepository[Note]):
    """
    Repository for the Note model.

    Reads return None or an empty list when nothing matches the
    (id, user_id) predicate. Listings are ordered by updated_at, newest first.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_for_user(self, user_id: str) -> list[Note]:
        """Get every note owned by user_id, most recently modified first."""
        result = await self.session.execute(
            select(Note)
            .where(Note.user_id == user_id)
            .order_by(Note.updated_at.desc())
        )
        return list(result.scalars().all())

    async def get_for_user(self, note_id: str, user_id: str) -> Note | None:
        """Get a note only if it exists and belongs to user_id."""
        result = await self.session.execute(
            select(Note)
            .where(Note.id == note_id)
            .where(Note.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def update_for_user(
        self,
        note_id: str,
        user_id: str,
        **fields: Any,
    ) -> Note:
        """
        Apply a partial update to a note owned by user_id.

        Only title, content and language can be changed. updated_at is
        always refreshed, even when no fields are given.

        Raises:
            NotFoundError: If no note matches both note_id and user_id
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        note = await self.get_for_user(note_id, user_id)
        if note is None:
            raise NotFoundError("Note not found")

        for key, value in fields.items():
            setattr(note, key, value)
        note.updated_at = utc_now()

        await self.session.flush()
        await self.session.refresh(note)
        return note

    async def delete_for_user(self, note_id: str, user_id: str) -> bool:
        """
        Hard-delete a note owned by user_id.

        Returns:
            True if a row was deleted, False if nothing matched
        """
        result = await self.session.execute(
            delete(Note)
            .where(Note.id == note_id)
            .where(Note.user_id == user_id)
        )
        return result.rowcount > 0

    async def search_for_user(self, user_id: str, query: str) -> list[Note]:
        """
        Find notes of user_id whose title contains query, ignoring case.

        The query is matched literally: LIKE wildcards in it are escaped.
        An empty query matches every note of the user.
        """
        result = await self.session.execute(
            select(Note)
            .where(Note.user_id == user_id)
            .where(Note.title.icontains(query, autoescape=True))
            .order_by(Note.updated_at.desc())
        )
        return list(result.scalars().all())
