"""
Database Storage.

The entity store for users and notes. One DatabaseStorage wraps one
database session; request handlers receive it through dependency injection
(see core.dependencies.Storage), never from a module-level instance.

Ownership rules:
    Every note operation takes the caller's user_id and passes it into the
    query predicate. A note owned by someone else behaves exactly like a
    note that does not exist.

Concurrency:
    Concurrent updates to the same note are last-write-wins.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notecode.backend.models.note import Note
from notecode.backend.models.user import User
from notecode.backend.repositories.note import NoteRepository
from notecode.backend.repositories.user import UserRepository
from notecode.backend.schemas.note import NoteCreate, NoteUpdate
from notecode.backend.schemas.user import UserUpsert
from notecode.backend.services.base import BaseService


class DatabaseStorage(BaseService):
    """CRUD and title search over users and their notes."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.users = UserRepository(session)
        self.notes = NoteRepository(session)

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def get_user(self, user_id: str) -> User | None:
        """Get a user by id, or None if there is no such user."""
        return await self._execute_db_operation(
            "get_user",
            self.users.get_by_id_or_none(user_id),
        )

    async def upsert_user(self, data: UserUpsert) -> User:
        """
        Create the user or overwrite its profile fields.

        Safe to call on every login. Fields left unset in data are not
        touched on an existing row.
        """
        fields = data.model_dump(exclude={"id"}, exclude_unset=True)
        self._log_operation("Upserting user", user_id=data.id, fields=sorted(fields))

        return await self._execute_db_operation(
            "upsert_user",
            self.users.upsert(data.id, **fields),
        )

    # -------------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------------

    async def get_notes_by_user_id(self, user_id: str) -> list[Note]:
        """All notes owned by user_id, most recently modified first."""
        return await self._execute_db_operation(
            "get_notes_by_user_id",
            self.notes.list_for_user(user_id),
        )

    async def get_note_by_id(self, note_id: str, user_id: str) -> Note | None:
        """The note if it exists and belongs to user_id, else None."""
        return await self._execute_db_operation(
            "get_note_by_id",
            self.notes.get_for_user(note_id, user_id),
        )

    async def create_note(self, user_id: str, data: NoteCreate) -> Note:
        """Store a new note for user_id. Id and timestamps are generated."""
        self._log_operation("Creating note", user_id=user_id, language=data.language)

        note = await self._execute_db_operation(
            "create_note",
            self.notes.create(
                user_id=user_id,
                title=data.title,
                content=data.content,
                language=data.language,
            ),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def update_note(self, note_id: str, user_id: str, data: NoteUpdate) -> Note:
        """
        Apply the fields set in data to a note owned by user_id.

        updated_at is refreshed even when data carries no fields.

        Raises:
            NotFoundError: If the note does not exist or is not owned by user_id
        """
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        self._log_operation(
            "Updating note",
            note_id=note_id,
            user_id=user_id,
            fields=sorted(update_data),
        )

        return await self._execute_db_operation(
            "update_note",
            self.notes.update_for_user(note_id, user_id, **update_data),
        )

    async def delete_note(self, note_id: str, user_id: str) -> None:
        """
        Delete a note owned by user_id.

        Deleting a note that does not exist, or belongs to someone else,
        succeeds without changing anything.
        """
        deleted = await self._execute_db_operation(
            "delete_note",
            self.notes.delete_for_user(note_id, user_id),
        )
        self._log_operation(
            "Deleted note" if deleted else "Delete matched no note",
            note_id=note_id,
            user_id=user_id,
        )

    async def search_notes(self, user_id: str, query: str) -> list[Note]:
        """
        Notes of user_id whose title contains query, case-insensitively.

        Ordered like get_notes_by_user_id. An empty query returns every
        note of the user.
        """
        self._log_debug("Searching notes", user_id=user_id, query=query)
        return await self._execute_db_operation(
            "search_notes",
            self.notes.search_for_user(user_id, query),
        )
