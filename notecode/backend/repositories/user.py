"""
User Repository.

Data access layer for users.
"""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from notecode.backend.core.utils import utc_now
from notecode.backend.models.user import User
from notecode.backend.repositories.base import BaseRepository

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class UserRepository(BaseRepository[User]):
    """Repository for the User model."""

    model = User

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def upsert(self, user_id: str, **fields: Any) -> User:
        """
        Insert a user, or overwrite the supplied fields if the id exists.

        Runs as a single INSERT ... ON CONFLICT (id) DO UPDATE statement.
        updated_at is refreshed on conflict; created_at is left alone.

        Args:
            user_id: Identity provider user id (primary key)
            **fields: Mutable profile columns to write

        Returns:
            The row as stored after the statement
        """
        insert = _UPSERT_INSERTS.get(self.dialect_name)
        if insert is None:
            raise NotImplementedError(
                f"User upsert is not supported on dialect {self.dialect_name!r}"
            )

        now = utc_now()
        stmt = insert(User).values(id=user_id, created_at=now, updated_at=now, **fields)
        stmt = stmt.on_conflict_do_update(
            index_elements=[User.id],
            set_={**fields, "updated_at": now},
        ).returning(User)

        result = await self.session.execute(
            stmt,
            execution_options={"populate_existing": True},
        )
        return result.scalar_one()
