"""
User Model.

Users are keyed by the identifier issued by the upstream identity provider.
Rows are created on first login and refreshed on every later login.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from notecode.backend.models.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """User database model."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
    )
    email: Mapped[str | None] = mapped_column(
        String(320),
        nullable=True,
    )
    first_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    last_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    profile_image_url: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"
