"""
Note Model.

A text or code note owned by exactly one user.
"""

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notecode.backend.models.base import Base, TimestampMixin, UUIDMixin

DEFAULT_LANGUAGE = "text"


class Note(UUIDMixin, TimestampMixin, Base):
    """
    Note database model.

    Every query against this table filters on user_id as well as id, so a
    note is invisible to anyone but its owner.
    """

    __tablename__ = "notes"
    __table_args__ = (
        Index("ix_notes_user_id_updated_at", "user_id", "updated_at"),
    )

    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
    )
    language: Mapped[str] = mapped_column(
        String(32),
        default=DEFAULT_LANGUAGE,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, user_id={self.user_id}, title={self.title!r})>"
