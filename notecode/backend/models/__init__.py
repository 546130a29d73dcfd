# Database models package
from notecode.backend.models.base import Base
from notecode.backend.models.note import Note
from notecode.backend.models.user import User

__all__ = ["Base", "Note", "User"]
