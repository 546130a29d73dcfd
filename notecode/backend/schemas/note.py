"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from notecode.backend.models.note import DEFAULT_LANGUAGE

LANGUAGE_PATTERN = r"^[a-z0-9+#.\-]+$"


def _reject_blank(value: str | None) -> str | None:
    if value is not None and not value.strip():
        raise ValueError("Title must not be blank")
    return value


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Note title",
        examples=["Shopping List"],
    )
    content: str = Field(
        default="",
        description="Note body, plain text or source code",
        examples=["print('hello')"],
    )
    language: str = Field(
        default=DEFAULT_LANGUAGE,
        min_length=1,
        max_length=32,
        pattern=LANGUAGE_PATTERN,
        description="Syntax tag for the content",
        examples=["python"],
    )

    check_title = field_validator("title")(_reject_blank)


class NoteUpdate(BaseModel):
    """Schema for a partial note update. Only fields that are sent change."""

    title: str | None = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="Note title",
    )
    content: str | None = Field(
        default=None,
        description="Note body",
    )
    language: str | None = Field(
        default=None,
        min_length=1,
        max_length=32,
        pattern=LANGUAGE_PATTERN,
        description="Syntax tag for the content",
    )

    check_title = field_validator("title")(_reject_blank)


class NoteResponse(BaseModel):
    """Schema for a note in API responses."""

    id: str = Field(description="Note unique identifier")
    user_id: str = Field(description="Owner of the note")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body")
    language: str = Field(description="Syntax tag for the content")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)
