"""
User and Session Schemas.

Pydantic schemas for login, identity claims and user profiles.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from notecode.backend.core.exceptions import AuthenticationError


class LoginRequest(BaseModel):
    """Login payload: an identity token minted by the identity provider."""

    id_token: str = Field(
        ...,
        min_length=1,
        description="Signed identity token (JWT)",
    )


class UserUpsert(BaseModel):
    """Profile fields written on every login."""

    id: str = Field(..., min_length=1, max_length=255, description="Identity provider user id")
    email: str | None = Field(default=None, max_length=320)
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    profile_image_url: str | None = Field(default=None, max_length=2048)

    @classmethod
    def from_claims(cls, claims: dict) -> "UserUpsert":
        """
        Build from decoded identity token claims (sub is the user id).

        Raises:
            AuthenticationError: If the claims do not fit the profile fields
        """
        try:
            return cls(
                id=claims["sub"],
                email=claims.get("email"),
                first_name=claims.get("first_name"),
                last_name=claims.get("last_name"),
                profile_image_url=claims.get("profile_image_url"),
            )
        except ValidationError as e:
            raise AuthenticationError("Invalid identity token") from e


class UserResponse(BaseModel):
    """Schema for a user in API responses."""

    id: str
    email: str | None
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SessionResponse(BaseModel):
    """Returned by login: the access token and the stored profile."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
