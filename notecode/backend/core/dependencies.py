"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from notecode.backend.core.config import get_app_config
from notecode.backend.core.database import get_db_session
from notecode.backend.core.exceptions import AuthenticationError
from notecode.backend.core.logging import bind_user_context, get_logger
from notecode.backend.core.security import decode_access_token
from notecode.backend.models.user import User
from notecode.backend.services.storage import DatabaseStorage

logger = get_logger(__name__)

DbSession = Annotated[AsyncSession, Depends(get_db_session)]

_bearer = HTTPBearer(auto_error=False)


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """Extract or generate request ID from headers."""
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_storage(db: DbSession) -> DatabaseStorage:
    """Build the entity store for this request's session."""
    return DatabaseStorage(db)


Storage = Annotated[DatabaseStorage, Depends(get_storage)]


def _extract_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    if credentials is not None and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    cookie_name = get_app_config().security.cookie.name
    return request.cookies.get(cookie_name)


async def get_current_user(
    request: Request,
    storage: Storage,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> User:
    """
    Resolve the authenticated user from the access token.

    The token is read from the Authorization header, falling back to the
    session cookie.

    Raises:
        AuthenticationError: If no valid token is present or the user is gone
    """
    token = _extract_token(request, credentials)
    if not token:
        raise AuthenticationError("Not authenticated")

    user_id = decode_access_token(token)
    user = await storage.get_user(user_id)
    if user is None:
        logger.warning("Token subject has no user row", extra={"user_id": user_id})
        raise AuthenticationError("Not authenticated")

    bind_user_context(user.id)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
