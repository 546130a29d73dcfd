"""
Security Utilities.

Access token issuing and verification, and identity token verification.

Two kinds of JWT pass through the service:
    identity token - minted by the upstream identity provider, signed with
                     IDENTITY_SECRET, exchanged once at login
    access token   - minted here at login, signed with JWT_SECRET, sent back
                     on every request (Bearer header or session cookie)
"""

from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from notecode.backend.core.config import get_app_config, get_settings
from notecode.backend.core.exceptions import AuthenticationError
from notecode.backend.core.logging import get_logger
from notecode.backend.core.utils import utc_now

logger = get_logger(__name__)


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token for a user.

    Args:
        user_id: Subject of the token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt

    if expires_delta is None:
        expires_delta = timedelta(minutes=jwt_config.access_token_expire_minutes)

    to_encode = {
        "sub": user_id,
        "exp": utc_now() + expires_delta,
        "type": "access",
        "aud": jwt_config.audience,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=jwt_config.algorithm)


def decode_access_token(token: str) -> str:
    """
    Decode and validate an access token.

    Returns:
        The user id carried in the token

    Raises:
        AuthenticationError: If the token is invalid, expired or not an access token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Access token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token") from e

    user_id = payload.get("sub")
    if payload.get("type") != "access" or not user_id:
        raise AuthenticationError("Invalid or expired token")
    return user_id


def decode_identity_token(token: str) -> dict[str, Any]:
    """
    Verify an identity token from the identity provider.

    Returns:
        Decoded claims; "sub" is guaranteed to be present

    Raises:
        AuthenticationError: If the token is invalid, expired or has no subject
    """
    settings = get_settings()
    identity_config = get_app_config().security.identity
    try:
        claims = jwt.decode(
            token,
            settings.identity_secret,
            algorithms=[identity_config.algorithm],
            audience=identity_config.audience,
        )
    except JWTError as e:
        logger.warning("Identity token rejected", extra={"error": str(e)})
        raise AuthenticationError("Invalid identity token") from e

    if not claims.get("sub"):
        raise AuthenticationError("Identity token has no subject")
    return claims
