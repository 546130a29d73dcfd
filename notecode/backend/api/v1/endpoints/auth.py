"""
Session API Endpoints.

Login exchanges an identity provider token for a NoteCode access token and
records the user's profile. Logout drops the session cookie.
"""

from fastapi import APIRouter, Response

from notecode.backend.core.config import get_app_config
from notecode.backend.core.dependencies import CurrentUser, RequestId, Storage
from notecode.backend.core.logging import get_logger
from notecode.backend.core.security import create_access_token, decode_identity_token
from notecode.backend.schemas.base import ApiResponse, ResponseMetadata
from notecode.backend.schemas.user import (
    LoginRequest,
    SessionResponse,
    UserResponse,
    UserUpsert,
)

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "/login",
    response_model=ApiResponse[SessionResponse],
    summary="Log in",
    description="Verify an identity token, upsert the user and start a session.",
)
async def login(
    body: LoginRequest,
    response: Response,
    storage: Storage,
    request_id: RequestId,
) -> ApiResponse[SessionResponse]:
    claims = decode_identity_token(body.id_token)
    user = await storage.upsert_user(UserUpsert.from_claims(claims))

    app_config = get_app_config()
    jwt_config = app_config.security.jwt
    cookie_config = app_config.security.cookie

    token = create_access_token(user.id)
    response.set_cookie(
        key=cookie_config.name,
        value=token,
        max_age=jwt_config.access_token_expire_minutes * 60,
        httponly=True,
        secure=app_config.features.auth_secure_cookies,
        samesite=cookie_config.samesite,
    )

    logger.info("User logged in", extra={"user_id": user.id})
    return ApiResponse(
        data=SessionResponse(
            access_token=token,
            user=UserResponse.model_validate(user),
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/logout",
    status_code=204,
    summary="Log out",
    description="Clear the session cookie. Access tokens are stateless.",
)
async def logout() -> Response:
    response = Response(status_code=204)
    response.delete_cookie(get_app_config().security.cookie.name)
    return response


@router.get(
    "/user",
    response_model=ApiResponse[UserResponse],
    summary="Current user",
)
async def current_user(
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[UserResponse]:
    return ApiResponse(
        data=UserResponse.model_validate(user),
        metadata=ResponseMetadata(request_id=request_id),
    )
