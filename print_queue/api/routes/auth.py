"""
Authentication routes.
"""

import logging

from fastapi import APIRouter

from print_queue.api.auth import create_access_token, verify_password
from print_queue.api.dependencies import SettingsDep, UserRepositoryDep
from print_queue.api.retry import call_store
from print_queue.exceptions import AuthorizationError
from print_queue.types.api import LoginRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in a print agent",
    description="Exchange a username and password for a JWT bound to the agent's unit.",
)
async def login(
    request: LoginRequest,
    users: UserRepositoryDep,
    settings: SettingsDep,
) -> TokenResponse:
    """
    Authenticate a print agent.

    Raises:
        AuthorizationError: If the credentials do not match.
    """
    user = await call_store(
        "get_user",
        lambda: users.get_by_username(request.username),
        settings,
        read_only=True,
    )
    if user is None or not verify_password(request.password, user.password_hash):
        logger.info("Login failed", extra={"username": request.username})
        raise AuthorizationError("Invalid credentials")

    token = create_access_token(
        tenant_id=user.tenant_id,
        user_id=user.id,
        username=user.username,
    )

    return TokenResponse(
        token=token,
        expires_in=settings.api_access_token_expire_minutes * 60,
    )
