"""
Authentication and authorization utilities.

Print agents log in with a username and password and receive a JWT
bound to their unit. Producers authenticate with a shared API key.
"""

import hmac
from datetime import UTC, datetime, timedelta
from typing import Annotated

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from print_queue.config import get_settings
from print_queue.constants import API_KEY_HEADER
from print_queue.exceptions import AuthorizationError

# Missing credentials are reported as AuthorizationError, not FastAPI's 403
security = HTTPBearer(auto_error=False)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenData(BaseModel):
    """Data extracted from JWT token."""

    tenant_id: int
    user_id: int | None = None
    username: str | None = None
    exp: datetime


class AuthenticatedUnit(BaseModel):
    """Authenticated print agent context."""

    tenant_id: int
    user_id: int | None = None
    username: str | None = None


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against its stored hash."""
    return pwd_context.verify(password, password_hash)


def create_access_token(
    tenant_id: int,
    user_id: int | None = None,
    username: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token for a print agent.

    Args:
        tenant_id: The unit the agent belongs to.
        user_id: The agent's account id.
        username: The agent's login name.
        expires_delta: Optional custom expiration time.

    Returns:
        The encoded JWT token.
    """
    settings = get_settings()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.api_access_token_expire_minutes)

    now = datetime.now(UTC)
    to_encode = {
        "tenant_id": tenant_id,
        "user_id": user_id,
        "username": username,
        "exp": now + expires_delta,
        "iat": now,
    }

    return jwt.encode(
        to_encode,
        settings.api_secret_key,
        algorithm=settings.api_algorithm,
    )


def decode_token(token: str) -> TokenData:
    """
    Decode and validate a JWT token.

    Args:
        token: The JWT token to decode.

    Returns:
        TokenData extracted from the token.

    Raises:
        AuthorizationError: If token is invalid, expired or has no unit.
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.api_secret_key,
            algorithms=[settings.api_algorithm],
        )
    except JWTError as e:
        raise AuthorizationError(f"Invalid token: {e}") from e

    tenant_id = payload.get("tenant_id")
    if not isinstance(tenant_id, int) or isinstance(tenant_id, bool):
        raise AuthorizationError("Invalid token: missing tenant_id")

    return TokenData(
        tenant_id=tenant_id,
        user_id=payload.get("user_id"),
        username=payload.get("username"),
        exp=datetime.fromtimestamp(payload["exp"], tz=UTC),
    )


async def get_current_unit(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthenticatedUnit:
    """
    FastAPI dependency resolving the calling print agent's unit.

    Raises:
        AuthorizationError: If authentication fails.
    """
    if credentials is None:
        raise AuthorizationError("Missing bearer token")

    token_data = decode_token(credentials.credentials)

    return AuthenticatedUnit(
        tenant_id=token_data.tenant_id,
        user_id=token_data.user_id,
        username=token_data.username,
    )


async def require_producer_key(
    api_key: Annotated[str | None, Header(alias=API_KEY_HEADER)] = None,
) -> None:
    """
    FastAPI dependency checking the producer API key.

    Raises:
        AuthorizationError: If the key is missing or wrong.
    """
    expected = get_settings().producer_api_key
    if not api_key or not hmac.compare_digest(api_key.encode(), expected.encode()):
        raise AuthorizationError("Invalid or missing API key")


# Type alias for dependency injection
CurrentUnit = Annotated[AuthenticatedUnit, Depends(get_current_unit)]
ProducerKey = Depends(require_producer_key)
