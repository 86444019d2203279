"""
Authentication Dependencies
JWT token handling and admin authentication
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from boosterhub.config import Settings
from boosterhub.exceptions import ConfigurationError

ADMIN_ROLE = "admin"

# Missing credentials are reported as 401 below, not the scheme's default 403
security = HTTPBearer(auto_error=False)


def _signing_key(settings: Settings) -> str:
    if not settings.jwt_configured:
        raise ConfigurationError("JWT_SECRET_KEY not configured")
    return settings.JWT_SECRET_KEY


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT access token

    Args:
        data: Data to encode in token
        settings: Settings holding the signing key and algorithm
        expires_delta: Token expiration time

    Returns:
        Encoded JWT token

    Raises:
        ConfigurationError: If no signing key is configured
    """
    key = _signing_key(settings)
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRATION_HOURS)

    to_encode.update({"exp": expire})

    return jwt.encode(to_encode, key, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> dict:
    """
    Decode JWT access token

    Raises:
        HTTPException: If token is invalid or expired
        ConfigurationError: If no signing key is configured
    """
    key = _signing_key(settings)
    try:
        return jwt.decode(token, key, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise _unauthorized()


async def get_current_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Require an admin bearer token

    Returns:
        {"username", "role"} from the token; username is the audit actor
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")

    payload = decode_access_token(credentials.credentials, request.app.state.settings)

    username = payload.get("sub")
    if not username or payload.get("role") != ADMIN_ROLE:
        raise _unauthorized("Invalid authentication credentials")

    return {"username": username, "role": payload["role"]}
