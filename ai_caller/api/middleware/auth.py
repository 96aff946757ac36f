"""
Authentication Middleware
JWT validation and account resolution
"""

import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ai_caller.api.dependencies import get_app_settings, get_db
from ai_caller.core.config import Settings
from ai_caller.core.exceptions import AuthenticationError, AuthorizationError
from ai_caller.core.logging import get_logger
from ai_caller.db.models import User
from ai_caller.db.repository import UserRepository

logger = get_logger(__name__)
security = HTTPBearer(auto_error=False)

USER_ID_CLAIMS = ("sub", "user_id", "userId")


def create_access_token(
    user_id: str,
    settings: Settings,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed access token for an account

    Args:
        user_id: Account identifier, stored in the `sub` claim
        settings: Provides the signing key and algorithm
        expires_delta: Token lifetime (defaults to jwt_expiration_hours)

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.jwt_expiration_hours))
    payload = {"sub": user_id, "exp": expire, "iat": now}

    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> Optional[Dict[str, Any]]:
    """
    Decode and validate a JWT token

    Returns:
        Decoded payload or None if invalid
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.warning("JWT token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid JWT token: {e}")
        return None


def extract_user_id(payload: Dict[str, Any]) -> Optional[str]:
    """Read the account id from whichever claim carries it"""
    for claim in USER_ID_CLAIMS:
        value = payload.get(claim)
        if value:
            return str(value)
    return None


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_app_settings),
    db: Session = Depends(get_db)
) -> User:
    """
    Dependency that resolves the authenticated account

    Stores the account on request.state.user for later handlers. Declared sync
    so FastAPI runs the account lookup in its threadpool.

    Raises:
        AuthenticationError: If the token is missing, invalid, or names no account
    """
    if not credentials or not credentials.credentials:
        raise AuthenticationError()

    payload = decode_access_token(credentials.credentials, settings)
    if not payload:
        raise AuthenticationError()

    user_id = extract_user_id(payload)
    if not user_id:
        logger.warning("JWT token has no user id claim")
        raise AuthenticationError()

    user = UserRepository(db).get_user(user_id)
    if not user:
        logger.warning(f"Token references unknown account: {user_id}")
        raise AuthenticationError()

    request.state.user = user
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Dependency that only admits administrators"""
    if not user.is_admin:
        raise AuthorizationError()
    return user
