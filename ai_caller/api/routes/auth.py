"""
Authentication API Routes
Account registration, login, and the current account
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ai_caller.api.dependencies import get_app_settings, get_db
from ai_caller.api.middleware.auth import create_access_token, get_current_user
from ai_caller.core.config import Settings
from ai_caller.core.exceptions import InvalidCredentialsError
from ai_caller.core.logging import get_logger
from ai_caller.core.security import hash_password, verify_password
from ai_caller.db.models import User
from ai_caller.db.repository import UserRepository
from ai_caller.models.agent import UserProfile, UserProfileResponse
from ai_caller.models.auth import AuthResponse, LoginRequest, RegisterRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: User, settings: Settings) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(user.id, settings),
        expires_in=settings.jwt_expiration_hours * 3600,
        user=UserProfile.model_validate(user)
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(
    request: RegisterRequest,
    settings: Settings = Depends(get_app_settings),
    db: Session = Depends(get_db)
):
    """
    Register a new account

    Returns 400 if the email is already registered.
    """
    user = UserRepository(db).create_user(
        email=request.email,
        password_hash=hash_password(request.password),
        name=request.name
    )

    logger.info(f"New user registered: {user.email}")
    return _auth_response(user, settings)


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    settings: Settings = Depends(get_app_settings),
    db: Session = Depends(get_db)
):
    """
    Login with email and password
    """
    user = UserRepository(db).get_user_by_email(request.email)

    # Same error whether the email or the password is wrong
    if not user or not verify_password(request.password, user.password_hash):
        raise InvalidCredentialsError()

    logger.info(f"User logged in: {user.email}")
    return _auth_response(user, settings)


@router.get("/me", response_model=UserProfileResponse)
def get_me(user: User = Depends(get_current_user)):
    """Return the authenticated account"""
    return UserProfileResponse(user=UserProfile.model_validate(user))
