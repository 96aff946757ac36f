"""
Request and response models for registration and login
"""

from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from .agent import UserProfile


class RegisterRequest(BaseModel):
    """Account registration request"""
    email: EmailStr = Field(..., description="Account email")
    password: str = Field(..., min_length=8, description="Password (min 8 chars)")
    name: Optional[str] = Field(default=None, description="Display name")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    """Issued bearer token with the account it belongs to"""
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserProfile
