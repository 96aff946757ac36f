"""API Middleware"""

from .auth import (
    create_access_token,
    decode_access_token,
    extract_user_id,
    get_current_user,
    require_admin
)

__all__ = [
    "create_access_token",
    "decode_access_token",
    "extract_user_id",
    "get_current_user",
    "require_admin"
]
