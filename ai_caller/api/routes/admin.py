"""
Administration routes
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ai_caller.api.dependencies import get_db
from ai_caller.api.middleware.auth import require_admin
from ai_caller.core.logging import get_logger
from ai_caller.db.models import User
from ai_caller.db.repository import UserRepository
from ai_caller.models.agent import UserListResponse, UserProfile

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=UserListResponse)
def list_users(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    List all accounts (administrators only)

    - **limit**: Maximum number of accounts to return (1-100)
    - **offset**: Number of accounts to skip
    """
    users, total = UserRepository(db).list_users(limit=limit, offset=offset)
    logger.info(f"Admin {admin.id} listed {len(users)} of {total} accounts")
    return UserListResponse(users=[UserProfile.model_validate(u) for u in users], total=total)
