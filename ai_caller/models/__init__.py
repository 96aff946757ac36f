"""API data models for AI Caller"""

from .conversation import MessageRole, ConversationTurn
from .call import (
    AgentSummary,
    CallDetail,
    CallDetailResponse,
    CallListResponse,
    ReplyRequest,
    ReplyResponse
)
from .agent import (
    AgentDetail,
    AgentDetailResponse,
    AgentListResponse,
    AgentCreateRequest,
    AgentUpdateRequest,
    AgentDeleteResponse,
    UserProfile,
    UserProfileResponse,
    UserListResponse
)
from .auth import RegisterRequest, LoginRequest, AuthResponse

__all__ = [
    # Conversation
    "MessageRole",
    "ConversationTurn",
    # Call models
    "AgentSummary",
    "CallDetail",
    "CallDetailResponse",
    "CallListResponse",
    "ReplyRequest",
    "ReplyResponse",
    # Agent and account models
    "AgentDetail",
    "AgentDetailResponse",
    "AgentListResponse",
    "AgentCreateRequest",
    "AgentUpdateRequest",
    "AgentDeleteResponse",
    "UserProfile",
    "UserProfileResponse",
    "UserListResponse",
    # Auth models
    "RegisterRequest",
    "LoginRequest",
    "AuthResponse"
]
