"""
Request and response models for agents and accounts
"""

from datetime import datetime
from typing import Any, Dict, Optional, List
from pydantic import BaseModel, ConfigDict, Field


class AgentDetail(BaseModel):
    """Full agent configuration, visible to its owner"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    system_prompt: str
    greeting: Optional[str] = None
    template: Optional[str] = None
    voice: str
    voice_provider: str
    max_call_duration: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AgentDetailResponse(BaseModel):
    agent: AgentDetail


class AgentListResponse(BaseModel):
    agents: List[AgentDetail]


class AgentCreateRequest(BaseModel):
    """
    New agent configuration

    When `template` names a known template, its system prompt, greeting and
    suggested voice replace the ones given here.
    """
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    template: Optional[str] = None
    system_prompt: str = Field(..., min_length=10)
    greeting: Optional[str] = None
    voice: str = "rachel"
    voice_provider: str = "elevenlabs"
    max_call_duration: int = Field(default=600, gt=0)


class AgentUpdateRequest(BaseModel):
    """Partial agent update; only the fields sent are changed"""
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    system_prompt: Optional[str] = Field(default=None, min_length=10)
    greeting: Optional[str] = None
    voice: Optional[str] = None
    voice_provider: Optional[str] = None
    max_call_duration: Optional[int] = Field(default=None, gt=0)
    is_active: Optional[bool] = None

    def changes(self) -> Dict[str, Any]:
        """Fields the client sent. Only description and greeting may be cleared with null."""
        clearable = {"description", "greeting"}
        return {
            field: value
            for field, value in self.model_dump(exclude_unset=True).items()
            if value is not None or field in clearable
        }


class AgentDeleteResponse(BaseModel):
    success: bool


class UserProfile(BaseModel):
    """Account as seen by its owner. Telephony secrets are never included."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: Optional[str] = None
    role: str
    credits_balance: float
    minutes_used: float
    twilio_configured: bool


class UserProfileResponse(BaseModel):
    user: UserProfile


class UserListResponse(BaseModel):
    users: List[UserProfile]
    total: int
