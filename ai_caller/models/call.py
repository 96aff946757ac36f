"""
Request and response models for calls
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .conversation import ConversationTurn


class AgentSummary(BaseModel):
    """Public projection of the agent attached to a call"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    voice: Optional[str] = None


class CallDetail(BaseModel):
    """A call as returned to its owner"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    agent_id: Optional[str] = None
    status: str
    direction: str
    from_number: Optional[str] = None
    to_number: Optional[str] = None
    twilio_call_sid: Optional[str] = None
    duration_seconds: Optional[int] = None
    cost: Optional[float] = None
    transcript: List[ConversationTurn] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    agent: Optional[AgentSummary] = None

    @field_validator("transcript", mode="before")
    @classmethod
    def _empty_transcript(cls, value):
        return value or []


class CallDetailResponse(BaseModel):
    call: CallDetail


class CallListResponse(BaseModel):
    calls: List[CallDetail]
    total: int


class ReplyRequest(BaseModel):
    """Conversation so far, for generating the agent's next reply"""
    model_config = {
        "json_schema_extra": {
            "example": {
                "turns": [
                    {"role": "user", "content": "Hi, do you have a table for two tonight?"}
                ],
                "temperature": 0.7,
                "stream": False
            }
        }
    }

    turns: List[ConversationTurn] = Field(..., min_length=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    stream: bool = Field(default=False, description="Stream text fragments as they arrive")


class ReplyResponse(BaseModel):
    reply: str
    estimated_tokens: int
