"""
Conversation turn model
"""

import enum
from typing import Dict
from pydantic import BaseModel, ConfigDict


class MessageRole(str, enum.Enum):
    """Speaker of a conversation turn"""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ConversationTurn(BaseModel):
    """One role-tagged message in a conversation history"""
    model_config = ConfigDict(from_attributes=True)

    role: MessageRole
    content: str

    def to_message(self) -> Dict[str, str]:
        """Chat-completion message payload"""
        return {"role": self.role.value, "content": self.content}
