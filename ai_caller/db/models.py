"""
Database Models
SQLAlchemy models for accounts, voice agents and their calls
"""

from datetime import datetime
from sqlalchemy import (
    Column, String, Integer, Float, Boolean, DateTime, Text, JSON,
    ForeignKey, Index
)
from sqlalchemy.orm import declarative_base, relationship
import uuid
import enum

Base = declarative_base()


def generate_uuid() -> str:
    """Generate a UUID string"""
    return str(uuid.uuid4())


class UserRole(str, enum.Enum):
    """Account role"""
    USER = "user"
    ADMIN = "admin"


class CallStatus(str, enum.Enum):
    """Call lifecycle status"""
    QUEUED = "queued"
    RINGING = "ringing"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    NO_ANSWER = "no_answer"
    BUSY = "busy"
    CANCELLED = "cancelled"


class CallDirection(str, enum.Enum):
    """Call direction"""
    INBOUND = "inbound"
    OUTBOUND = "outbound"
    WEB = "web"


# ============================================
# ACCOUNT MODELS
# ============================================

class User(Base):
    """Account that owns agents and calls"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    role = Column(String(20), default=UserRole.USER.value, nullable=False)

    # Null for accounts provisioned outside registration; such accounts cannot log in
    password_hash = Column(String(255), nullable=True)

    # Billing
    credits_balance = Column(Float, default=0.0, nullable=False)
    minutes_used = Column(Float, default=0.0, nullable=False)

    # Telephony credentials, optional per account
    twilio_account_sid = Column(Text, nullable=True)
    twilio_auth_token = Column(Text, nullable=True)
    twilio_configured = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    agents = relationship("Agent", back_populates="user", cascade="all, delete-orphan")
    calls = relationship("Call", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


# ============================================
# AGENT MODELS
# ============================================

class Agent(Base):
    """Configured voice agent persona"""
    __tablename__ = "agents"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    system_prompt = Column(Text, nullable=False)
    greeting = Column(Text, nullable=True)
    # Template the agent was created from, if any
    template = Column(String(50), nullable=True)

    # Voice
    voice = Column(String(50), default="rachel", nullable=False)
    voice_provider = Column(String(50), default="elevenlabs", nullable=False)
    max_call_duration = Column(Integer, default=600, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="agents")
    calls = relationship("Call", back_populates="agent")

    __table_args__ = (
        Index("idx_agent_user", "user_id"),
    )


# ============================================
# CALL MODELS
# ============================================

class Call(Base):
    """Voice call records"""
    __tablename__ = "calls"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    agent_id = Column(String(36), ForeignKey("agents.id", ondelete="SET NULL"), nullable=True)

    # Call details
    status = Column(String(30), default=CallStatus.QUEUED.value, nullable=False, index=True)
    direction = Column(String(20), default=CallDirection.OUTBOUND.value, nullable=False)
    from_number = Column(String(20), nullable=True)
    to_number = Column(String(20), nullable=True)
    twilio_call_sid = Column(String(64), unique=True, nullable=True)

    # Usage
    duration_seconds = Column(Integer, nullable=True)
    cost = Column(Float, nullable=True)

    # Conversation turns as [{"role": ..., "content": ...}]
    transcript = Column(JSON, nullable=True)

    # Timing
    started_at = Column(DateTime, nullable=True)
    ended_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="calls")
    agent = relationship("Agent", back_populates="calls")

    __table_args__ = (
        Index("idx_call_user_created", "user_id", "created_at"),
        Index("idx_call_agent", "agent_id"),
    )
