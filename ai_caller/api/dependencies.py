"""
Request dependencies

Handles created at startup live on app.state; these providers hand them to
route handlers and can be overridden in tests.
"""

from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from ai_caller.core.config import Settings
from ai_caller.core.exceptions import ConfigurationError
from ai_caller.core.voice_config import VoiceConfig
from ai_caller.services.llm.openai_service import ResponseGenerationService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_voice_config(request: Request) -> VoiceConfig:
    return request.app.state.voice_config


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency that provides a database session
    For use with FastAPI's Depends()
    """
    db = request.app.state.database.new_session()
    try:
        yield db
    finally:
        db.close()


def get_response_service(request: Request) -> ResponseGenerationService:
    service = getattr(request.app.state, "response_service", None)
    if service is None:
        raise ConfigurationError("Response generation is not configured", setting="openai_api_key")
    return service
