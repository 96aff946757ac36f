"""Services for AI Caller"""

from .llm.openai_service import ResponseGenerationService

__all__ = ["ResponseGenerationService"]
