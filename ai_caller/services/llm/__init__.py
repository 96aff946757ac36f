"""Language-model services"""

from .openai_service import ResponseGenerationService, MAX_RESPONSE_TOKENS

__all__ = ["ResponseGenerationService", "MAX_RESPONSE_TOKENS"]
