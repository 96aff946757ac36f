"""
OpenAI Response Generation Service
Produces short agent replies for live voice conversations
"""

import inspect
import math
import re
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Optional, Sequence, Union

import openai
from openai import AsyncOpenAI

from ai_caller.core.config import Settings
from ai_caller.core.exceptions import ConfigurationError, ProviderError
from ai_caller.core.logging import get_logger
from ai_caller.models.conversation import ConversationTurn

logger = get_logger(__name__)

# Voice replies are kept short so speech synthesis starts quickly
MAX_RESPONSE_TOKENS = 150

SENTENCE_END = re.compile(r"([.!?])\s")

ChunkCallback = Callable[[str], Union[None, Awaitable[None]]]


class ResponseGenerationService:
    """Service for generating agent replies with the OpenAI chat API"""

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        if not settings.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set", setting="openai_api_key")

        self.model = settings.openai_model
        self.client = client or AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout_seconds,
            max_retries=settings.openai_max_retries
        )

    @staticmethod
    def _build_messages(turns: Sequence[ConversationTurn], system_prompt: str) -> List[Dict[str, str]]:
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend(turn.to_message() for turn in turns)
        return messages

    async def generate(
        self,
        turns: Sequence[ConversationTurn],
        system_prompt: str,
        temperature: float = 0.7
    ) -> str:
        """
        Generate a complete reply

        Args:
            turns: Conversation so far, oldest first
            system_prompt: Agent instructions, sent before the turns
            temperature: Sampling temperature

        Returns:
            Reply text, or "" when the provider returns no content

        Raises:
            ProviderError: On provider or transport failure (not retried)
        """
        logger.debug(f"Generating reply for {len(turns)} turns")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=self._build_messages(turns, system_prompt),
                temperature=temperature,
                max_tokens=MAX_RESPONSE_TOKENS
            )
        except openai.APIStatusError as e:
            logger.error(f"OpenAI API error ({e.status_code}): {e}")
            raise ProviderError(str(e), provider_status=e.status_code) from e
        except openai.OpenAIError as e:
            logger.error(f"OpenAI request failed: {e}")
            raise ProviderError(str(e)) from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def stream(
        self,
        turns: Sequence[ConversationTurn],
        system_prompt: str,
        temperature: float = 0.7
    ) -> AsyncIterator[str]:
        """
        Stream a reply as text fragments, in the order the provider sends them.

        Empty fragments are dropped. Fragments already yielded stay delivered
        if the provider fails part way. Closing the iterator early closes the
        provider stream.

        Raises:
            ProviderError: On provider or transport failure (not retried)
        """
        logger.debug(f"Streaming reply for {len(turns)} turns")

        try:
            provider_stream = await self.client.chat.completions.create(
                model=self.model,
                messages=self._build_messages(turns, system_prompt),
                temperature=temperature,
                max_tokens=MAX_RESPONSE_TOKENS,
                stream=True
            )
        except openai.APIStatusError as e:
            logger.error(f"OpenAI streaming error ({e.status_code}): {e}")
            raise ProviderError(str(e), provider_status=e.status_code) from e
        except openai.OpenAIError as e:
            logger.error(f"OpenAI streaming request failed: {e}")
            raise ProviderError(str(e)) from e

        try:
            async for chunk in provider_stream:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    yield content
        except openai.OpenAIError as e:
            logger.error(f"OpenAI stream interrupted: {e}")
            raise ProviderError(str(e)) from e
        finally:
            await provider_stream.close()

    async def generate_streaming(
        self,
        turns: Sequence[ConversationTurn],
        system_prompt: str,
        on_chunk: ChunkCallback,
        temperature: float = 0.7
    ) -> None:
        """
        Stream a reply into `on_chunk`, returning once the provider completes.

        `on_chunk` may be a plain function or a coroutine function; a plain
        function's return value is ignored.
        """
        async for fragment in self.stream(turns, system_prompt, temperature):
            result = on_chunk(fragment)
            if inspect.isawaitable(result):
                await result

    async def stream_sentences(
        self,
        turns: Sequence[ConversationTurn],
        system_prompt: str,
        temperature: float = 0.7
    ) -> AsyncIterator[str]:
        """Stream a reply grouped into complete sentences, for speech synthesis"""
        buffer = ""

        async for fragment in self.stream(turns, system_prompt, temperature):
            buffer += fragment

            last_index = 0
            for match in SENTENCE_END.finditer(buffer):
                sentence = buffer[last_index:match.end(1)].strip()
                if sentence:
                    yield sentence
                last_index = match.end()

            if last_index:
                buffer = buffer[last_index:]

        if buffer.strip():
            yield buffer.strip()

    @staticmethod
    def estimate_tokens(text: str) -> int:
        """Rough local token count (1 token ~ 4 characters)"""
        return math.ceil(len(text) / 4)
