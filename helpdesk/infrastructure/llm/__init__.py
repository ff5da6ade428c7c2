"""
LLM Client Infrastructure
==========================

Wrapper around the OpenAI chat completions API.

The tickets module depends on the `ILLMClient` abstraction only; which
concrete client is built is decided by `build_llm_client` from settings.
"""

import json
import time
from abc import ABC, abstractmethod
from typing import List, Optional

from openai import AsyncOpenAI

from helpdesk.config import Settings
from helpdesk.core import LLMException, ConfigurationException


class ChatCompletionResult:
    """Result of a chat completion."""

    def __init__(
        self,
        content: str,
        model: str,
        prompt_tokens: int,
        completion_tokens: int,
        latency_ms: int
    ):
        self.content = content
        self.model = model
        self.prompt_tokens = prompt_tokens
        self.completion_tokens = completion_tokens
        self.total_tokens = prompt_tokens + completion_tokens
        self.latency_ms = latency_ms


class ILLMClient(ABC):
    """Interface for LLM client operations."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 200,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """Generate chat completion."""

    async def close(self) -> None:
        """Release network resources."""


class OpenAILLMClient(ILLMClient):
    """
    OpenAI client implementation for GPT models.

    Provides async wrapper around OpenAI SDK operations.
    """

    def __init__(self, api_key: Optional[str], model: str, timeout: float = 10.0):
        if not api_key:
            raise ConfigurationException("OpenAI API key not configured")

        # No SDK-level retries: a failed call falls back to the local heuristic.
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 200,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """
        Generate chat completion using OpenAI GPT.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature (0-1)
            max_tokens: Maximum tokens to generate
            operation: Operation type, used for logging

        Returns:
            ChatCompletionResult with generated text

        Raises:
            LLMException: If completion fails
        """
        start_time = time.perf_counter()

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except Exception as e:
            raise LLMException(f"Chat completion failed: {e}")

        content = response.choices[0].message.content
        if not content:
            raise LLMException("No response content from OpenAI")

        usage = response.usage
        return ChatCompletionResult(
            content=content.strip(),
            model=self._model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            latency_ms=int((time.perf_counter() - start_time) * 1000)
        )

    async def close(self) -> None:
        await self._client.close()


class MockLLMClient(ILLMClient):
    """
    Mock LLM client for testing.

    Returns a predictable categorization without calling external APIs.
    """

    def __init__(self, content: Optional[str] = None):
        self._content = content

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.3,
        max_tokens: int = 200,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """Return a canned reply wrapped in a json fence, like real models often do."""
        if self._content is not None:
            content = self._content
        else:
            mock_response = {
                "category": "technical",
                "priority": "medium",
                "confidence": 0.75
            }
            content = f"```json\n{json.dumps(mock_response, indent=2)}\n```"

        return ChatCompletionResult(
            content=content,
            model="mock-model",
            prompt_tokens=100,
            completion_tokens=len(content.split()),
            latency_ms=1
        )


def build_llm_client(settings: Settings) -> Optional[ILLMClient]:
    """Pick the client the settings ask for; None keeps categorization local."""
    if not settings.llm_enabled:
        return None
    if settings.mock_llm:
        return MockLLMClient()
    return OpenAILLMClient(
        settings.openai_api_key,
        settings.llm_model,
        timeout=settings.llm_timeout_seconds,
    )
