"""
Language-model client. One explicitly constructed object wraps the Anthropic
SDK; the orchestrator and solution generator receive it as a parameter so
tests can pass a fake with the same complete() coroutine.
"""

import logging
from functools import lru_cache

import anthropic

from page_audit.config import Settings, get_settings
from page_audit.errors import AIRequestFailure

logger = logging.getLogger(__name__)


class LLMClient:
    def __init__(self, api_key: str, model: str, timeout: float = 60.0, max_tokens: int = 1000):
        self.model = model
        self.max_tokens = max_tokens
        # No automatic retry: a failed request is final for its category.
        self._client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        image_b64: str | None = None,
        media_type: str = "image/jpeg",
        max_tokens: int | None = None,
        category: str = "request",
    ) -> str:
        """Send one user turn (optionally with an image) and return the reply text."""
        content = []
        if image_b64:
            content.append({
                "type": "image",
                "source": {"type": "base64", "media_type": media_type, "data": image_b64},
            })
        content.append({"type": "text", "text": prompt})

        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens or self.max_tokens,
            "messages": [{"role": "user", "content": content}],
        }
        if system:
            kwargs["system"] = system

        try:
            response = await self._client.messages.create(**kwargs)
        except anthropic.APIError as e:
            raise AIRequestFailure(category, str(e)) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        ).strip()
        if not text:
            raise AIRequestFailure(category, "empty response")
        return text


def build_llm_client(settings: Settings | None = None) -> LLMClient | None:
    """A client for the configured key, or None when no key is set."""
    settings = settings or get_settings()
    if not settings.anthropic_api_key:
        return None
    return LLMClient(
        api_key=settings.anthropic_api_key,
        model=settings.default_model,
        timeout=settings.ai_request_timeout,
        max_tokens=settings.ai_max_tokens,
    )


@lru_cache()
def get_llm_client() -> LLMClient | None:
    """Process-wide client, created on first use. A missing key is cached too."""
    client = build_llm_client()
    if client is None:
        logger.warning("ANTHROPIC_API_KEY not set; AI features fall back to heuristics")
    return client
