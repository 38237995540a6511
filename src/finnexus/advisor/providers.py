"""Chat-completion providers for the finance advisor."""

import logging
from typing import Protocol

from openai import OpenAI

logger = logging.getLogger(__name__)

APP_TITLE = "FinNexus Enterprise"
APP_REFERER = "https://finnexus.enterprise"


class ChatProvider(Protocol):
    """Minimal protocol every chat backend implements."""

    def complete(self, messages: list[dict]) -> str:
        """Return the model reply for a list of chat messages."""


class OpenAIChatProvider:
    """Provider for any OpenAI-compatible chat endpoint (OpenRouter by default)."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        model: str = "xiaomi/mimo-v2-flash:free",
        timeout: float = 30.0,
    ):
        self.model = model
        self._client = OpenAI(base_url=base_url, api_key=api_key, timeout=timeout)

    def complete(self, messages: list[dict]) -> str:
        logger.debug("Requesting chat completion from model %s", self.model)
        completion = self._client.chat.completions.create(
            model=self.model,
            messages=messages,
            # OpenRouter uses these to identify the calling app
            extra_headers={
                "HTTP-Referer": APP_REFERER,
                "X-Title": APP_TITLE,
            },
        )
        if not completion.choices:
            return ""
        return (completion.choices[0].message.content or "").strip()
