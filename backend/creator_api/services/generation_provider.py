"""
OpenAI chat-completions client and placeholder image references
"""

import httpx
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol
from urllib.parse import quote

from creator_api.core.config import settings
from creator_api.core.errors import ProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedContent:
    text: str
    image_url: str


class GenerationProvider(Protocol):
    async def generate(self, prompt: str, api_key: str) -> GeneratedContent:
        ...


def placeholder_image_url(prompt: str, base_url: Optional[str] = None) -> str:
    """Placeholder image captioned with the first 50 characters of the prompt"""
    base_url = base_url or settings.PLACEHOLDER_IMAGE_BASE_URL
    return f"{base_url}?text={quote(prompt[:50], safe='')}"


class OpenAIChatProvider:
    """Client for the OpenAI chat completions endpoint, authenticated per user"""

    def __init__(
        self,
        api_base: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        image_base_url: Optional[str] = None,
    ):
        self.api_base = (api_base or settings.OPENAI_API_BASE).rstrip("/")
        self.model = model or settings.OPENAI_MODEL
        self.max_tokens = max_tokens or settings.OPENAI_MAX_TOKENS
        self.timeout = httpx.Timeout(timeout_seconds or settings.PROVIDER_TIMEOUT_SECONDS)
        self.image_base_url = image_base_url or settings.PLACEHOLDER_IMAGE_BASE_URL

    @property
    def completions_url(self) -> str:
        return f"{self.api_base}/chat/completions"

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _upstream_message(response: httpx.Response) -> str:
        try:
            body: Any = response.json()
        except ValueError:
            return ""
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            return str(body["error"].get("message") or "")
        return ""

    async def generate(self, prompt: str, api_key: str) -> GeneratedContent:
        """
        Generate text for a prompt; one attempt, no retries

        Raises:
            ProviderError: non-success status, transport failure or timeout
        """
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.completions_url, json=payload, headers=self._headers(api_key)
                )
        except httpx.TimeoutException:
            logger.error("OpenAI API request timed out")
            raise ProviderError("Failed to generate content from AI. The request timed out.")
        except httpx.HTTPError as e:
            logger.error(f"OpenAI API transport error: {e.__class__.__name__}")
            raise ProviderError("Failed to generate content from AI.")

        if response.status_code >= 400:
            upstream = self._upstream_message(response)
            logger.error(f"OpenAI API Error: status={response.status_code} message={upstream}")
            raise ProviderError(f"Failed to generate content from AI. {upstream}".strip())

        try:
            text = response.json()["choices"][0]["message"]["content"].strip()
        except (ValueError, KeyError, IndexError, TypeError, AttributeError):
            logger.error("OpenAI API returned an unexpected response shape")
            raise ProviderError("Failed to generate content from AI.")

        return GeneratedContent(text=text, image_url=placeholder_image_url(prompt, self.image_base_url))
