"""Anthropic Claude client (messages convention)."""

from src.core.exceptions import MalformedResponseError

from .base import ProviderClient
from .models import RequestEnvelope, ResponseEnvelope, SummarizableItem

ANTHROPIC_VERSION = "2023-06-01"
MAX_TOKENS = 300


class AnthropicBackend(ProviderClient):
    """Claude Messages API client."""

    @property
    def name(self) -> str:
        return "claude"

    def request_url(self) -> str:
        return f"{self._config.base_url}/messages"

    def request_headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._config.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def build_request(self, item: SummarizableItem) -> RequestEnvelope:
        return {
            "model": self._config.model,
            "max_tokens": MAX_TOKENS,
            "messages": [
                {"role": "user", "content": self.format_prompt(item)},
            ],
        }

    def parse_response(self, response: ResponseEnvelope) -> str:
        content = response.get("content")
        if not isinstance(content, list) or not content:
            raise MalformedResponseError(self.name, "No response")

        block = content[0]
        text = block.get("text") if isinstance(block, dict) else None
        summary = text.strip() if isinstance(text, str) else ""
        if not summary:
            raise MalformedResponseError(self.name, "Empty summary")
        return summary
