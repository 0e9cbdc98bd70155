"""Google Gemini client (content-parts convention)."""

from urllib.parse import quote

from src.core.exceptions import MalformedResponseError

from .base import ProviderClient
from .models import RequestEnvelope, ResponseEnvelope, SummarizableItem

TEMPERATURE = 0.7
MAX_OUTPUT_TOKENS = 300


class GeminiBackend(ProviderClient):
    """Gemini generateContent client. The credential travels in the query string."""

    @property
    def name(self) -> str:
        return "gemini"

    def request_url(self) -> str:
        return (
            f"{self._config.base_url}/models/{self._config.model}:generateContent"
            f"?key={quote(self._config.api_key, safe='')}"
        )

    def build_request(self, item: SummarizableItem) -> RequestEnvelope:
        return {
            "contents": [
                {"parts": [{"text": self.format_prompt(item)}]},
            ],
            "generationConfig": {
                "temperature": TEMPERATURE,
                "maxOutputTokens": MAX_OUTPUT_TOKENS,
            },
        }

    def parse_response(self, response: ResponseEnvelope) -> str:
        candidates = response.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise MalformedResponseError(self.name, "No response")

        candidate = candidates[0] if isinstance(candidates[0], dict) else {}
        content = candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
            raise MalformedResponseError(self.name, "Invalid response structure")

        text = parts[0].get("text")
        summary = text.strip() if isinstance(text, str) else ""
        if not summary:
            raise MalformedResponseError(self.name, "Empty summary")
        return summary
