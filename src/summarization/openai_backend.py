"""Chat-completion convention shared by OpenAI and compatible vendors."""

from typing import Any

from src.core.exceptions import MalformedResponseError

from .base import ProviderClient
from .models import ProviderConfiguration, RequestEnvelope, ResponseEnvelope, SummarizableItem
from .prompts import SYSTEM_PROMPT
from .transport import TransportExecutor

TEMPERATURE = 0.7
MAX_TOKENS = 300


def chat_completion_url(config: ProviderConfiguration) -> str:
    return f"{config.base_url}/chat/completions"


def bearer_headers(config: ProviderConfiguration) -> dict[str, str]:
    return {"Authorization": f"Bearer {config.api_key}"}


def build_chat_completion_request(model: str, prompt: str) -> RequestEnvelope:
    """System + user message body used by every chat-completion backend."""
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        "temperature": TEMPERATURE,
        "max_tokens": MAX_TOKENS,
    }


def first_choice_message(response: ResponseEnvelope, provider: str) -> dict[str, Any]:
    """Return ``choices[0].message`` or raise MalformedResponseError."""
    choices = response.get("choices")
    if not isinstance(choices, list) or not choices:
        raise MalformedResponseError(provider, "No response")
    choice = choices[0]
    message = choice.get("message") if isinstance(choice, dict) else None
    if not isinstance(message, dict):
        raise MalformedResponseError(provider, "Invalid response structure")
    return message


def message_text(message: dict[str, Any], key: str = "content") -> str:
    value = message.get(key)
    return value.strip() if isinstance(value, str) else ""


class OpenAIBackend(ProviderClient):
    """
    Generic chat-completion client.

    Also serves vendors that accept the same request and return the same
    shape, under their own provider name.
    """

    def __init__(
        self,
        config: ProviderConfiguration,
        transport: TransportExecutor | None = None,
        timezone_name: str | None = None,
        provider_name: str = "openai",
    ) -> None:
        super().__init__(config, transport, timezone_name)
        self._provider_name = provider_name

    @property
    def name(self) -> str:
        return self._provider_name

    def request_url(self) -> str:
        return chat_completion_url(self._config)

    def request_headers(self) -> dict[str, str]:
        return bearer_headers(self._config)

    def build_request(self, item: SummarizableItem) -> RequestEnvelope:
        return build_chat_completion_request(self._config.model, self.format_prompt(item))

    def parse_response(self, response: ResponseEnvelope) -> str:
        summary = message_text(first_choice_message(response, self.name))
        if not summary:
            raise MalformedResponseError(self.name, "Empty summary")
        return summary
