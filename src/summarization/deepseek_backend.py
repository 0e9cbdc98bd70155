"""DeepSeek client: chat-completion shape with reasoning-model output."""

from src.core.exceptions import MalformedResponseError

from .base import ProviderClient
from .models import RequestEnvelope, ResponseEnvelope, SummarizableItem
from .openai_backend import (
    bearer_headers,
    build_chat_completion_request,
    chat_completion_url,
    first_choice_message,
    message_text,
)


class DeepSeekBackend(ProviderClient):
    """
    DeepSeek API client.

    Reasoning models (deepseek-reasoner) return two fields: ``content``
    with the final answer and ``reasoning_content`` with the chain of
    thought. The answer is preferred; the reasoning is used only when the
    answer is empty.
    """

    @property
    def name(self) -> str:
        return "deepseek"

    def request_url(self) -> str:
        return chat_completion_url(self._config)

    def request_headers(self) -> dict[str, str]:
        return bearer_headers(self._config)

    def build_request(self, item: SummarizableItem) -> RequestEnvelope:
        return build_chat_completion_request(self._config.model, self.format_prompt(item))

    def parse_response(self, response: ResponseEnvelope) -> str:
        message = first_choice_message(response, self.name)
        summary = message_text(message) or message_text(message, "reasoning_content")
        if not summary:
            raise MalformedResponseError(
                self.name,
                "Empty summary (both content and reasoning_content are empty)",
            )
        return summary
