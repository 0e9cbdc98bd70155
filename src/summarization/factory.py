"""Provider factory: maps provider names to client instances."""

from dataclasses import dataclass
from typing import Callable

from config.settings import SummarizationProvider
from src.core.exceptions import UnknownProviderError

from .anthropic_backend import AnthropicBackend
from .base import ProviderClient
from .deepseek_backend import DeepSeekBackend
from .gemini_backend import GeminiBackend
from .models import ProviderConfiguration
from .openai_backend import OpenAIBackend
from .transport import TransportExecutor

ClientBuilder = Callable[[ProviderConfiguration, TransportExecutor | None, str | None], ProviderClient]


@dataclass(frozen=True)
class ProviderDefaults:
    endpoint: str
    model: str


def _openai_compatible(name: str) -> ClientBuilder:
    def build(config, transport, timezone_name):
        return OpenAIBackend(config, transport, timezone_name, provider_name=name)

    return build


_BUILDERS: dict[SummarizationProvider, ClientBuilder] = {
    SummarizationProvider.OPENAI: _openai_compatible("openai"),
    SummarizationProvider.GEMINI: GeminiBackend,
    SummarizationProvider.CLAUDE: AnthropicBackend,
    SummarizationProvider.DEEPSEEK: DeepSeekBackend,
    SummarizationProvider.GLM: _openai_compatible("glm"),
    SummarizationProvider.GENERIC: _openai_compatible("generic"),
}

_DEFAULTS: dict[SummarizationProvider, ProviderDefaults] = {
    SummarizationProvider.OPENAI: ProviderDefaults("https://api.openai.com/v1", "gpt-3.5-turbo"),
    SummarizationProvider.GEMINI: ProviderDefaults(
        "https://generativelanguage.googleapis.com/v1", "gemini-pro"
    ),
    SummarizationProvider.CLAUDE: ProviderDefaults(
        "https://api.anthropic.com/v1", "claude-3-haiku-20240307"
    ),
    SummarizationProvider.DEEPSEEK: ProviderDefaults("https://api.deepseek.com/v1", "deepseek-chat"),
    SummarizationProvider.GLM: ProviderDefaults("https://open.bigmodel.cn/api/paas/v4", "glm-4"),
    SummarizationProvider.GENERIC: ProviderDefaults("https://api.openai.com/v1", "gpt-3.5-turbo"),
}


class ProviderFactory:
    """Creates provider clients by name. Lookup is case-insensitive."""

    @staticmethod
    def resolve(provider: SummarizationProvider | str) -> SummarizationProvider:
        """
        Resolve a provider name to its identity.

        Raises:
            UnknownProviderError: If the name is not supported
        """
        if isinstance(provider, SummarizationProvider):
            return provider
        try:
            return SummarizationProvider(str(provider).strip().lower())
        except ValueError:
            raise UnknownProviderError(str(provider)) from None

    @classmethod
    def create(
        cls,
        provider: SummarizationProvider | str,
        config: ProviderConfiguration,
        transport: TransportExecutor | None = None,
        timezone_name: str | None = None,
    ) -> ProviderClient:
        """
        Create a client for the specified provider.

        Args:
            provider: Provider name, any casing
            config: Provider configuration
            transport: Shared transport executor (optional)
            timezone_name: IANA zone for prompt timestamps

        Returns:
            ProviderClient instance
        """
        identity = cls.resolve(provider)
        return _BUILDERS[identity](config, transport, timezone_name)

    @staticmethod
    def list_supported() -> list[str]:
        """Supported provider names in declaration order."""
        return [provider.value for provider in SummarizationProvider]

    @classmethod
    def is_supported(cls, provider: str) -> bool:
        try:
            cls.resolve(provider)
        except UnknownProviderError:
            return False
        return True

    @classmethod
    def defaults(cls, provider: SummarizationProvider | str) -> ProviderDefaults:
        """Default endpoint and model for a provider."""
        return _DEFAULTS[cls.resolve(provider)]
