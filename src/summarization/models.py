"""Value types shared by the summarization gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from config.settings import Settings, SummarizationProvider

# Opaque provider-shaped payloads
RequestEnvelope = dict[str, Any]
ResponseEnvelope = dict[str, Any]


@dataclass(frozen=True)
class SummarizableItem:
    """A piece of long-form content to summarize."""

    title: str
    content: str
    published_at: datetime


@dataclass(frozen=True)
class ProviderConfiguration:
    """Credential, endpoint and model for one provider. Never mutated."""

    api_key: str = field(repr=False)
    endpoint: str
    model: str

    def missing_fields(self) -> list[str]:
        """Names of the fields that are blank."""
        missing = []
        if not self.api_key or not self.api_key.strip():
            missing.append("api_key")
        if not self.endpoint or not self.endpoint.strip():
            missing.append("endpoint")
        if not self.model or not self.model.strip():
            missing.append("model")
        return missing

    @property
    def base_url(self) -> str:
        return self.endpoint.strip().rstrip("/")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        provider: SummarizationProvider | str | None = None,
    ) -> ProviderConfiguration:
        """
        Build a configuration from settings.

        Blank endpoint and model fall back to the provider's defaults;
        the credential never does.
        """
        from .factory import ProviderFactory

        provider = provider or settings.summarization_provider
        defaults = ProviderFactory.defaults(provider)
        return cls(
            api_key=settings.summarization_api_key.get_secret_value(),
            endpoint=settings.summarization_endpoint or defaults.endpoint,
            model=settings.summarization_model or defaults.model,
        )


@dataclass(frozen=True)
class ClassifiedError:
    """A transport failure with its retry decision."""

    code: str
    message: str
    retryable: bool
    status_code: int | None = None

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429


@dataclass
class ItemSummary:
    """Outcome for one item of a batch."""

    title: str
    published_at: datetime
    summary: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
