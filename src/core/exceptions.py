"""Custom exceptions for the summarization gateway."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.summarization.models import ClassifiedError


class SummarizerError(Exception):
    """Base exception for all gateway errors."""

    pass


class ConfigurationError(SummarizerError):
    """Error related to configuration. Detected before any network I/O."""

    pass


class InvalidConfigurationError(ConfigurationError):
    """Credential, endpoint or model is blank."""

    def __init__(self, provider: str, missing: list[str]) -> None:
        self.provider = provider
        self.missing = list(missing)
        super().__init__(
            f"Invalid {provider} configuration: missing {', '.join(self.missing)}"
        )


class UnknownProviderError(ConfigurationError):
    """Provider name is not in the supported set."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"Unknown AI provider: {provider}")


class SummarizationError(SummarizerError):
    """Error during summarization."""

    pass


class TransportError(SummarizationError):
    """HTTP or network failure, classified by the error taxonomy."""

    def __init__(
        self,
        error: ClassifiedError,
        attempts: int = 1,
        message: str | None = None,
    ) -> None:
        self.error = error
        self.attempts = attempts
        super().__init__(message or error.message)

    @property
    def retryable(self) -> bool:
        return self.error.retryable

    @property
    def status_code(self) -> int | None:
        return self.error.status_code


class RetriesExhaustedError(TransportError):
    """The last retryable failure after the final attempt."""

    def __init__(self, error: ClassifiedError, attempts: int) -> None:
        super().__init__(
            error,
            attempts,
            f"Failed to make API request after {attempts} attempts: {error.message}",
        )


class MalformedResponseError(SummarizationError):
    """Success status, but the body lacks a usable summary."""

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        self.reason = reason
        super().__init__(f"{reason} from {provider} API")


class DeadlineExceededError(SummarizationError):
    """The overall per-item deadline expired."""

    pass
