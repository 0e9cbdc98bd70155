"""Summarization gateway: the single entry point for callers."""

import asyncio
from typing import Iterable

from config.settings import Settings, SummarizationProvider, get_settings
from src.core.events import EventType, get_event_bus
from src.core.exceptions import DeadlineExceededError, SummarizerError
from src.core.logging import get_logger

from .base import ProviderClient
from .factory import ProviderFactory
from .models import ItemSummary, ProviderConfiguration, SummarizableItem
from .transport import SleepFunc, TransportExecutor

logger = get_logger(__name__)


class SummarizationManager:
    """
    Composes a provider client with the transport executor.

    Holds one immutable ProviderConfiguration for its lifetime; rotating
    credentials means building a new manager. Concurrent ``summarize``
    calls share no mutable state beyond the pooled HTTP client.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        provider: SummarizationProvider | str | None = None,
        config: ProviderConfiguration | None = None,
        transport: TransportExecutor | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        """
        Initialize summarization manager.

        Args:
            settings: Application settings (default from get_settings)
            provider: Provider name (default from settings)
            config: Provider configuration (default built from settings)
            transport: Transport executor (default built from settings)
            sleep: Awaitable sleep used between batch items

        Raises:
            UnknownProviderError: If the provider is not supported
        """
        self._settings = settings or get_settings()
        self._event_bus = get_event_bus()
        self._provider = ProviderFactory.resolve(provider or self._settings.summarization_provider)
        self._config = config or ProviderConfiguration.from_settings(self._settings, self._provider)
        self._transport = transport or TransportExecutor(
            timeout=self._settings.summarization_request_timeout,
            max_attempts=self._settings.summarization_max_attempts,
        )
        self._sleep = sleep or asyncio.sleep
        self._client: ProviderClient = ProviderFactory.create(
            self._provider,
            self._config,
            self._transport,
            self._settings.summarization_timezone,
        )

    @property
    def provider(self) -> SummarizationProvider:
        return self._provider

    @property
    def client(self) -> ProviderClient:
        return self._client

    @property
    def model(self) -> str:
        return self._client.model

    @staticmethod
    def list_supported_providers() -> list[str]:
        return ProviderFactory.list_supported()

    @staticmethod
    def is_provider_supported(name: str) -> bool:
        return ProviderFactory.is_supported(name)

    async def shutdown(self) -> None:
        """Release the HTTP client."""
        await self._transport.shutdown()

    async def summarize(self, item: SummarizableItem) -> str:
        """
        Generate a summary for one item.

        Args:
            item: Title, body and publication timestamp

        Returns:
            Summary text, trimmed

        Raises:
            InvalidConfigurationError: Blank credential, endpoint or model
            TransportError: Non-retryable HTTP failure
            RetriesExhaustedError: Retryable failure on the final attempt
            MalformedResponseError: Success status without a usable summary
            DeadlineExceededError: Overall deadline expired
        """
        await self._event_bus.emit(
            EventType.SUMMARIZATION_STARTED,
            {
                "provider": self._client.name,
                "model": self._client.model,
                "title": item.title,
                "content_length": len(item.content),
            },
            source="summarization_manager",
        )

        try:
            summary = await self._summarize_with_deadline(item)
        except SummarizerError as e:
            logger.error("Failed to summarize %r with %s: %s", item.title, self._client.name, e)
            await self._event_bus.emit(
                EventType.SUMMARIZATION_ERROR,
                {
                    "provider": self._client.name,
                    "title": item.title,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
                source="summarization_manager",
            )
            raise

        await self._event_bus.emit(
            EventType.SUMMARIZATION_COMPLETED,
            {
                "provider": self._client.name,
                "model": self._client.model,
                "title": item.title,
                "summary_length": len(summary),
            },
            source="summarization_manager",
        )
        return summary

    async def _summarize_with_deadline(self, item: SummarizableItem) -> str:
        deadline = self._settings.summarization_deadline_seconds
        if deadline is None:
            return await self._client.summarize(item)
        try:
            return await asyncio.wait_for(self._client.summarize(item), timeout=deadline)
        except asyncio.TimeoutError:
            raise DeadlineExceededError(
                f"Summarization with {self._client.name} exceeded {deadline}s deadline"
            ) from None

    async def summarize_many(
        self,
        items: Iterable[SummarizableItem],
        request_delay: float | None = None,
    ) -> list[ItemSummary]:
        """
        Summarize items in order, pausing between requests.

        A failure on one item is recorded on its result and the batch
        continues.

        Args:
            items: Items to summarize
            request_delay: Seconds between items (default from settings)

        Returns:
            One ItemSummary per item, in input order

        Raises:
            InvalidConfigurationError: Before any item, if configuration is blank
        """
        items = list(items)
        delay = (
            self._settings.summarization_request_delay_seconds
            if request_delay is None
            else request_delay
        )
        self._client.validate_config()

        await self._event_bus.emit(
            EventType.BATCH_STARTED,
            {"provider": self._client.name, "total": len(items)},
            source="summarization_manager",
        )

        results: list[ItemSummary] = []
        for index, item in enumerate(items):
            logger.debug("Summarizing item %d/%d: %s", index + 1, len(items), item.title)
            result = ItemSummary(title=item.title, published_at=item.published_at)
            try:
                result.summary = await self.summarize(item)
            except SummarizerError as e:
                result.error = str(e)
            results.append(result)

            if delay > 0 and index < len(items) - 1:
                logger.debug("Waiting %.1fs before next item to respect rate limits", delay)
                await self._sleep(delay)

        succeeded = sum(1 for r in results if r.ok)
        logger.info("Summarized %d/%d items with %s", succeeded, len(results), self._client.name)
        await self._event_bus.emit(
            EventType.BATCH_COMPLETED,
            {
                "provider": self._client.name,
                "total": len(results),
                "succeeded": succeeded,
            },
            source="summarization_manager",
        )
        return results
