"""Abstract base interface for provider clients."""

from abc import ABC, abstractmethod

from src.core.exceptions import InvalidConfigurationError
from src.core.logging import get_logger

from .models import ProviderConfiguration, RequestEnvelope, ResponseEnvelope, SummarizableItem
from .prompts import build_prompt
from .transport import TransportExecutor

logger = get_logger(__name__)


class ProviderClient(ABC):
    """
    One backend's wire convention.

    Subclasses decide how a request is shaped, where it is sent, how the
    credential travels, and where the summary sits in the response.
    Behaviour shared by several conventions lives in module-level helpers,
    not in intermediate base classes.
    """

    def __init__(
        self,
        config: ProviderConfiguration,
        transport: TransportExecutor | None = None,
        timezone_name: str | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Immutable credential/endpoint/model
            transport: Executor used to send requests (a private one, closed
                by ``shutdown``, if omitted)
            timezone_name: IANA zone for rendering publication timestamps
        """
        self._config = config
        self._owns_transport = transport is None
        self._transport = transport or TransportExecutor()
        self._timezone_name = timezone_name

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        pass

    @property
    def model(self) -> str:
        return self._config.model

    @property
    def config(self) -> ProviderConfiguration:
        return self._config

    @abstractmethod
    def request_url(self) -> str:
        """Full URL the request is posted to."""
        pass

    def request_headers(self) -> dict[str, str]:
        """Authentication and version headers for this backend."""
        return {}

    @abstractmethod
    def build_request(self, item: SummarizableItem) -> RequestEnvelope:
        """Build the provider-specific request body."""
        pass

    @abstractmethod
    def parse_response(self, response: ResponseEnvelope) -> str:
        """
        Extract the trimmed summary text.

        Raises:
            MalformedResponseError: If the expected fields are missing or empty
        """
        pass

    async def shutdown(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self._transport.shutdown()

    def format_prompt(self, item: SummarizableItem) -> str:
        return build_prompt(item, self._timezone_name)

    def validate_config(self) -> None:
        """
        Fail fast on a blank credential, endpoint or model.

        Raises:
            InvalidConfigurationError: Naming the blank fields
        """
        missing = self._config.missing_fields()
        if missing:
            logger.error("%s configuration is missing %s", self.name, ", ".join(missing))
            raise InvalidConfigurationError(self.name, missing)

    async def summarize(self, item: SummarizableItem) -> str:
        """Validate, send, and parse. No network call on invalid configuration."""
        self.validate_config()
        request = self.build_request(item)
        response = await self._transport.send(
            self.request_url(),
            request,
            self.request_headers(),
            provider=self.name,
        )
        return self.parse_response(response)
