"""HTTP transport with classified retries and backoff."""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx

from src.core.exceptions import MalformedResponseError, RetriesExhaustedError, TransportError
from src.core.logging import get_logger

from . import backoff
from .errors import classify, classify_network_error, classify_request_error
from .models import ClassifiedError, RequestEnvelope, ResponseEnvelope

logger = get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class AttemptSuccess:
    payload: ResponseEnvelope


@dataclass(frozen=True)
class RetryableFailure:
    error: ClassifiedError
    retry_after: float | None = None


@dataclass(frozen=True)
class TerminalFailure:
    error: ClassifiedError


@dataclass(frozen=True)
class MalformedPayload:
    reason: str


AttemptOutcome = AttemptSuccess | RetryableFailure | TerminalFailure | MalformedPayload


def _loggable_url(url: str) -> str:
    # Query strings may carry credentials
    return url.split("?", 1)[0]


class TransportExecutor:
    """
    Sends provider requests with bounded, strictly sequential retries.

    Each attempt resolves to an ``AttemptOutcome``. Terminal failures stop
    immediately; retryable ones sleep per the backoff policy and try again
    until ``max_attempts`` is reached.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: SleepFunc | None = None,
    ) -> None:
        """
        Initialize the executor.

        Args:
            client: HTTP client to use (created lazily if omitted)
            timeout: Per-request timeout in seconds
            max_attempts: Default attempt cap for ``send``
            sleep: Awaitable sleep, injectable for tests
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._sleep = sleep or asyncio.sleep

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client

    async def shutdown(self) -> None:
        """Close the HTTP client if this executor created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def send(
        self,
        url: str,
        body: RequestEnvelope,
        headers: dict[str, str] | None = None,
        max_attempts: int | None = None,
        provider: str = "remote",
    ) -> ResponseEnvelope:
        """
        POST a JSON body and return the decoded JSON response.

        Raises:
            TransportError: First non-retryable failure
            RetriesExhaustedError: Retryable failure on the final attempt
            MalformedResponseError: Success status with an undecodable or non-JSON body
        """
        attempts = max_attempts or self._max_attempts
        safe_url = _loggable_url(url)

        for attempt in range(1, attempts + 1):
            logger.debug("API request attempt %d/%d to %s", attempt, attempts, safe_url)
            outcome = await self._attempt(url, body, headers or {})

            if isinstance(outcome, AttemptSuccess):
                logger.debug("API request to %s succeeded on attempt %d", safe_url, attempt)
                return outcome.payload

            if isinstance(outcome, TerminalFailure):
                logger.warning(
                    "API request to %s failed with non-retryable error: %s",
                    safe_url,
                    outcome.error.message,
                )
                raise TransportError(outcome.error, attempt)

            if isinstance(outcome, MalformedPayload):
                raise MalformedResponseError(provider, outcome.reason)

            if attempt == attempts:
                raise RetriesExhaustedError(outcome.error, attempt)

            wait = backoff.delay(attempt, outcome.error.rate_limited)
            if outcome.retry_after is not None:
                wait = max(wait, outcome.retry_after)
            logger.warning(
                "Request failed with retryable error (attempt %d/%d, rate_limited=%s): %s; "
                "retrying in %.1fs",
                attempt,
                attempts,
                outcome.error.rate_limited,
                outcome.error.message,
                wait,
            )
            await self._sleep(wait)

        # Unreachable with attempts >= 1
        raise RuntimeError("send: unexpected state")

    async def _attempt(
        self,
        url: str,
        body: RequestEnvelope,
        headers: dict[str, str],
    ) -> AttemptOutcome:
        try:
            response = await self._get_client().post(
                url,
                json=body,
                headers={"Content-Type": "application/json", **headers},
            )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            return TerminalFailure(classify_request_error(e))
        except httpx.TransportError as e:
            return RetryableFailure(classify_network_error(e))
        except httpx.DecodingError:
            return MalformedPayload("Response body could not be decoded")
        except httpx.RequestError as e:
            return TerminalFailure(classify_request_error(e))

        if response.status_code >= 400:
            error = classify(response.status_code, _decode_body(response))
            if not error.retryable:
                return TerminalFailure(error)
            retry_after = None
            if error.rate_limited:
                retry_after = backoff.parse_retry_after(response.headers.get("Retry-After"))
            return RetryableFailure(error, retry_after)

        try:
            payload = response.json()
        except ValueError:
            return MalformedPayload("Response body is not valid JSON")
        if not isinstance(payload, dict):
            return MalformedPayload("Response body is not a JSON object")
        return AttemptSuccess(payload)


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
