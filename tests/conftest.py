"""Shared fixtures: settings, virtual clock, and mock provider backends."""

from datetime import datetime, timezone
from typing import Any, Callable

import httpx
import pytest

from config.settings import Settings, get_settings
from src.core.events import reset_event_bus
from src.summarization.models import ProviderConfiguration, SummarizableItem
from src.summarization.transport import TransportExecutor


class VirtualClock:
    """Records sleeps and advances virtual time instead of blocking."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class MockBackend:
    """httpx MockTransport handler replaying a scripted list of responses.

    Each entry is an ``httpx.Response``, an exception instance to raise, or
    a callable taking the request. The last entry repeats once the script
    runs out.
    """

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.responses)) - 1
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(request)
        return response


def success_payload(provider: str, text: str) -> dict[str, Any]:
    if provider == "gemini":
        return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}
    if provider == "claude":
        return {"content": [{"type": "text", "text": text}], "role": "assistant"}
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": text}}]}


def extract_prompt(provider: str, body: dict[str, Any]) -> str:
    if provider == "gemini":
        return body["contents"][0]["parts"][0]["text"]
    return body["messages"][-1]["content"]


@pytest.fixture(autouse=True)
def _isolate_globals():
    reset_event_bus()
    get_settings.cache_clear()
    yield
    reset_event_bus()
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        summarization_provider="openai",
        summarization_api_key="sk-test-key-123456",
        summarization_endpoint="https://llm.example.com/v1",
        summarization_model="test-model",
        summarization_request_delay_seconds=0,
    )


@pytest.fixture
def provider_config() -> ProviderConfiguration:
    return ProviderConfiguration(
        api_key="sk-test-key-123456",
        endpoint="https://llm.example.com/v1",
        model="test-model",
    )


@pytest.fixture
def item() -> SummarizableItem:
    return SummarizableItem(
        title="Rust 2.0 Released",
        content="The Rust team announced a new major version with many improvements.",
        published_at=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def make_transport(clock: VirtualClock) -> Callable[..., TransportExecutor]:
    def _make(backend: MockBackend, max_attempts: int = 3) -> TransportExecutor:
        client = httpx.AsyncClient(transport=httpx.MockTransport(backend))
        return TransportExecutor(client=client, max_attempts=max_attempts, sleep=clock.sleep)

    return _make


@pytest.fixture
def payload() -> Callable[[str, str], dict[str, Any]]:
    return success_payload


@pytest.fixture
def prompt_of() -> Callable[[str, dict[str, Any]], str]:
    return extract_prompt


@pytest.fixture
def mock_backend() -> type[MockBackend]:
    return MockBackend
