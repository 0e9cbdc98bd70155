"""Tests for the transport executor retry state machine."""

import json

import httpx
import pytest

from src.core.exceptions import MalformedResponseError, RetriesExhaustedError, TransportError
from src.summarization.transport import TransportExecutor

URL = "https://llm.example.com/v1/chat/completions"
BODY = {"model": "test-model", "messages": []}
OK = {"choices": [{"message": {"content": "ok"}}]}


@pytest.mark.asyncio
async def test_success_on_first_attempt(make_transport, mock_backend, clock):
    backend = mock_backend(httpx.Response(200, json=OK))
    transport = make_transport(backend)

    result = await transport.send(URL, BODY, {"Authorization": "Bearer x"})

    assert result == OK
    assert backend.call_count == 1
    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_posts_json_with_headers(make_transport, mock_backend):
    backend = mock_backend(httpx.Response(200, json=OK))
    transport = make_transport(backend)

    await transport.send(URL, BODY, {"x-api-key": "secret"})

    request = backend.requests[0]
    assert request.method == "POST"
    assert str(request.url) == URL
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["x-api-key"] == "secret"
    assert json.loads(request.content) == BODY


@pytest.mark.asyncio
async def test_persistent_503_exhausts_retries(make_transport, mock_backend, clock):
    backend = mock_backend(httpx.Response(503, json={"error": {"message": "overloaded"}}))
    transport = make_transport(backend)

    with pytest.raises(RetriesExhaustedError) as exc_info:
        await transport.send(URL, BODY)

    assert backend.call_count == 3
    assert clock.sleeps == [1.0, 2.0]
    assert clock.now >= 3.0
    assert exc_info.value.attempts == 3
    assert exc_info.value.retryable is True
    assert "after 3 attempts" in str(exc_info.value)
    assert "HTTP 503: overloaded" in str(exc_info.value)


@pytest.mark.parametrize("status", [400, 401, 403, 404])
@pytest.mark.asyncio
async def test_terminal_status_is_not_retried(make_transport, mock_backend, clock, status):
    backend = mock_backend(httpx.Response(status, json={"error": "nope"}))
    transport = make_transport(backend)

    with pytest.raises(TransportError) as exc_info:
        await transport.send(URL, BODY)

    assert not isinstance(exc_info.value, RetriesExhaustedError)
    assert backend.call_count == 1
    assert clock.sleeps == []
    assert exc_info.value.retryable is False
    assert exc_info.value.status_code == status
    assert str(exc_info.value) == f"HTTP {status}: nope"


@pytest.mark.asyncio
async def test_rate_limit_uses_rate_limit_schedule(make_transport, mock_backend, clock):
    backend = mock_backend(
        httpx.Response(429, json={"error": "slow down"}),
        httpx.Response(429, json={"error": "slow down"}),
        httpx.Response(200, json=OK),
    )
    transport = make_transport(backend)

    result = await transport.send(URL, BODY)

    assert result == OK
    assert backend.call_count == 3
    assert clock.sleeps == [5.0, 15.0]


@pytest.mark.asyncio
async def test_retry_after_extends_rate_limit_delay(make_transport, mock_backend, clock):
    backend = mock_backend(
        httpx.Response(429, headers={"Retry-After": "20"}, json={}),
        httpx.Response(429, headers={"Retry-After": "2"}, json={}),
        httpx.Response(200, json=OK),
    )
    transport = make_transport(backend)

    await transport.send(URL, BODY)

    assert clock.sleeps == [20.0, 15.0]


@pytest.mark.asyncio
async def test_server_error_then_success(make_transport, mock_backend, clock):
    backend = mock_backend(httpx.Response(500, text="boom"), httpx.Response(200, json=OK))
    transport = make_transport(backend)

    assert await transport.send(URL, BODY) == OK
    assert backend.call_count == 2
    assert clock.sleeps == [1.0]


@pytest.mark.asyncio
async def test_network_error_is_retried(make_transport, mock_backend, clock):
    backend = mock_backend(httpx.ConnectError("connection refused"), httpx.Response(200, json=OK))
    transport = make_transport(backend)

    assert await transport.send(URL, BODY) == OK
    assert backend.call_count == 2
    assert clock.sleeps == [1.0]


@pytest.mark.asyncio
async def test_persistent_network_error_exhausts_retries(make_transport, mock_backend):
    backend = mock_backend(httpx.ReadTimeout("timed out"))
    transport = make_transport(backend)

    with pytest.raises(RetriesExhaustedError) as exc_info:
        await transport.send(URL, BODY)

    assert backend.call_count == 3
    assert exc_info.value.error.code == "timeout"


@pytest.mark.asyncio
async def test_network_error_mentioning_status_is_still_retried(make_transport, mock_backend):
    backend = mock_backend(httpx.ConnectError("upstream answered 401"), httpx.Response(200, json=OK))
    transport = make_transport(backend)

    assert await transport.send(URL, BODY) == OK
    assert backend.call_count == 2


@pytest.mark.asyncio
async def test_non_json_success_is_malformed_and_not_retried(make_transport, mock_backend):
    backend = mock_backend(httpx.Response(200, text="<html>hello</html>"))
    transport = make_transport(backend)

    with pytest.raises(MalformedResponseError) as exc_info:
        await transport.send(URL, BODY, provider="openai")

    assert backend.call_count == 1
    assert exc_info.value.provider == "openai"


@pytest.mark.asyncio
async def test_undecodable_body_is_malformed_and_not_retried(make_transport, mock_backend, clock):
    backend = mock_backend(httpx.DecodingError("bad gzip"))
    transport = make_transport(backend)

    with pytest.raises(MalformedResponseError) as exc_info:
        await transport.send(URL, BODY, provider="openai")

    assert backend.call_count == 1
    assert clock.sleeps == []
    assert "could not be decoded" in str(exc_info.value)


@pytest.mark.asyncio
async def test_invalid_url_fails_without_sending(make_transport, mock_backend, clock):
    backend = mock_backend(httpx.Response(200, json=OK))
    transport = make_transport(backend)

    with pytest.raises(TransportError) as exc_info:
        await transport.send("http://[::1/chat/completions", BODY)

    assert backend.call_count == 0
    assert clock.sleeps == []
    assert exc_info.value.retryable is False
    assert exc_info.value.error.code == "invalid_url"


@pytest.mark.parametrize(
    "error, code",
    [
        (httpx.UnsupportedProtocol("unsupported protocol 'ftp://'"), "unsupported_protocol"),
        (httpx.TooManyRedirects("Exceeded maximum allowed redirects."), "too_many_redirects"),
    ],
)
@pytest.mark.asyncio
async def test_unusable_request_is_terminal(make_transport, mock_backend, clock, error, code):
    backend = mock_backend(error, httpx.Response(200, json=OK))
    transport = make_transport(backend)

    with pytest.raises(TransportError) as exc_info:
        await transport.send(URL, BODY)

    assert backend.call_count == 1
    assert clock.sleeps == []
    assert exc_info.value.error.code == code


@pytest.mark.asyncio
async def test_per_call_attempt_cap(make_transport, mock_backend, clock):
    backend = mock_backend(httpx.Response(502, json={}))
    transport = make_transport(backend)

    with pytest.raises(RetriesExhaustedError):
        await transport.send(URL, BODY, max_attempts=5)

    assert backend.call_count == 5
    assert clock.sleeps == [1.0, 2.0, 4.0, 4.0]


@pytest.mark.asyncio
async def test_single_attempt_never_sleeps(make_transport, mock_backend, clock):
    backend = mock_backend(httpx.Response(503, json={}))
    transport = make_transport(backend, max_attempts=1)

    with pytest.raises(RetriesExhaustedError):
        await transport.send(URL, BODY)

    assert backend.call_count == 1
    assert clock.sleeps == []


def test_rejects_zero_attempts():
    with pytest.raises(ValueError):
        TransportExecutor(max_attempts=0)


@pytest.mark.asyncio
async def test_shutdown_closes_owned_client():
    transport = TransportExecutor()
    client = transport._get_client()

    await transport.shutdown()

    assert client.is_closed
