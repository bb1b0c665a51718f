"""Unit tests for the retrying HTTP client."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from curl_cffi.requests.exceptions import Timeout

from cfsubmit.domain.exceptions import NetworkError, RateLimitedError
from cfsubmit.infrastructure.http_client import AsyncHTTPClient, decode_body


def raw_response(status_code, content=b"ok", headers=None, url="https://codeforces.com/"):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.headers = headers or {}
    response.url = url
    return response


@pytest.fixture
def sleeps(monkeypatch):
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr("cfsubmit.infrastructure.http_client.asyncio.sleep", fake_sleep)
    return delays


def make_client(*responses):
    client = AsyncHTTPClient(max_attempts=3)
    client._session = AsyncMock()
    client._session.request.side_effect = list(responses)
    return client


@pytest.mark.asyncio
async def test_server_error_is_retried(sleeps):
    client = make_client(raw_response(503), raw_response(200, b"<html>fine</html>"))

    text = await client.get_text("https://codeforces.com/contest/1873")

    assert text == "<html>fine</html>"
    assert sleeps == [1.0]


@pytest.mark.asyncio
async def test_rate_limit_honours_retry_after(sleeps):
    client = make_client(raw_response(429, headers={"Retry-After": "4"}), raw_response(200))

    await client.get("https://codeforces.com/api/user.status")

    assert 4.2 <= sleeps[0] <= 4.6


@pytest.mark.asyncio
async def test_persistent_rate_limit_raises(sleeps):
    client = make_client(raw_response(429), raw_response(429), raw_response(429))

    with pytest.raises(RateLimitedError):
        await client.get("https://codeforces.com/api/user.status")


@pytest.mark.asyncio
async def test_transport_errors_exhaust_attempts(sleeps):
    """Test that repeated timeouts end in a NetworkError."""
    client = make_client(Timeout("timed out"), Timeout("timed out"), Timeout("timed out"))

    with pytest.raises(NetworkError):
        await client.get("https://codeforces.com/")

    assert len(sleeps) == 2
    assert client._session.request.await_count == 3


@pytest.mark.asyncio
async def test_client_error_status(sleeps):
    client = make_client(raw_response(404))

    with pytest.raises(NetworkError):
        await client.get("https://codeforces.com/contest/99999")


@pytest.mark.asyncio
async def test_check_status_disabled_returns_body(sleeps):
    client = make_client(raw_response(400, b'{"status":"FAILED"}'))

    response = await client.get("https://codeforces.com/api/contest.status", check_status=False)

    assert response.status_code == 400
    assert response.text == '{"status":"FAILED"}'


def test_decode_body_falls_back_to_cp1251():
    assert decode_body("Задача".encode("cp1251")) == "Задача"
