"""Async HTTP client shared by every Codeforces call."""

import asyncio
import random
from dataclasses import dataclass, field
from http.cookiejar import CookieJar
from typing import Any, Mapping, Optional

from curl_cffi.requests import AsyncSession
from curl_cffi.requests.exceptions import RequestException, Timeout
from loguru import logger

from cfsubmit.domain.exceptions import NetworkError, RateLimitedError

DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
}

# Codeforces pages are mostly UTF-8, older ones windows-1251.
FALLBACK_ENCODINGS = ("utf-8", "cp1251", "latin-1")


@dataclass
class HTTPResponse:
    """Decoded HTTP response."""

    status_code: int
    url: str
    text: str
    headers: Mapping[str, str] = field(default_factory=dict)


def decode_body(content: bytes) -> str:
    """Decode a response body trying the encodings Codeforces uses."""
    for encoding in FALLBACK_ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return content.decode("utf-8", errors="ignore")


class AsyncHTTPClient:
    """curl_cffi session wrapper with retries for transient failures."""

    def __init__(
        self,
        timeout: float = 30.0,
        max_attempts: int = 3,
        user_agent: Optional[str] = None,
        impersonate: str = "chrome",
    ):
        """
        Initialize client.

        Args:
            timeout: Per-request timeout in seconds
            max_attempts: Attempts per request, including the first one
            user_agent: Overrides the impersonated browser User-Agent
            impersonate: curl_cffi browser fingerprint
        """
        self.timeout = timeout
        self.max_attempts = max_attempts
        headers = dict(DEFAULT_HEADERS)
        if user_agent:
            headers["User-Agent"] = user_agent
        self._session = AsyncSession(impersonate=impersonate, timeout=timeout, headers=headers)

    @property
    def cookie_jar(self) -> CookieJar:
        """Cookie jar attached to every request."""
        return self._session.cookies.jar

    async def get_text(self, url: str, headers: Optional[dict[str, str]] = None) -> str:
        """Get text content from URL."""
        response = await self.get(url, headers=headers)
        return response.text

    async def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        check_status: bool = True,
    ) -> HTTPResponse:
        return await self._request(
            "GET", url, check_status=check_status, params=params, headers=headers
        )

    async def post_form(
        self,
        url: str,
        data: dict[str, str],
        headers: Optional[dict[str, str]] = None,
    ) -> HTTPResponse:
        form_headers = {"Content-Type": "application/x-www-form-urlencoded; charset=UTF-8"}
        form_headers.update(headers or {})
        return await self._request("POST", url, data=data, headers=form_headers)

    async def close(self) -> None:
        await self._session.close()

    async def __aenter__(self) -> "AsyncHTTPClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _request(
        self, method: str, url: str, check_status: bool = True, **kwargs: Any
    ) -> HTTPResponse:
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_attempts + 1):
            logger.debug(f"{method} {url} (attempt {attempt}/{self.max_attempts})")
            try:
                raw = await self._session.request(method, url, allow_redirects=True, **kwargs)
            except (Timeout, RequestException) as e:
                last_error = e
                if attempt < self.max_attempts:
                    delay = 0.6 * 1.6 ** (attempt - 1) + random.uniform(0.0, 0.3)
                    logger.warning(f"{method} {url} failed ({e}), retrying in {delay:.2f}s")
                    await asyncio.sleep(delay)
                    continue
                break

            status = raw.status_code
            if status == 429 and attempt < self.max_attempts:
                delay = self._retry_after(raw.headers.get("Retry-After")) + random.uniform(0.2, 0.6)
                logger.warning(f"Rate limited on {url}, retrying in {delay:.2f}s")
                await asyncio.sleep(delay)
                continue
            if 500 <= status < 600 and attempt < self.max_attempts:
                logger.warning(f"Server error {status} on {url}, retrying")
                await asyncio.sleep(float(attempt))
                continue

            if status == 429 and check_status:
                raise RateLimitedError("Codeforces is rate limiting requests, try again later")
            if status >= 400 and check_status:
                raise NetworkError(f"HTTP {status} for {url}")

            return HTTPResponse(
                status_code=status,
                url=str(raw.url),
                text=decode_body(raw.content),
                headers=dict(raw.headers),
            )

        logger.error(f"{method} {url} failed after {self.max_attempts} attempts: {last_error}")
        raise NetworkError(f"Request to {url} failed: {last_error}") from last_error

    @staticmethod
    def _retry_after(value: Optional[str]) -> float:
        try:
            return min(max(float(value), 1.0), 10.0) if value else 2.0
        except ValueError:
            return 2.0
