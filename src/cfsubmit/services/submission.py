"""Service for submitting solutions to Codeforces."""

import asyncio
import time
from typing import Awaitable, Callable, Optional

from loguru import logger

from cfsubmit.domain.exceptions import (
    AuthError,
    ParseError,
    RateLimitedError,
    SubmissionRejected,
)
from cfsubmit.domain.models import (
    LanguageKey,
    ProblemIdentifier,
    SubmissionOutcome,
    SubmissionRequest,
)
from cfsubmit.infrastructure.interfaces import HTTPClientProtocol
from cfsubmit.infrastructure.parsers import (
    extract_submit_error,
    is_login_page,
    is_rate_limit_message,
    is_submission_accepted_url,
    parse_submit_page,
)
from cfsubmit.infrastructure.state_store import JsonStateStore

from .cookie_bridge import CookieBridge
from .language_resolver import BASE_URL, LanguageResolver, build_submit_url, fetch_submit_page


class SubmitThrottle:
    """Keeps a minimum gap between two submit attempts."""

    def __init__(
        self,
        min_interval: float = 1.2,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.min_interval = min_interval
        self.clock = clock
        self.sleep = sleep
        self._last: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        async with self._lock:
            if self._last is not None:
                remaining = self.min_interval - (self.clock() - self._last)
                if remaining > 0:
                    logger.debug(f"Throttling submit for {remaining:.2f}s")
                    await self.sleep(remaining)
            self._last = self.clock()


class SubmissionService:
    """Submits source code through the Codeforces web form."""

    def __init__(
        self,
        *,
        http_client: HTTPClientProtocol,
        cookie_bridge: CookieBridge,
        language_resolver: LanguageResolver,
        history: Optional[JsonStateStore] = None,
        throttle: Optional[SubmitThrottle] = None,
        base_url: str = BASE_URL,
    ):
        """Initialize service with dependencies."""
        self.http_client = http_client
        self.cookie_bridge = cookie_bridge
        self.language_resolver = language_resolver
        self.history = history or JsonStateStore()
        self.throttle = throttle or SubmitThrottle()
        self.base_url = base_url

    def is_duplicate(self, problem: ProblemIdentifier, source_code: str) -> bool:
        """Whether the trimmed source equals the last one submitted for the problem."""
        try:
            previous = self.history.get(self._history_key(problem))
        except Exception as e:
            logger.warning(f"Duplicate check skipped for {problem}: {e}")
            return False
        return previous is not None and previous == source_code.strip()

    async def submit(
        self,
        problem: ProblemIdentifier,
        source_code: str,
        *,
        language_id: Optional[str] = None,
        language_key: Optional[LanguageKey | str] = None,
    ) -> SubmissionOutcome:
        """
        Submit a solution.

        Either ``language_id`` (an exact programTypeId) or ``language_key``
        (a language family resolved against the page) must be given.

        Raises:
            NetworkError: On connectivity problems or Cloudflare interception
            AuthError: If there is no valid session
            ParseError: If the submit page lacks a token or a usable compiler
            SubmissionRejected: If Codeforces refused the submission
        """
        if language_id is None and language_key is None:
            raise ValueError("Either language_id or language_key is required")

        logger.info(f"Submitting solution for {problem}")
        self.cookie_bridge.sync_from_embedded_to_native()
        if self.cookie_bridge.read_current_handle() is None:
            self.cookie_bridge.try_sync_other_store_if_needed()

        duplicate = self.is_duplicate(problem, source_code)
        if duplicate:
            logger.warning(f"Source for {problem} is identical to the previous submission")

        await self.throttle.wait()

        html = await fetch_submit_page(self.http_client, problem, self.base_url)
        page = parse_submit_page(html)

        if language_id is None:
            key = LanguageKey(language_key)
            if not key.submittable:
                raise ParseError(f"Language {key.value!r} cannot be submitted")
            option = self.language_resolver.choose(problem, page.options, key)
            if option is None:
                raise ParseError(f"No compiler on the submit page matches {key.value!r}")
            language_id = option.id
            logger.debug(f"Resolved {key.value} to {option.display_text} ({option.id})")

        request = SubmissionRequest(
            contest_id=problem.contest_id,
            index=problem.index,
            source_code=source_code,
            language_id=language_id,
        )
        submitted_at = time.time()
        await self._post(request, page.csrf_token, page.ftaa, page.bfaa)

        self.history.set(self._history_key(problem), source_code.strip())
        logger.info(f"Submitted {problem} with programTypeId={language_id}")
        return SubmissionOutcome(request=request, submitted_at=submitted_at, duplicate_warning=duplicate)

    async def _post(self, request: SubmissionRequest, csrf_token: str, ftaa: str, bfaa: str) -> None:
        problem = request.problem
        submit_url = build_submit_url(problem, self.base_url)
        form = {
            "csrf_token": csrf_token,
            "ftaa": ftaa,
            "bfaa": bfaa,
            "action": "submitSolutionFormSubmitted",
            "contestId": str(request.contest_id),
            "submittedProblemIndex": request.index,
            "programTypeId": request.language_id,
            "source": request.source_code,
            "tabSize": "4",
        }
        response = await self.http_client.post_form(
            f"{self.base_url}/contest/{request.contest_id}/submit?csrf_token={csrf_token}",
            data=form,
            headers={"Referer": submit_url, "Origin": self.base_url},
        )

        if is_submission_accepted_url(response.url):
            return

        if is_login_page(response.text):
            raise AuthError("Not logged in to Codeforces")

        message = extract_submit_error(response.text)
        if message:
            logger.error(f"Codeforces rejected submission for {problem}: {message}")
            if is_rate_limit_message(message):
                raise RateLimitedError(message)
            raise SubmissionRejected(message)

        raise SubmissionRejected(
            f"Unexpected response after submitting (HTTP {response.status_code}, {response.url})"
        )

    @staticmethod
    def _history_key(problem: ProblemIdentifier) -> str:
        return f"last-source:{problem.cache_key}"
