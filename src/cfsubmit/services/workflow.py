"""Async orchestrator for the filename -> submit -> verdict flow."""

from typing import TYPE_CHECKING, Optional

from loguru import logger

from cfsubmit.domain.exceptions import AuthError, ParseError
from cfsubmit.domain.models import (
    LanguageKey,
    LanguageOption,
    ProblemIdentifier,
    SubmissionOutcome,
    SubmissionRecord,
)
from cfsubmit.domain.parsers import FilenameParser

from .cookie_bridge import CookieBridge
from .language_resolver import LanguageResolver
from .status_poller import PollResult, StatusPoller
from .submission import SubmissionService

if TYPE_CHECKING:
    from cfsubmit.infrastructure.codeforces_client import CodeforcesApiClient
    from cfsubmit.infrastructure.http_client import AsyncHTTPClient


class SubmissionWorkflow:
    """Wires the parser, resolver, bridge, submitter and poller together."""

    def __init__(
        self,
        *,
        http_client: "AsyncHTTPClient",
        api_client: "CodeforcesApiClient",
        cookie_bridge: CookieBridge,
        language_resolver: LanguageResolver,
        submission_service: SubmissionService,
        poller: StatusPoller,
    ):
        """
        Initialize async orchestrator with dependency injection.

        Args:
            http_client: HTTP client owning the native cookie jar
            api_client: Codeforces JSON API client
            cookie_bridge: Cookie bridge over the session stores
            language_resolver: Compiler resolver
            submission_service: Web form submitter
            poller: Verdict poller
        """
        self.http_client = http_client
        self.api_client = api_client
        self.cookie_bridge = cookie_bridge
        self.language_resolver = language_resolver
        self.submission_service = submission_service
        self.poller = poller

    @staticmethod
    def parse_filename(filename: str) -> tuple[ProblemIdentifier, LanguageKey]:
        """
        Parse a solution filename.

        Raises:
            ParseError: If the name does not follow ``<contest><index>.<ext>``
        """
        identifier = FilenameParser.parse(filename)
        if identifier is None:
            raise ParseError(f"Cannot derive a Codeforces problem from {filename!r}")
        return identifier, FilenameParser.language_key_for_filename(filename)

    def current_handle(self) -> Optional[str]:
        """Logged-in handle, recovering a login from the other session store if needed."""
        self.cookie_bridge.sync_from_embedded_to_native()
        handle = self.cookie_bridge.read_current_handle()
        if handle is None and self.cookie_bridge.try_sync_other_store_if_needed():
            handle = self.cookie_bridge.read_current_handle()
        return handle

    def require_handle(self) -> str:
        handle = self.current_handle()
        if handle is None:
            raise AuthError("Not logged in to Codeforces")
        return handle

    async def language_options(
        self, problem: ProblemIdentifier, language_key: Optional[LanguageKey | str] = None
    ) -> tuple[list[LanguageOption], Optional[LanguageOption]]:
        """Compiler options for a problem plus the recommended one."""
        self.cookie_bridge.sync_from_embedded_to_native()
        options = await self.language_resolver.fetch_language_options(problem)
        recommended = None
        if language_key is not None:
            recommended = self.language_resolver.pick_recommended(options, language_key)
        return options, recommended

    async def submit(
        self,
        problem: ProblemIdentifier,
        source_code: str,
        *,
        language_id: Optional[str] = None,
        language_key: Optional[LanguageKey | str] = None,
    ) -> SubmissionOutcome:
        self.require_handle()
        return await self.submission_service.submit(
            problem, source_code, language_id=language_id, language_key=language_key
        )

    async def track(
        self,
        problem: ProblemIdentifier,
        handle: Optional[str] = None,
        submitted_at: Optional[float] = None,
    ) -> PollResult:
        """Poll until the newest submission for the problem gets a final verdict."""
        return await self.poller.poll(problem, handle or self.require_handle(), submitted_at)

    async def submit_and_track(
        self,
        problem: ProblemIdentifier,
        source_code: str,
        *,
        language_id: Optional[str] = None,
        language_key: Optional[LanguageKey | str] = None,
    ) -> tuple[SubmissionOutcome, PollResult]:
        handle = self.require_handle()
        outcome = await self.submission_service.submit(
            problem, source_code, language_id=language_id, language_key=language_key
        )
        logger.info(f"Submitted {problem} as {handle}, waiting for the verdict")
        result = await self.poller.poll(problem, handle, outcome.submitted_at)
        return outcome, result

    async def history(
        self, problem: ProblemIdentifier, handle: Optional[str] = None, limit: int = 1000
    ) -> list[SubmissionRecord]:
        """All submissions of the handle for a problem, newest first."""
        return await self.api_client.submissions_for(problem, handle or self.require_handle(), limit=limit)

    async def latest(self, problem: ProblemIdentifier, handle: Optional[str] = None) -> Optional[SubmissionRecord]:
        return await self.api_client.latest_submission(problem, handle or self.require_handle())

    async def close(self) -> None:
        self.poller.stop()
        await self.http_client.close()
