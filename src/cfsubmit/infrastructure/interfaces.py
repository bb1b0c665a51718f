"""Protocol interfaces for infrastructure clients."""

from typing import Any, Optional, Protocol

from cfsubmit.domain.models import ProblemIdentifier, SubmissionRecord

from .http_client import HTTPResponse


class HTTPClientProtocol(Protocol):
    """Protocol for HTTP client."""

    async def get_text(self, url: str, headers: Optional[dict[str, str]] = None) -> str:
        """Get text content from URL."""
        ...

    async def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        check_status: bool = True,
    ) -> HTTPResponse:
        """GET a URL."""
        ...

    async def post_form(
        self, url: str, data: dict[str, str], headers: Optional[dict[str, str]] = None
    ) -> HTTPResponse:
        """POST an url-encoded form."""
        ...


class StatusAPIClientProtocol(Protocol):
    """Protocol for the Codeforces submission list API."""

    async def submissions_for(
        self,
        problem: ProblemIdentifier,
        handle: str,
        limit: int = 1000,
        problem_name: Optional[str] = None,
    ) -> list[SubmissionRecord]:
        """Submissions of a handle for one problem, newest first."""
        ...
