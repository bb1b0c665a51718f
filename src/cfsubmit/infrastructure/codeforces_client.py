"""Client for the public Codeforces JSON API."""

import asyncio
import json
import random
import re
import time
from typing import TYPE_CHECKING, Any, Optional

from loguru import logger

from cfsubmit.domain.exceptions import ApiError, NetworkError
from cfsubmit.domain.models import ProblemIdentifier, SubmissionRecord, Verdict

if TYPE_CHECKING:
    from cfsubmit.infrastructure.http_client import AsyncHTTPClient


class CodeforcesApiClient:
    """Reads submission lists through ``contest.status`` and ``user.status``."""

    BASE_URL = "https://codeforces.com/api"

    def __init__(
        self,
        http_client: "AsyncHTTPClient",
        min_interval: float = 2.0,
        max_attempts: int = 3,
        base_url: str = BASE_URL,
    ):
        """
        Initialize client.

        Args:
            http_client: Async HTTP client instance
            min_interval: Minimum gap between two API calls in seconds
            max_attempts: Attempts when the API reports a rate limit
            base_url: API root
        """
        self.http_client = http_client
        self.min_interval = min_interval
        self.max_attempts = max_attempts
        self.base_url = base_url.rstrip("/")
        self._lock = asyncio.Lock()
        self._last_call = 0.0

    async def user_status(self, handle: str, start: int = 1, count: int = 30) -> list[SubmissionRecord]:
        result = await self._call("user.status", {"handle": handle, "from": start, "count": count})
        return [SubmissionRecord.from_dict(item) for item in result]

    async def contest_status(
        self,
        contest_id: int,
        handle: Optional[str] = None,
        start: int = 1,
        count: int = 30,
    ) -> list[SubmissionRecord]:
        params: dict[str, Any] = {"contestId": contest_id, "from": start, "count": count}
        if handle:
            params["handle"] = handle
        result = await self._call("contest.status", params)
        return [SubmissionRecord.from_dict(item) for item in result]

    async def submissions_for(
        self,
        problem: ProblemIdentifier,
        handle: str,
        limit: int = 1000,
        problem_name: Optional[str] = None,
    ) -> list[SubmissionRecord]:
        """
        All submissions of a handle for one problem, newest first.

        Tries ``contest.status`` first, then ``user.status`` matched by problem
        name (covers the same problem in a parallel division) and finally by
        contest id and index. Cancelled submissions are dropped.
        """
        try:
            records = await self.contest_status(problem.contest_id, handle, count=limit)
            matched = [r for r in records if r.matches(problem)]
            if matched:
                return self._newest_first(matched)
        except (ApiError, NetworkError) as e:
            logger.warning(f"contest.status failed for {handle} in {problem.contest_id}: {e}")

        records = await self.user_status(handle, count=limit)
        if problem_name and problem_name.strip():
            target = _normalize_name(problem_name)
            by_name = [r for r in records if r.problem_name and _normalize_name(r.problem_name) == target]
            if by_name:
                return self._newest_first(by_name)

        return self._newest_first([r for r in records if r.contest_id is not None and r.matches(problem)])

    async def latest_submission(
        self, problem: ProblemIdentifier, handle: str, problem_name: Optional[str] = None
    ) -> Optional[SubmissionRecord]:
        records = await self.submissions_for(problem, handle, limit=50, problem_name=problem_name)
        return records[0] if records else None

    async def _call(self, method: str, params: dict[str, Any]) -> Any:
        url = f"{self.base_url}/{method}"
        delay = 0.6

        for attempt in range(1, self.max_attempts + 1):
            await self._wait_turn()
            response = await self.http_client.get(url, params=params, check_status=False)
            try:
                envelope = json.loads(response.text)
            except json.JSONDecodeError as e:
                raise NetworkError(
                    f"{method} returned non-JSON response (HTTP {response.status_code})"
                ) from e

            if envelope.get("status") == "OK":
                logger.debug(f"{method} returned {len(envelope.get('result') or [])} items")
                return envelope.get("result") or []

            comment = envelope.get("comment") or f"{method} failed"
            lowered = comment.lower()
            if ("limit" in lowered or "too many" in lowered) and attempt < self.max_attempts:
                logger.warning(f"{method} rate limited: {comment}")
                await asyncio.sleep(delay + random.uniform(0.0, 0.3))
                delay *= 2
                continue
            raise ApiError(comment)

        raise ApiError(f"{method} kept hitting the rate limit")

    async def _wait_turn(self) -> None:
        async with self._lock:
            gap = time.monotonic() - self._last_call
            if gap < self.min_interval:
                await asyncio.sleep(self.min_interval - gap)
            self._last_call = time.monotonic()

    @staticmethod
    def _newest_first(records: list[SubmissionRecord]) -> list[SubmissionRecord]:
        visible = [r for r in records if r.verdict is not Verdict.CANCELLED]
        return sorted(visible, key=lambda r: r.creation_time, reverse=True)


def _normalize_name(name: str) -> str:
    return re.sub(r"\s+", " ", name.strip().lower())
