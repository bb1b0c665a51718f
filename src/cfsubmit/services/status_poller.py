"""Tracks the verdict of a just-submitted solution."""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Sequence

from loguru import logger

from cfsubmit.domain.exceptions import SubmissionError
from cfsubmit.domain.models import ProblemIdentifier, SubmissionRecord
from cfsubmit.infrastructure.interfaces import StatusAPIClientProtocol

from .polling import BackoffPolicy, poll_until


class PollState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    TERMINAL = "terminal"
    TIMED_OUT = "timed_out"
    ERROR = "error"
    SUPERSEDED = "superseded"


@dataclass
class PollResult:
    """Snapshot of a poll, as visible to the caller."""

    state: PollState
    problem: Optional[ProblemIdentifier] = None
    handle: Optional[str] = None
    record: Optional[SubmissionRecord] = None
    attempts: int = 0
    error: Optional[Exception] = None

    @property
    def message(self) -> str:
        if self.state is PollState.TIMED_OUT:
            return "Still judging, check again later"
        if self.state is PollState.ERROR:
            return str(self.error)
        if self.record is not None:
            return self.record.verdict.value
        return self.state.value


class StatusPoller:
    """Polls the submission list until a terminal verdict shows up.

    Only one poll runs at a time: ``start`` cancels the previous one, and a
    generation counter keeps a late answer from an older poll out of the
    visible result.
    """

    def __init__(
        self,
        api_client: StatusAPIClientProtocol,
        *,
        initial_delay: float = 1.0,
        interval: float = 2.0,
        max_attempts: int = 30,
        budget: float = 60.0,
        clock_skew: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_update: Optional[Callable[[PollResult], None]] = None,
    ):
        self.api_client = api_client
        self.policy = BackoffPolicy.fixed(
            interval, initial_delay=initial_delay, max_attempts=max_attempts, budget=budget
        )
        self.clock_skew = clock_skew
        self.sleep = sleep
        self.on_update = on_update
        self._generation = 0
        self._task: Optional[asyncio.Task[PollResult]] = None
        self._runner: Optional[asyncio.Task[PollResult]] = None
        self._last_terminal: dict[tuple[str, str], int] = {}
        self._result = PollResult(state=PollState.IDLE)

    @property
    def result(self) -> PollResult:
        return self._result

    @property
    def state(self) -> PollState:
        return self._result.state

    def start(
        self,
        problem: ProblemIdentifier,
        handle: str,
        submitted_at: Optional[float] = None,
    ) -> "asyncio.Task[PollResult]":
        """Start tracking the newest submission of ``handle`` for ``problem``."""
        self._cancel_current()
        self._generation += 1
        generation = self._generation

        logger.info(f"Polling verdict for {problem} by {handle}")
        self._publish(generation, PollResult(state=PollState.POLLING, problem=problem, handle=handle))
        self._runner = asyncio.create_task(self._run(generation, problem, handle, submitted_at))
        self._task = asyncio.create_task(self._watch(generation, problem, handle, self._runner))
        return self._task

    async def poll(
        self,
        problem: ProblemIdentifier,
        handle: str,
        submitted_at: Optional[float] = None,
    ) -> PollResult:
        """Start a poll and wait for it to finish."""
        return await self.start(problem, handle, submitted_at)

    async def wait(self) -> PollResult:
        if self._task is None:
            return self._result
        return await self._task

    def stop(self) -> None:
        self._cancel_current()
        self._generation += 1
        self._result = PollResult(state=PollState.IDLE)

    def _cancel_current(self) -> None:
        if self._runner is not None and not self._runner.done():
            self._runner.cancel()

    async def _watch(
        self,
        generation: int,
        problem: ProblemIdentifier,
        handle: str,
        runner: "asyncio.Task[PollResult]",
    ) -> PollResult:
        # The runner may be cancelled before its first step, when _run cannot catch it
        try:
            return await runner
        except asyncio.CancelledError:
            if generation != self._generation:
                logger.debug(f"Poll for {problem} superseded before it started")
                return PollResult(PollState.SUPERSEDED, problem, handle)
            raise

    async def _run(
        self,
        generation: int,
        problem: ProblemIdentifier,
        handle: str,
        submitted_at: Optional[float],
    ) -> PollResult:
        attempts = 0
        seen_key = (problem.cache_key, handle.lower())
        # a fresh submission always has a larger id than the last verdict reported here
        after_id = self._last_terminal.get(seen_key) if submitted_at is not None else None

        async def fetch() -> Optional[SubmissionRecord]:
            nonlocal attempts
            attempts += 1
            records = await self.api_client.submissions_for(problem, handle, limit=50)
            return self._pick(records, submitted_at, after_id)

        def on_value(record: Optional[SubmissionRecord]) -> None:
            if record is not None:
                self._publish(
                    generation,
                    PollResult(PollState.POLLING, problem, handle, record=record, attempts=attempts),
                )

        try:
            outcome = await poll_until(
                fetch,
                lambda record: record is not None and record.verdict.is_terminal,
                self.policy,
                sleep=self.sleep,
                on_value=on_value,
            )
        except asyncio.CancelledError:
            if generation != self._generation:
                logger.debug(f"Poll for {problem} superseded")
                return PollResult(PollState.SUPERSEDED, problem, handle, attempts=attempts)
            raise
        except SubmissionError as e:
            logger.error(f"Polling verdict for {problem} failed: {e}")
            result = PollResult(PollState.ERROR, problem, handle, attempts=attempts, error=e)
            self._publish(generation, result)
            return result

        state = PollState.TERMINAL if outcome.satisfied else PollState.TIMED_OUT
        result = PollResult(state, problem, handle, record=outcome.value, attempts=outcome.attempts)
        if state is PollState.TERMINAL:
            self._last_terminal[seen_key] = outcome.value.id
            logger.info(f"Verdict for {problem}: {outcome.value.verdict.value}")
        else:
            logger.warning(f"No final verdict for {problem} after {outcome.attempts} attempts")

        if not self._publish(generation, result):
            return PollResult(PollState.SUPERSEDED, problem, handle, record=outcome.value, attempts=outcome.attempts)
        return result

    def _pick(
        self,
        records: Sequence[SubmissionRecord],
        submitted_at: Optional[float],
        after_id: Optional[int] = None,
    ) -> Optional[SubmissionRecord]:
        fresh = [
            r
            for r in records
            if (submitted_at is None or r.creation_time >= submitted_at - self.clock_skew)
            and (after_id is None or r.id > after_id)
        ]
        if not fresh:
            return None
        return max(fresh, key=lambda r: (r.creation_time, r.id))

    def _publish(self, generation: int, result: PollResult) -> bool:
        if generation != self._generation:
            logger.debug(f"Dropping stale poll update for {result.problem}")
            return False
        self._result = result
        if self.on_update is not None:
            self.on_update(result)
        return True
