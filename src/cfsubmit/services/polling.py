"""Generic "retry until a predicate holds" helper."""

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")

LOGIN_BACKOFF = (0.0, 0.25, 0.6, 1.2)


@dataclass(frozen=True)
class BackoffPolicy:
    """Schedule of delays before each attempt.

    ``delays`` are used in order; once exhausted ``repeat_delay`` is used for
    the remaining attempts, if set. ``max_attempts`` and ``budget`` (seconds)
    bound the loop.
    """

    delays: tuple[float, ...] = LOGIN_BACKOFF
    repeat_delay: Optional[float] = None
    max_attempts: Optional[int] = None
    budget: Optional[float] = None

    @classmethod
    def fixed(
        cls,
        interval: float,
        initial_delay: float = 0.0,
        max_attempts: Optional[int] = None,
        budget: Optional[float] = None,
    ) -> "BackoffPolicy":
        return cls(delays=(initial_delay,), repeat_delay=interval, max_attempts=max_attempts, budget=budget)

    def schedule(self) -> Iterator[float]:
        produced = 0
        for delay in self.delays:
            if self.max_attempts is not None and produced >= self.max_attempts:
                return
            produced += 1
            yield delay
        if self.repeat_delay is None:
            return
        while self.max_attempts is None or produced < self.max_attempts:
            produced += 1
            yield self.repeat_delay


@dataclass
class PollOutcome(Generic[T]):
    """Last value seen and whether the predicate accepted it."""

    value: Optional[T]
    satisfied: bool
    attempts: int


async def poll_until(
    fetch: Callable[[], Awaitable[T]],
    predicate: Callable[[T], bool],
    policy: BackoffPolicy,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    on_value: Optional[Callable[[T], None]] = None,
) -> PollOutcome[T]:
    """
    Call ``fetch`` on the policy schedule until ``predicate`` accepts a value.

    Exceptions from ``fetch`` propagate to the caller.
    """
    started = time.monotonic()
    slept = 0.0
    value: Optional[T] = None
    attempts = 0

    for delay in policy.schedule():
        elapsed = max(time.monotonic() - started, slept)
        if policy.budget is not None and elapsed + delay > policy.budget:
            break
        if delay > 0:
            await sleep(delay)
            slept += delay

        attempts += 1
        value = await fetch()
        if on_value is not None:
            on_value(value)
        if predicate(value):
            return PollOutcome(value=value, satisfied=True, attempts=attempts)

    return PollOutcome(value=value, satisfied=False, attempts=attempts)
