"""
Rolling token budget for the embedding provider.

Tracks the estimated token cost of every dispatched call together with its
dispatch time, so the scheduler can ask whether another call still fits in
the current window and sleep until it does.

Dependencies: asyncio, time (stdlib)
System role: Rate-limit accounting for the embedding batch scheduler
"""

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]

# Smallest sleep issued while waiting, keeps a float clock moving
MIN_WAIT_SECONDS = 0.001


class TokenBudget:
    """
    Sliding-window token accounting.

    A charge recorded at time t counts against every window that contains t,
    i.e. until clock() reaches t + window_seconds.
    """

    def __init__(
        self,
        max_tokens: int,
        window_seconds: float = 60.0,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """
        Initialize an empty budget.

        Args:
            max_tokens: Ceiling of estimated tokens per window
            window_seconds: Window length in seconds
            clock: Monotonic time source
            sleep: Coroutine used to wait for capacity
        """
        if max_tokens <= 0:
            raise ValueError("max_tokens must be positive")
        self.max_tokens = max_tokens
        self.window_seconds = window_seconds
        self._clock = clock
        self._sleep = sleep
        self._charges: deque[tuple[float, int]] = deque()

    def _prune(self, now: float) -> None:
        cutoff = now - self.window_seconds
        while self._charges and self._charges[0][0] <= cutoff:
            self._charges.popleft()

    def used(self) -> int:
        """Estimated tokens charged inside the current window."""
        self._prune(self._clock())
        return sum(tokens for _, tokens in self._charges)

    def fits(self, tokens: int) -> bool:
        """Whether charging tokens now keeps the window under the ceiling."""
        return self.used() + tokens <= self.max_tokens

    def record(self, tokens: int) -> None:
        """Charge tokens at the current time."""
        self._charges.append((self._clock(), tokens))

    def _seconds_until_fits(self, tokens: int) -> float:
        now = self._clock()
        self._prune(now)
        excess = sum(t for _, t in self._charges) + min(tokens, self.max_tokens) - self.max_tokens
        if excess <= 0:
            return 0.0

        released = 0
        for charged_at, charged in self._charges:
            released += charged
            if released >= excess:
                return max(charged_at + self.window_seconds - now, MIN_WAIT_SECONDS)
        return MIN_WAIT_SECONDS

    async def wait_for_capacity(self, tokens: int) -> float:
        """
        Sleep until tokens fit in the window.

        A cost larger than the whole ceiling waits for an empty window.

        Args:
            tokens: Estimated cost of the next call

        Returns:
            float: Seconds spent waiting
        """
        waited = 0.0
        while True:
            wait = self._seconds_until_fits(tokens)
            if wait <= 0:
                return waited
            logger.info(
                f"{__name__}:wait_for_capacity - Token limit reached, "
                f"waiting {wait:.1f}s for the window to roll over"
            )
            await self._sleep(wait)
            waited += wait
