"""
Provides a reservoir rate limiter that keeps the client under the platform's request ceiling.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


class ReservoirRateLimiter:
    """
    Paces outgoing calls with a minimum spacing and a periodically reset permit pool.

    Every dispatch consumes one permit. At fixed intervals measured from the
    limiter's creation the pool is reset to ``refresh_amount``, regardless of
    how many permits were used. Waiting calls are released in FIFO order.
    """

    def __init__(
        self,
        min_time: float = 0.2,
        reservoir: int = 20,
        refresh_amount: Optional[int] = None,
        refresh_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initializes the rate limiter.

        Args:
            min_time: Minimum seconds between two dispatches.
            reservoir: Permits available in the first interval.
            refresh_amount: Permits restored at every refill. Defaults to ``reservoir``.
            refresh_interval: Seconds between refills.
            clock: Monotonic time source, in seconds.
            sleep: Coroutine used to wait.
        """
        if refresh_interval <= 0:
            raise ValueError("refresh_interval must be positive.")

        self.min_time = min_time
        self.refresh_amount = refresh_amount if refresh_amount is not None else reservoir
        self.refresh_interval = refresh_interval
        self._clock = clock
        self._sleep = sleep

        self._reservoir = reservoir
        self._started_at = clock()
        self._next_refill = self._started_at + refresh_interval
        self._last_dispatch: Optional[float] = None
        # asyncio.Lock wakes waiters in the order they arrived.
        self._lock = asyncio.Lock()

    @property
    def reservoir(self) -> int:
        """Permits left in the current interval."""
        self._refill(self._clock())
        return self._reservoir

    @property
    def started_at(self) -> float:
        return self._started_at

    def _refill(self, now: float) -> None:
        if now < self._next_refill:
            return
        elapsed_windows = int((now - self._started_at) // self.refresh_interval)
        self._next_refill = self._started_at + (elapsed_windows + 1) * self.refresh_interval
        self._reservoir = self.refresh_amount
        log.debug(f"Reservoir refilled to {self._reservoir} permits")

    async def acquire(self) -> None:
        """
        Waits for this caller's turn, the minimum spacing, and a free permit,
        then consumes the permit.
        """
        async with self._lock:
            if self._last_dispatch is not None:
                wait = self.min_time - (self._clock() - self._last_dispatch)
                if wait > 0:
                    await self._sleep(wait)

            while True:
                now = self._clock()
                self._refill(now)
                if self._reservoir > 0:
                    break
                log.debug(
                    f"Reservoir empty, waiting {self._next_refill - now:.3f}s for refill"
                )
                await self._sleep(self._next_refill - now)

            self._reservoir -= 1
            self._last_dispatch = now

    async def schedule(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Runs ``operation`` once a permit is available.

        Returns the operation's result; its exceptions propagate unchanged.
        """
        await self.acquire()
        return await operation()
