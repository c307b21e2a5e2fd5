"""Spacing gate for outbound requests to a single upstream."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RateGovernor:
    """Keeps successive upstream calls at least ``min_interval`` seconds apart.

    Only the queue worker awaits the gate, so there is no locking: the worker
    is the single writer of ``last_request_time``.
    """

    def __init__(self, min_interval: float = 1.0, clock: Callable[[], float] = time.monotonic):
        self.min_interval = float(min_interval)
        self.last_request_time: Optional[float] = None
        self._clock = clock

    def remaining(self) -> float:
        """Seconds left before the next call may be issued"""
        if self.last_request_time is None:
            return 0.0
        elapsed = self._clock() - self.last_request_time
        return max(0.0, self.min_interval - elapsed)

    async def wait_if_needed(self) -> float:
        delay = self.remaining()
        if delay > 0:
            logger.debug(f"Rate limiting: sleeping for {delay:.2f}s")
            await asyncio.sleep(delay)
        return delay

    def mark(self) -> None:
        # Refreshed after successful calls only
        self.last_request_time = self._clock()
