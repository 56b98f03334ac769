"""In-flight request accounting so shutdown can drain before closing stores."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from src.catalog.core.logging import get_logger

logger = get_logger(__name__)


class RequestTracker:
    """Counts requests in progress and signals when the last one finishes after shutdown starts.

    All access happens on the event loop thread, so the counter needs no lock.
    """

    def __init__(self) -> None:
        self._in_flight = 0
        self._shutting_down = False
        self._drained = asyncio.Event()

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down

    @property
    def in_flight_count(self) -> int:
        return self._in_flight

    @asynccontextmanager
    async def track_request(self) -> AsyncGenerator[None]:
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._shutting_down and self._in_flight == 0:
                self._drained.set()

    async def start_shutdown(self) -> None:
        """Enter shutdown mode. Health checks report unhealthy from here on."""
        self._shutting_down = True
        logger.info("Shutdown started", in_flight=self._in_flight)
        if self._in_flight == 0:
            self._drained.set()

    async def wait_for_drain(self, timeout: float) -> bool:
        """Wait up to timeout seconds for in-flight requests. False on timeout."""
        try:
            await asyncio.wait_for(self._drained.wait(), timeout=timeout)
        except TimeoutError:
            logger.warning(
                "Shutdown grace period elapsed",
                timeout=timeout,
                in_flight=self._in_flight,
            )
            return False
        return True

    def reset(self) -> None:
        """Reset tracker state. For testing only."""
        self._in_flight = 0
        self._shutting_down = False
        self._drained = asyncio.Event()


request_tracker = RequestTracker()
