import asyncio


class HealthGauge:
    """
    Readiness signal derived from recent RPC provider failures.

    Every failed lookup adds to a failure score and a background task drains the score one step at a time. While
    the score stays at or under ``failure_threshold`` the service reports ready. A burst of provider failures pushes
    it over, and readiness probes fail until enough quiet time has passed for the score to drain back.
    """

    def __init__(self, failure_threshold: int = 100, failures: int = 0) -> None:
        self._failure_threshold = failure_threshold
        self._failures = failures
        self._lock = asyncio.Lock()

    async def record_failure(self, count: int = 1) -> int:
        """Add provider failures to the score and return the new score."""
        async with self._lock:
            self._failures += count
            return self._failures

    async def drain(self) -> None:
        async with self._lock:
            self._failures = max(self._failures - 1, 0)

    async def failures(self) -> int:
        async with self._lock:
            return self._failures

    async def is_healthy(self) -> bool:
        return await self.failures() <= self._failure_threshold
