"""Database liveness monitoring with bounded reconnection."""
import asyncio
import contextlib
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

RECONNECT_BASE_DELAY_MS = 1000
RECONNECT_MAX_DELAY_MS = 30000


class DatabaseHealthMonitor:
    """Periodically probes the database and rebuilds the pool when it drops.

    ``perform_health_check`` runs ``SELECT 1``. On failure the monitor
    disposes the engine's pool and probes again, up to
    ``max_reconnect_attempts`` consecutive times; failed reconnects push the
    next check out with exponential backoff.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        max_reconnect_attempts: int = 10,
        check_interval: float = 30.0
    ):
        self.engine = engine
        self.max_reconnect_attempts = max_reconnect_attempts
        self.check_interval = check_interval

        self.is_healthy = True
        self.last_health_check = datetime.now(timezone.utc)
        self.reconnect_attempts = 0
        self._task: asyncio.Task | None = None

    async def _probe(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def perform_health_check(self) -> float | None:
        """Probe the database once.

        Returns:
            Seconds to wait before the next check when a reconnect failed,
            otherwise None (use the regular interval)

        """
        try:
            await self._probe()
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            self.is_healthy = False
            return await self.handle_connection_failure(e)

        if not self.is_healthy:
            logger.info("Database connection restored")
            self.is_healthy = True
            self.reconnect_attempts = 0

        self.last_health_check = datetime.now(timezone.utc)
        return None

    async def handle_connection_failure(self, error: Exception) -> float | None:
        self.reconnect_attempts += 1
        logger.warning(
            f"Database connection issue detected "
            f"(attempt {self.reconnect_attempts}/{self.max_reconnect_attempts}): {error}"
        )

        if self.reconnect_attempts > self.max_reconnect_attempts:
            logger.critical(
                f"Maximum reconnection attempts ({self.max_reconnect_attempts}) exceeded. "
                f"Database connection critical failure."
            )
            return None

        try:
            logger.info("Attempting to reconnect to database...")
            await self.engine.dispose()
            await self._probe()
        except Exception as e:
            logger.error(f"Database reconnection failed: {e}")
            delay_ms = self.reconnect_delay_ms(self.reconnect_attempts)
            logger.info(f"Waiting {delay_ms}ms before next reconnection attempt")
            return delay_ms / 1000.0

        logger.info("Database reconnection successful")
        self.is_healthy = True
        self.reconnect_attempts = 0
        return None

    @staticmethod
    def reconnect_delay_ms(attempt: int) -> int:
        return min(RECONNECT_BASE_DELAY_MS * 2 ** attempt, RECONNECT_MAX_DELAY_MS)

    def get_health_status(self) -> dict[str, Any]:
        return {
            "is_healthy": self.is_healthy,
            "last_health_check": self.last_health_check,
            "reconnect_attempts": self.reconnect_attempts,
        }

    async def force_health_check(self) -> dict[str, Any]:
        await self.perform_health_check()
        return self.get_health_status()

    async def run(self) -> None:
        """Check forever at ``check_interval``, honouring reconnect backoff."""
        logger.info("Database health monitoring initialized")
        while True:
            delay = await self.perform_health_check()
            await asyncio.sleep(delay if delay is not None else self.check_interval)

    def start(self) -> asyncio.Task:
        """Start the monitoring loop on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
