# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Periodic database connection monitor.

Checks the repository once at start and then every ``interval_seconds``.
Tracks connected/disconnected plus the count of consecutive failed checks;
a success resets the count. When the count reaches ``max_attempts`` the exit
handler is called with status 1 and the loop stops. The default handler ends
the process immediately: the operator has to fix the configuration and
restart.
"""
import asyncio
import logging
import os
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from starlette.concurrency import run_in_threadpool

from items_api.core.logging import get_logger
from items_api.metrics import DB_CONNECTED, DB_CHECK_FAILURES, DB_CHECK_LATENCY
from items_api.repositories import ItemRepository

logger = get_logger(__name__)

EXIT_CODE_EXHAUSTED = 1


@dataclass
class ConnectionState:
    connected: bool = False
    consecutive_failures: int = 0
    last_latency_ms: Optional[float] = None
    last_error: Optional[str] = None
    last_checked_at: Optional[datetime] = None

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.last_checked_at is not None:
            data["last_checked_at"] = self.last_checked_at.isoformat()
        return data


def terminate_process(code: int) -> None:
    logging.shutdown()
    os._exit(code)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConnectionMonitor:
    def __init__(
        self,
        repo: ItemRepository,
        interval_seconds: float = 100.0,
        max_attempts: int = 5,
        exit_handler: Callable[[int], None] = terminate_process,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._repo = repo
        self._interval = interval_seconds
        self._max_attempts = max_attempts
        self._exit = exit_handler
        self._sleep = sleep
        self._clock = clock
        self._state = ConnectionState()
        self._exhausted = False
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> ConnectionState:
        """Snapshot; mutating it does not affect the monitor."""
        return replace(self._state)

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    # ── Check ──

    async def check(self) -> bool:
        try:
            latency_ms = await run_in_threadpool(self._repo.ping)
        except Exception as exc:
            self.record_failure(exc)
            return False
        self.record_success(latency_ms)
        return True

    def record_success(self, latency_ms: float) -> None:
        state = self._state
        state.last_checked_at = self._clock()
        state.last_latency_ms = latency_ms
        state.last_error = None
        state.consecutive_failures = 0
        DB_CONNECTED.set(1)
        DB_CHECK_LATENCY.observe(latency_ms / 1000)
        if not state.connected:
            state.connected = True
            logger.info(
                "Database connection established",
                extra={"latency_ms": round(latency_ms, 1), "target": self._repo.describe()},
            )

    def record_failure(self, exc: BaseException) -> None:
        state = self._state
        reason = getattr(exc, "message", None) or str(exc) or type(exc).__name__
        state.last_checked_at = self._clock()
        state.last_error = reason
        state.consecutive_failures += 1
        state.connected = False
        DB_CONNECTED.set(0)
        DB_CHECK_FAILURES.inc()
        logger.error(
            "Database connection failed: %s", reason,
            extra={"attempt": state.consecutive_failures, "max_attempts": self._max_attempts},
        )
        if state.consecutive_failures >= self._max_attempts:
            self._exhausted = True
            logger.critical(
                "Maximum retry attempts reached. Please check your database configuration."
            )
            self._exit(EXIT_CODE_EXHAUSTED)

    # ── Lifecycle ──

    async def run(self) -> None:
        logger.info("Connection monitor started",
                    extra={"interval_seconds": self._interval, "max_attempts": self._max_attempts})
        while True:
            await self.check()
            if self._exhausted:
                return
            await self._sleep(self._interval)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="connection-monitor")
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info("Connection monitor stopped")
