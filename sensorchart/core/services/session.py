"""
Chart Session - Owns the refresh schedule of one chart.

Refreshes are serialized: the periodic task awaits each refresh before it
sleeps again, and manual refreshes take the same lock, so two cycles of one
chart never run at once. A generation counter is bumped on suspend/stop;
a refresh that finishes under an older generation is discarded.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime

from sensorchart.core.domain.chart import ChartConfig
from sensorchart.core.domain.result import RefreshResult
from sensorchart.core.ports.record_source import RecordSource
from sensorchart.core.services.refresh_loop import RefreshLoop

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[RefreshResult], Awaitable[None] | None]


class ChartSession:
    """
    Periodic refresh driver for a single chart.
    """

    def __init__(
        self,
        chart: ChartConfig,
        source: RecordSource,
        on_update: UpdateCallback | None = None,
    ):
        self.chart = chart
        self.source = source
        self.on_update = on_update
        self.loop = RefreshLoop(source)

        self.latest: RefreshResult | None = None
        self._lock = asyncio.Lock()
        self._generation = 0
        self._task: asyncio.Task | None = None
        self._closed = False

    @property
    def chart_id(self) -> str:
        return self.chart.chart_id

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"Session '{self.chart_id}' is stopped")

    def start(self) -> None:
        """Refresh now, then every ``update_interval`` seconds."""
        self._ensure_open()
        if self.running:
            return
        logger.info(f"[{self.chart_id}] Starting refresh every {self.chart.update_interval}s")
        self._task = asyncio.create_task(self._run_periodic(), name=f"refresh-{self.chart_id}")

    async def suspend(self) -> None:
        """Stop the timer; a refresh still in flight will not be applied."""
        self._generation += 1
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info(f"[{self.chart_id}] Update interval cleared on suspend.")

    async def resume(self) -> None:
        """Refresh immediately and restart the timer if it is not running."""
        logger.info(f"[{self.chart_id}] Session resumed. Fetching data...")
        if self.running:
            await self.refresh()
        else:
            self.start()

    async def stop(self) -> None:
        """Shut the session down and release the record source."""
        await self.suspend()
        self._closed = True
        await self.source.close()

    async def refresh(self, now: datetime | None = None) -> RefreshResult:
        """
        Run one refresh cycle and apply its result.

        Returns the cycle's result even when it was discarded as stale.

        Raises:
            RuntimeError: if the session is stopped
        """
        self._ensure_open()
        generation = self._generation
        async with self._lock:
            self._ensure_open()
            result = await self.loop.run_refresh(self.chart, now=now)

        if generation != self._generation or self._closed:
            logger.info(f"[{self.chart_id}] Discarding result of a refresh started before suspend")
            return result
        await self._apply(result)
        return result

    async def _apply(self, result: RefreshResult) -> None:
        self.latest = result
        if self.on_update is None:
            return
        outcome = self.on_update(result)
        if inspect.isawaitable(outcome):
            await outcome

    async def _run_periodic(self) -> None:
        while True:
            try:
                await self.refresh()
            except Exception:
                # next tick retries
                logger.exception(f"[{self.chart_id}] Refresh cycle failed")
            await asyncio.sleep(self.chart.update_interval)


class SessionRegistry:
    """
    Holds one ChartSession per configured chart.
    """

    def __init__(self, sessions: Iterable[ChartSession] = ()):
        self._sessions: dict[str, ChartSession] = {}
        for session in sessions:
            self.add(session)

    def add(self, session: ChartSession) -> None:
        if session.chart_id in self._sessions:
            raise ValueError(f"Duplicate chart id '{session.chart_id}'")
        self._sessions[session.chart_id] = session

    def get(self, chart_id: str) -> ChartSession | None:
        return self._sessions.get(chart_id)

    def __iter__(self):
        return iter(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)

    def start_all(self) -> None:
        for session in self:
            session.start()

    async def stop_all(self) -> None:
        for session in self:
            await session.stop()
