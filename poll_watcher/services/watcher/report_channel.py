import asyncio
from typing import Awaitable, Optional

from poll_watcher.core.exceptions import ConfigurationError
from .change_report import ChangeReport


class ReportChannel:
    """
    Bounded, closeable handoff of ChangeReports from a Watcher to its consumer.

    ``send`` blocks while the channel is full, so a consumer that stops
    draining pauses the producer instead of growing a buffer. Closing never
    blocks; reports queued before the close can still be received, after
    which ``receive`` returns None and ``async for`` iteration ends.
    """

    def __init__(self, maxsize: int = 1):
        if maxsize <= 0:
            raise ConfigurationError("Report channel capacity must be at least 1")
        self._queue: asyncio.Queue[ChangeReport] = asyncio.Queue(maxsize)
        self._closed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        self._closed.set()

    def pending(self) -> int:
        return self._queue.qsize()

    async def send(self, report: ChangeReport) -> bool:
        """Deliver a report. Returns False if the channel is or becomes closed."""
        if self.closed:
            return False
        if not self._queue.full():
            self._queue.put_nowait(report)
            return True

        put_task = await self._race_close(self._queue.put(report))
        return not put_task.cancelled()

    async def receive(self) -> Optional[ChangeReport]:
        """Next report, or None once the channel is closed and drained."""
        if not self._queue.empty():
            return self._queue.get_nowait()
        if self.closed:
            return None

        get_task = await self._race_close(self._queue.get())
        if not get_task.cancelled():
            return get_task.result()
        if not self._queue.empty():
            return self._queue.get_nowait()
        return None

    async def _race_close(self, operation: Awaitable) -> asyncio.Future:
        op_task = asyncio.ensure_future(operation)
        closed_task = asyncio.ensure_future(self._closed.wait())
        try:
            await asyncio.wait(
                {op_task, closed_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            op_task.cancel()
            closed_task.cancel()
            await asyncio.wait({op_task, closed_task})
        return op_task

    def __aiter__(self) -> "ReportChannel":
        return self

    async def __anext__(self) -> ChangeReport:
        report = await self.receive()
        if report is None:
            raise StopAsyncIteration
        return report
