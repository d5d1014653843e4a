"""
Pytest configuration og shared fixtures.
"""

import asyncio
from datetime import datetime
from typing import List

import pytest

from poll_watcher.models import MatchInfo
from poll_watcher.services.watcher.report_channel import ReportChannel


class ManualClock:
    """Clock whose sleeps only finish when a test calls tick()."""

    def __init__(self) -> None:
        self._sleepers: List[asyncio.Future] = []
        self.sleep_calls: List[float] = []

    async def sleep(self, seconds: float) -> None:
        future = asyncio.get_running_loop().create_future()
        self._sleepers.append(future)
        self.sleep_calls.append(seconds)
        try:
            await future
        finally:
            if future in self._sleepers:
                self._sleepers.remove(future)

    @property
    def sleeping(self) -> int:
        return sum(1 for future in self._sleepers if not future.done())

    async def wait_for_sleeper(self, timeout: float = 2.0) -> None:
        """Wait until at least one task is blocked in sleep()."""

        async def _poll() -> None:
            while self.sleeping == 0:
                await asyncio.sleep(0)

        await asyncio.wait_for(_poll(), timeout)

    async def tick(self) -> None:
        """Finish every pending sleep, waiting for a sleeper first."""
        await self.wait_for_sleeper()
        for future in list(self._sleepers):
            if not future.done():
                future.set_result(None)
        await asyncio.sleep(0)


def make_info(path: str, timestamp: float, matched_on: str = ".txt") -> MatchInfo:
    return MatchInfo(
        path=path,
        mod_time=datetime.fromtimestamp(timestamp),
        matched_on=matched_on,
    )


@pytest.fixture
def info_factory():
    return make_info


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def channel():
    return ReportChannel(maxsize=1)
