import asyncio
import logging
from typing import Optional, Tuple

from poll_watcher.core.events.event_bus import DomainEventBus
from poll_watcher.core.events.watcher_events import WatcherStatusChangedEvent
from poll_watcher.core.exceptions import ScanError
from poll_watcher.models import WatcherState
from poll_watcher.services.scanner.domain_objects import Snapshot, WatchConfiguration
from .change_report import ChangeReport
from .clock import Clock, SystemClock
from .snapshot_differ import diff_snapshots


class Watcher:
    """
    Polls a directory, diffs each scan against the previous one and sends a
    ChangeReport on the configured channel whenever something changed.

    Lifecycle: Stopped -> start() -> Running -> stop() -> Stopped -> ...
    destroy() is terminal and closes the channel. At most one poll task
    exists per instance; it is the only writer of the previous snapshot.
    Stop and destroy are cooperative: the task notices them before a scan
    starts and again before a report is sent.
    """

    def __init__(
        self,
        config: WatchConfiguration,
        clock: Optional[Clock] = None,
        event_bus: Optional[DomainEventBus] = None,
        emit_empty_reports: bool = False,
    ):
        self._config = config
        self._clock = clock or SystemClock()
        self._event_bus = event_bus
        self._emit_empty_reports = emit_empty_reports

        self._state = WatcherState.STOPPED
        self._lock = asyncio.Lock()
        self._wakeup = asyncio.Event()
        self._poll_task: Optional[asyncio.Task] = None
        self._last_snapshot: Snapshot = {}

        logging.info(f"Watcher initialized for: {config.root_directory}")
        logging.info(f"Match suffixes: {', '.join(config.match_suffixes)}")
        logging.info(f"Polling interval: {config.effective_refresh_interval}s")

    @property
    def config(self) -> WatchConfiguration:
        return self._config

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is WatcherState.RUNNING

    async def start(self) -> None:
        async with self._lock:
            if self._state is WatcherState.DESTROYED:
                logging.debug("Watcher is destroyed, ignoring start")
                return
            if self._state is WatcherState.RUNNING:
                logging.debug("Watcher is already running")
                return

            old_state = self._state
            self._state = WatcherState.RUNNING
            self._wakeup.clear()

            # A stopped task that has not reached its checkpoint yet picks up
            # the Running state itself.
            if self._poll_task is None or self._poll_task.done():
                self._poll_task = asyncio.create_task(self._poll_loop())
                logging.info("Watcher task started in background")
            else:
                logging.debug("Watcher task still alive, resuming it")

        await self._publish_status(old_state, WatcherState.RUNNING)

    async def stop(self) -> None:
        async with self._lock:
            if self._state is not WatcherState.RUNNING:
                logging.debug(f"Watcher is {self._state.value}, ignoring stop")
                return

            self._state = WatcherState.STOPPED
            self._wakeup.set()
            logging.info("Watcher stop requested")

        await self._publish_status(WatcherState.RUNNING, WatcherState.STOPPED)

    async def destroy(self) -> None:
        async with self._lock:
            if self._state is WatcherState.DESTROYED:
                return

            old_state = self._state
            self._state = WatcherState.DESTROYED
            self._wakeup.set()
            self._config.channel.close()
            logging.info(f"Watcher destroyed, report channel closed: {self._config.root_directory}")

        await self._publish_status(old_state, WatcherState.DESTROYED)

    async def wait_closed(self) -> None:
        """Wait until the current poll task (if any) has exited."""
        task = self._poll_task
        if task is not None and not task.done():
            await asyncio.wait({task})

    async def _poll_loop(self) -> None:
        interval = self._config.effective_refresh_interval
        logging.debug(f"Watcher loop starting - scanning every {interval}s")
        try:
            while True:
                elapsed = await self._wait_interval(interval)
                if self._state is not WatcherState.RUNNING:
                    break
                if not elapsed:
                    # Woken by a stop that a start undid before we got here.
                    logging.debug("Watcher resumed before the interval elapsed, sleeping again")
                    continue

                current, report = await self._execute_scan_iteration()

                # Leave the previous snapshot untouched when stopping, so a
                # resumed watcher reports this cycle's changes again.
                if self._state is not WatcherState.RUNNING:
                    logging.debug("Watcher stopping, discarding scan cycle")
                    break

                if current is not None:
                    self._last_snapshot = current

                if report is None:
                    continue

                if not await self._config.channel.send(report):
                    await self._destroy_on_closed_channel()
                    break
        except asyncio.CancelledError:
            logging.info("Watcher loop cancelled")
            raise
        finally:
            if self._state is WatcherState.DESTROYED:
                self._config.channel.close()
            logging.debug("Watcher loop completed")

    async def _destroy_on_closed_channel(self) -> None:
        async with self._lock:
            if self._state is not WatcherState.RUNNING:
                return
            self._state = WatcherState.DESTROYED
            logging.warning("Report channel was closed externally, destroying watcher")

        await self._publish_status(WatcherState.RUNNING, WatcherState.DESTROYED)

    async def _wait_interval(self, interval: float) -> bool:
        """Sleep for the interval or until woken. Returns True if the interval elapsed."""
        sleep_task = asyncio.ensure_future(self._clock.sleep(interval))
        wakeup_task = asyncio.ensure_future(self._wakeup.wait())
        try:
            done, _ = await asyncio.wait(
                {sleep_task, wakeup_task}, return_when=asyncio.FIRST_COMPLETED
            )
            return sleep_task in done
        finally:
            sleep_task.cancel()
            wakeup_task.cancel()
            await asyncio.wait({sleep_task, wakeup_task})

    async def _execute_scan_iteration(
        self,
    ) -> Tuple[Optional[Snapshot], Optional[ChangeReport]]:
        root = self._config.root_directory
        try:
            current = await self._config.scan_function(self._config)
        except ScanError as e:
            logging.warning(f"Scan of {root} failed: {e.reason}")
            return None, ChangeReport.from_error(e)
        except Exception as e:
            logging.error(f"Unexpected error in scan function for {root}: {e}", exc_info=True)
            return None, ChangeReport.from_error(ScanError(str(e), root_read_failed=False))

        diff = diff_snapshots(self._last_snapshot, current)
        if diff.has_changes:
            logging.info(
                f"Changes in {root}: {len(diff.updated)} updated, {len(diff.deleted)} deleted"
            )
        elif not self._emit_empty_reports:
            logging.debug(f"No changes in {root}")
            return current, None

        return current, ChangeReport.from_diff(diff)

    async def _publish_status(self, old_state: WatcherState, new_state: WatcherState) -> None:
        if not self._event_bus:
            return
        try:
            await self._event_bus.publish(
                WatcherStatusChangedEvent(
                    root_directory=self._config.root_directory,
                    old_state=old_state,
                    new_state=new_state,
                )
            )
        except Exception as e:
            logging.warning(f"Failed to publish WatcherStatusChangedEvent: {e}")


def create_watcher(
    config: WatchConfiguration,
    *,
    clock: Optional[Clock] = None,
    event_bus: Optional[DomainEventBus] = None,
    emit_empty_reports: bool = False,
) -> Watcher:
    """
    Create a Watcher in the Stopped state.

    The configuration has already been validated when it was constructed, so
    an invalid one never gets this far; ConfigurationError is raised by
    WatchConfiguration itself.
    """
    return Watcher(
        config,
        clock=clock,
        event_bus=event_bus,
        emit_empty_reports=emit_empty_reports,
    )
