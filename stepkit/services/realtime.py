"""Lifecycle of the single live step-update subscription."""

from __future__ import annotations

import asyncio
import inspect
from datetime import datetime
from typing import Any, Callable, Optional, Tuple

from stepkit.core.clock import StepCalendar
from stepkit.core.logging import get_logger
from stepkit.providers.base import RecentStepProvider
from stepkit.schemas.steps import StepObservation, StepSource

log = get_logger("realtime")

StepHandler = Callable[[StepObservation], Any]


class RealtimeSessionManager:
    """Idle/Active state machine around the recent-window provider's push updates.

    Only :meth:`start` and :meth:`stop` touch the session state, and both must
    be called from the event loop thread. Updates from the provider may arrive
    on any thread; they are queued onto the loop and handed to the handler by a
    single consumer task, so arrival order is preserved and the provider never
    waits on the handler.
    """

    def __init__(self, recent: RecentStepProvider, calendar: StepCalendar):
        self.recent = recent
        self.calendar = calendar
        self._active = False
        self._started_at: Optional[datetime] = None
        self._consumer: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def started_at(self) -> Optional[datetime]:
        return self._started_at

    def start(self, handler: StepHandler) -> None:
        """Begin delivering live updates to ``handler``. Best effort: never raises."""
        if self._active:
            log.debug("Realtime session already active")
            return
        if not self.recent.is_available:
            log.info("Recent-window provider unavailable; realtime updates not started")
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.warning("Realtime updates need a running event loop; not started")
            return

        queue: asyncio.Queue[Tuple[int, datetime]] = asyncio.Queue()

        def on_update(steps: int) -> None:
            received_at = self.calendar.now()
            if loop.is_closed():
                return
            loop.call_soon_threadsafe(queue.put_nowait, (steps, received_at))

        started_at = self.calendar.now()
        consumer = loop.create_task(self._deliver(queue, handler))
        try:
            self.recent.start_realtime_updates(started_at, on_update)
        except Exception as exc:  # noqa: BLE001
            consumer.cancel()
            log.warning(f"Failed to start realtime updates: {exc}")
            return

        self._consumer = consumer
        self._started_at = started_at
        self._active = True
        log.info(f"Realtime session started at {started_at.isoformat()}")

    def stop(self) -> None:
        """End the session. Safe to call when already idle."""
        if not self._active:
            return
        try:
            self.recent.stop_realtime_updates()
        except Exception as exc:  # noqa: BLE001
            log.warning(f"Provider failed to stop realtime updates: {exc}")
        if self._consumer is not None:
            self._consumer.cancel()
        self._consumer = None
        self._started_at = None
        self._active = False
        log.info("Realtime session stopped")

    async def _deliver(self, queue: "asyncio.Queue[Tuple[int, datetime]]", handler: StepHandler) -> None:
        while True:
            try:
                steps, received_at = await queue.get()
            except asyncio.CancelledError:
                log.debug("Realtime delivery cancelled")
                break
            try:
                observation = StepObservation(steps=steps, source=StepSource.RECENT, window_end=received_at)
                result = handler(observation)
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                break
            except Exception as exc:  # noqa: BLE001
                log.exception(f"Realtime handler failed: {exc}")
