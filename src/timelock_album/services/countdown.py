"""Countdown ticker for an open album view."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from timelock_album.domain.access import UNLOCKED, AccessDecision, evaluate_access
from timelock_album.services.clock import Clock, utc_now

_logger = logging.getLogger(__name__)


@dataclass
class CountdownTicker:
    """Re-evaluates album access on a fixed interval and reports each decision.

    The ticker owns a single asyncio task. It finishes on its own after
    reporting a decision that is no longer ``unlocked``, since later ticks
    cannot change the outcome. ``stop()`` must be called (or the ticker used
    as an async context manager) when the view goes away.
    """

    unlock_at: datetime | None
    on_tick: Callable[[AccessDecision], None]
    clock: Clock = field(default=utc_now)
    interval_seconds: float = 1.0
    _task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    @property
    def running(self) -> bool:
        """Return True while the ticker task is alive."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the ticker on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Cancel the ticker and wait for it to finish."""
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def wait(self) -> None:
        """Wait until the ticker finishes on its own."""
        if self._task is not None:
            await self._task

    async def __aenter__(self) -> "CountdownTicker":
        self.start()
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.stop()

    async def _run(self) -> None:
        while True:
            decision = evaluate_access(self.unlock_at, self.clock())
            self.on_tick(decision)
            if decision.status != UNLOCKED:
                _logger.debug("Countdown finished: status=%s", decision.status)
                return
            await asyncio.sleep(self.interval_seconds)
