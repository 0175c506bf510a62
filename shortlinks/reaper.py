"""Background sweep that evicts expired links."""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from .store.base import ClickLogBase, LinkStoreBase
from .store.models import utc_now


class ExpiryReaper:
    """Periodically deletes expired records and their click events.

    The reaper is started and stopped by the application lifespan. A pass
    that raises is logged and the loop carries on with the next tick;
    anything it misses is still caught lazily when the token is resolved.
    """

    def __init__(
        self,
        link_store: LinkStoreBase,
        click_log: ClickLogBase,
        interval_seconds: float = 300.0,
        clock: Callable[[], datetime] = utc_now,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the reaper.

        Args:
            link_store: Store to sweep
            click_log: Click log sharing the store's tokens
            interval_seconds: Delay between passes
            clock: Returns the current UTC time
            logger: Optional logger instance
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.link_store = link_store
        self.click_log = click_log
        self.interval_seconds = interval_seconds
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> int:
        """Run a single sweep.

        Returns:
            Number of link records removed
        """
        reaped = 0
        for record in self.link_store.snapshot_all():
            if not record.is_expired(self.clock()):
                continue
            # Expiry is re-checked against the current time under the token lock
            removed = self.link_store.delete_if_expired(record.token, self.clock())
            if removed is not None:
                self.click_log.delete(record.token, before=removed.expires_at)
                reaped += 1

        orphans = self.click_log.purge_orphans(
            lambda token: self.link_store.get(token) is not None
        )

        if reaped or orphans:
            self.logger.info(f"Reaper removed {reaped} expired links and {orphans} orphaned click logs")
        else:
            self.logger.debug("Reaper pass found nothing to remove")
        return reaped

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        self.logger.info(f"Expiry reaper started (interval {self.interval_seconds}s)")

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self.logger.info("Expiry reaper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.run_once()
            except Exception:
                self.logger.exception("Reaper pass failed; retrying on next tick")
