"""Async fan-out of status snapshots to the configured notification services."""

import asyncio
import logging
from contextlib import suppress

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Deliver each status snapshot to every service as an independent task."""

    def __init__(self, services=()):
        self.services = list(services)
        self._pending_tasks = set()

    async def init(self) -> None:
        """Initialize every service. Any failure aborts startup."""
        for service in self.services:
            await service.init()
            logger.info("initialized %s service", service.name)

    def notify(self, status) -> None:
        """Schedule delivery of `status` and return immediately."""
        for service in self.services:
            task = asyncio.create_task(self._deliver(service, status))
            # Keep a reference until the task is done so it is not collected early.
            self._pending_tasks.add(task)
            task.add_done_callback(self._pending_tasks.discard)

    async def _deliver(self, service, status) -> None:
        try:
            await service.notify(status)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("failed to notify using %s service: %s", service.name, e)

    async def drain(self) -> None:
        """Wait for every delivery scheduled so far."""
        while self._pending_tasks:
            await asyncio.gather(*list(self._pending_tasks), return_exceptions=True)

    async def stop(self) -> None:
        """Cancel outstanding deliveries and close every service."""
        for task in list(self._pending_tasks):
            task.cancel()
        for task in list(self._pending_tasks):
            with suppress(asyncio.CancelledError):
                await task
        self._pending_tasks.clear()
        for service in self.services:
            try:
                await service.close()
            except Exception as e:
                logger.warning("failed to close %s service: %s", service.name, e)
