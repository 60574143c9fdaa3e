"""
EventLoop component that drives tasklet instances from an asyncio loop.
"""

import asyncio
import logging
from typing import Optional, Set

import uvloop

from tasklet_scheduler.domain.scheduler import TaskletHost

logger = logging.getLogger(__name__)


def new_event_loop(use_uvloop: bool = True) -> asyncio.AbstractEventLoop:
    """Create a fresh event loop, backed by uvloop unless disabled."""
    if use_uvloop:
        return uvloop.new_event_loop()
    return asyncio.new_event_loop()


class EventLoop:
    """
    Host loop for tasklets on top of asyncio.

    Pass `signal_pending` as the pending signal of a tasklet instance: each
    signal schedules one `process_tasklets()` call for that instance on the
    loop. Signals raised while a call for the same instance is already
    scheduled are coalesced into it. Several instances may share one host.
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        use_uvloop: bool = True,
    ) -> None:
        """
        Initialize the EventLoop.

        Args:
            loop: An existing loop to schedule drains on. When omitted a new
                loop is created on first use and owned by this object.
            use_uvloop: Create the owned loop with uvloop
        """
        self._loop = loop
        self._owns_loop = False
        self._use_uvloop = use_uvloop
        self._scheduled: Set[TaskletHost] = set()
        logger.debug("EventLoop initialized")

    def get_loop(self) -> asyncio.AbstractEventLoop:
        """Get the event loop, creating an owned one if needed."""
        if self._loop is None or self._loop.is_closed():
            self._loop = new_event_loop(self._use_uvloop)
            self._owns_loop = True
            logger.info(f"Created event loop {type(self._loop).__name__}")
        return self._loop

    def owns_loop(self) -> bool:
        """Check if we own the current loop."""
        return self._owns_loop

    def signal_pending(self, instance: TaskletHost) -> None:
        """Schedule a drain of `instance` on the loop."""
        if instance in self._scheduled:
            return
        self._scheduled.add(instance)

        loop = self.get_loop()
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            loop.call_soon(self._process, instance)
        else:
            loop.call_soon_threadsafe(self._process, instance)

    def _process(self, instance: TaskletHost) -> None:
        self._scheduled.discard(instance)
        instance.process_tasklets()

    async def wait_idle(self, instance: TaskletHost) -> None:
        """Yield to the loop until `instance` has no pending tasklets."""
        while instance in self._scheduled or instance.tasklets_are_pending():
            await asyncio.sleep(0)

    def run_until_idle(self, instance: TaskletHost) -> None:
        """Run the loop until every tasklet of `instance` has been drained."""
        self.get_loop().run_until_complete(self.wait_idle(instance))

    def close(self) -> None:
        """Close the event loop only if we own it."""
        if self._owns_loop and self._loop is not None and not self._loop.is_closed():
            logger.info("Closing owned event loop")
            self._loop.close()
        else:
            logger.debug("Not closing external event loop")
        self._loop = None
        self._owns_loop = False
        self._scheduled.clear()
