"""
Core implementation of the tasklet instance: the run-loop context object.
"""

import logging
from typing import Callable, Optional

from tasklet_scheduler.domain.config import TaskletConfig
from tasklet_scheduler.infrastructure.callback_tasklet import CallbackTasklet
from tasklet_scheduler.infrastructure.pool import ContextNodePool
from tasklet_scheduler.infrastructure.scheduler import Scheduler
from tasklet_scheduler.infrastructure.tasklet import Tasklet, TaskletHandler

logger = logging.getLogger(__name__)


class TaskletInstance:
    """
    Owns the scheduler and callback record pool of one protocol stack.

    Components that need to defer work are given the instance (or its
    scheduler) explicitly. The host loop either polls
    `tasklets_are_pending()` or passes a `signal_pending` hook, and answers
    with `process_tasklets()`.
    """

    def __init__(
        self,
        config: Optional[TaskletConfig] = None,
        signal_pending: Optional[Callable[["TaskletInstance"], None]] = None,
    ) -> None:
        """
        Initialize the TaskletInstance.

        Args:
            config: Scheduler and pool settings
            signal_pending: Host hook called with this instance whenever
                tasklets become pending
        """
        self._config = config or TaskletConfig()
        self._signal_pending = signal_pending
        self._signal_count = 0
        self._scheduler = Scheduler(
            signal_pending=self._on_pending,
            owner=self,
            debug_checks=self._config.debug_checks,
        )
        self._context_pool = ContextNodePool(
            self._config.context_pool_size,
            debug_checks=self._config.debug_checks,
        )
        logger.debug(f"TaskletInstance initialized with {self._config}")

    @property
    def config(self) -> TaskletConfig:
        return self._config

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def context_pool(self) -> ContextNodePool:
        return self._context_pool

    @property
    def signal_count(self) -> int:
        """Number of pending signals raised so far."""
        return self._signal_count

    def _on_pending(self, instance: "TaskletInstance") -> None:
        self._signal_count += 1
        if self._signal_pending is not None:
            self._signal_pending(instance)

    def new_tasklet(self, handler: TaskletHandler) -> Tasklet:
        """Create a tasklet bound to this instance's scheduler."""
        return Tasklet(self._scheduler, handler)

    def new_callback_tasklet(self) -> CallbackTasklet:
        """Create a callback tasklet drawing records from this instance's pool."""
        return CallbackTasklet(self._scheduler, self._context_pool)

    def tasklets_are_pending(self) -> bool:
        """Check if there are tasklets waiting for `process_tasklets()`."""
        return self._scheduler.are_tasklets_pending()

    def process_tasklets(self) -> int:
        """
        Run the tasklets that are queued right now.

        Returns:
            The number of tasklets run
        """
        return self._scheduler.drain()

    def run_until_idle(self, max_passes: Optional[int] = None) -> int:
        """
        Drain repeatedly until no tasklet is pending.

        Args:
            max_passes: Stop after this many drains even if work remains.
                Tasklets that re-post themselves forever need a bound.

        Returns:
            The number of drains performed
        """
        passes = 0
        while self.tasklets_are_pending():
            if max_passes is not None and passes >= max_passes:
                logger.debug(f"Stopping after {passes} passes with tasklets still pending")
                break
            self.process_tasklets()
            passes += 1
        return passes
