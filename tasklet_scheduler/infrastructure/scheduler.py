"""
Scheduler component that queues tasklets and runs them in FIFO order.
"""

import logging
from typing import Any, Optional

from tasklet_scheduler.domain.scheduler import PendingSignal, SchedulerInterface
from tasklet_scheduler.exceptions import TaskletExecutionError, TaskletMisuseError
from tasklet_scheduler.infrastructure.tasklet import Tasklet

logger = logging.getLogger(__name__)


class Scheduler(SchedulerInterface):
    """
    Cooperative run-to-completion scheduler for tasklets.

    Queued tasklets form a circular singly linked list through their `_next`
    link, and only the tail is referenced: the head is `tail._next`. This
    gives O(1) append at the tail and O(1) removal at the head.

    The pending signal is raised with the queue owner each time the queue
    goes from empty to non-empty. The host loop answers it by calling
    `drain()`.
    """

    def __init__(
        self,
        signal_pending: Optional[PendingSignal] = None,
        owner: Any = None,
        debug_checks: bool = True,
    ) -> None:
        """
        Initialize the Scheduler.

        Args:
            signal_pending: Called with `owner` on every empty to non-empty
                transition of the queue
            owner: The value passed to `signal_pending`, defaults to the
                scheduler itself
            debug_checks: Raise TaskletMisuseError on detected misuse
        """
        self._tail: Optional[Tasklet] = None
        self._signal_pending = signal_pending
        self._owner = self if owner is None else owner
        self._debug_checks = debug_checks
        self._draining = False

    @property
    def is_draining(self) -> bool:
        return self._draining

    def are_tasklets_pending(self) -> bool:
        """Check if any tasklet is waiting for a drain."""
        return self._tail is not None

    def post(self, tasklet: Tasklet) -> None:
        """
        Append a tasklet to the queue.

        Posting a tasklet that is already queued does nothing and raises no
        signal. Safe to call from inside a running tasklet, including the
        tasklet being posted.

        Raises:
            TaskletMisuseError: If debug checks are on and the tasklet is bound
                to a different scheduler
        """
        if self._debug_checks and tasklet.scheduler is not self:
            raise TaskletMisuseError(f"{tasklet!r} is bound to another scheduler")

        if tasklet._next is not None:
            return

        if self._tail is None:
            tasklet._next = tasklet
            self._tail = tasklet
            self._signal()
        else:
            tasklet._next = self._tail._next
            self._tail._next = tasklet
            self._tail = tasklet

    def drain(self) -> int:
        """
        Run every tasklet queued at the time of the call, oldest first.

        The live queue is emptied before the first tasklet runs, so tasklets
        posted while draining start a new queue, raise the pending signal
        again and wait for the next drain.

        Returns:
            The number of tasklets run

        Raises:
            TaskletExecutionError: If a tasklet's run method raised. The
                tasklets not yet run are put back at the front of the queue.
                Exceptions that do not derive from Exception (KeyboardInterrupt,
                SystemExit, CancelledError) are re-raised unchanged after the
                same requeue.
            TaskletMisuseError: If debug checks are on and drain() is
                re-entered from a running tasklet
        """
        if self._draining and self._debug_checks:
            raise TaskletMisuseError("drain() called from inside a running tasklet")

        tail = self._tail
        self._tail = None
        ran = 0

        self._draining = True
        try:
            while tail is not None:
                tasklet = tail._next

                if tasklet is tail:
                    tail = None
                else:
                    tail._next = tasklet._next

                tasklet._next = None
                try:
                    tasklet.run()
                except BaseException as e:
                    self._requeue_front(tail)
                    if not isinstance(e, Exception):
                        raise
                    logger.error(f"Tasklet {tasklet!r} failed: {e}")
                    raise TaskletExecutionError(f"Error running tasklet: {e}") from e
                ran += 1
        finally:
            self._draining = False

        logger.debug(f"Drained {ran} tasklet(s)")
        return ran

    def _requeue_front(self, tail: Optional[Tasklet]) -> None:
        """Splice the unprocessed remainder of a drain ahead of the live queue."""
        if tail is None:
            return

        if self._tail is None:
            self._tail = tail
            self._signal()
        else:
            head = tail._next
            tail._next = self._tail._next
            self._tail._next = head

    def _signal(self) -> None:
        if self._signal_pending is not None:
            self._signal_pending(self._owner)
