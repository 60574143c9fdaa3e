"""
CallbackTasklet component that runs many deferred callbacks from one tasklet.
"""

import logging
from typing import Any, Optional

from tasklet_scheduler.domain.pool import CallbackRecord, ContextPool, TaskletCallback
from tasklet_scheduler.infrastructure.scheduler import Scheduler
from tasklet_scheduler.infrastructure.tasklet import Tasklet

logger = logging.getLogger(__name__)


class CallbackTasklet:
    """
    Multiplexes deferred (callback, context) pairs onto a single tasklet.

    Callbacks are kept in their own FIFO of pool records. However many are
    posted between two drains, the underlying tasklet takes one slot in the
    scheduler's queue. When it runs, the FIFO is consumed until empty,
    including callbacks posted by the callbacks themselves.
    """

    def __init__(self, scheduler: Scheduler, pool: ContextPool) -> None:
        """
        Initialize the CallbackTasklet.

        Args:
            scheduler: The scheduler the underlying tasklet is posted to
            pool: Allocator for the callback records
        """
        self._tasklet = Tasklet(scheduler, self._handle_tasklet)
        self._pool = pool
        self._head: Optional[CallbackRecord] = None
        self._tail: Optional[CallbackRecord] = None
        self._count = 0

    @property
    def tasklet(self) -> Tasklet:
        return self._tasklet

    @property
    def is_posted(self) -> bool:
        return self._tasklet.is_posted

    @property
    def pending_callbacks(self) -> int:
        return self._count

    def post_callback(self, callback: TaskletCallback, context: Any = None) -> bool:
        """
        Defer `callback(context)` to the next run of this tasklet.

        Delivery is best effort: when the pool has no free record the call is
        dropped and nothing is queued.

        Args:
            callback: Function to call later
            context: Value passed to the callback

        Returns:
            True if the callback was queued, False if it was dropped
        """
        record = self._pool.allocate(callback, context)
        if record is None:
            logger.warning(f"Dropped deferred callback {callback!r}: context pool exhausted")
            return False

        if self._tail is None:
            self._head = record
        else:
            self._tail.next = record
        self._tail = record
        self._count += 1

        self._tasklet.post()
        return True

    def _pop(self) -> Optional[CallbackRecord]:
        record = self._head
        if record is not None:
            self._head = record.next
            if self._head is None:
                self._tail = None
            record.next = None
            self._count -= 1
        return record

    def _handle_tasklet(self, tasklet: Tasklet) -> None:
        record = self._pop()
        while record is not None:
            callback, context = record.callback, record.context
            try:
                callback(context)
            except BaseException:
                if self._head is not None:
                    # Leftover callbacks run on a later drain.
                    self._tasklet.post()
                raise
            finally:
                self._pool.release(record)
            record = self._pop()
