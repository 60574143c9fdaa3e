"""
Fixed-capacity pool of callback records.
"""

import logging
from typing import Any, List, Optional

from tasklet_scheduler.domain.pool import CallbackRecord, ContextPool, TaskletCallback
from tasklet_scheduler.exceptions import TaskletMisuseError

logger = logging.getLogger(__name__)


class ContextNodePool(ContextPool):
    """
    Arena of preallocated callback records addressed by stable index.

    Allocation never grows the arena: once every record is in use,
    `allocate()` returns None until one is released.
    """

    def __init__(self, capacity: int, debug_checks: bool = True) -> None:
        self._records: List[CallbackRecord] = [CallbackRecord(i) for i in range(capacity)]
        # Indices of free records, popped from the end.
        self._free: List[int] = list(reversed(range(capacity)))
        self._debug_checks = debug_checks

    @property
    def capacity(self) -> int:
        return len(self._records)

    @property
    def available(self) -> int:
        return len(self._free)

    @property
    def in_use(self) -> int:
        return self.capacity - self.available

    def allocate(self, callback: TaskletCallback, context: Any) -> Optional[CallbackRecord]:
        """Take a free record and initialize it, or return None if none is left."""
        if not self._free:
            logger.debug(f"Context pool exhausted ({self.capacity} records in use)")
            return None

        record = self._records[self._free.pop()]
        record.init(callback, context)
        return record

    def release(self, record: CallbackRecord) -> None:
        """
        Return a record to the pool.

        Raises:
            TaskletMisuseError: If debug checks are on and the record is not
                currently allocated from this pool
        """
        if self._debug_checks:
            owned = 0 <= record.index < self.capacity and self._records[record.index] is record
            if not owned or not record.in_use:
                raise TaskletMisuseError(f"{record!r} is not allocated from this pool")

        record.clear()
        self._free.append(record.index)
