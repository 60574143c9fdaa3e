"""
Callback record value object and the context pool interface.
"""

from typing import Any, Callable, Optional, Protocol, runtime_checkable

TaskletCallback = Callable[[Any], None]


class CallbackRecord:
    """
    A deferred (callback, context) pair waiting in a callback tasklet.

    Records live in a pool arena and are addressed by a stable index.
    `next` links the record into its callback tasklet's FIFO and is
    unrelated to the scheduler's own queue link.
    """

    __slots__ = ("index", "callback", "context", "next", "in_use")

    def __init__(self, index: int) -> None:
        self.index = index
        self.callback: Optional[TaskletCallback] = None
        self.context: Any = None
        self.next: Optional["CallbackRecord"] = None
        self.in_use = False

    def init(self, callback: TaskletCallback, context: Any) -> None:
        self.callback = callback
        self.context = context
        self.next = None
        self.in_use = True

    def clear(self) -> None:
        self.callback = None
        self.context = None
        self.next = None
        self.in_use = False

    def __repr__(self) -> str:
        return f"CallbackRecord(index={self.index}, in_use={self.in_use})"


@runtime_checkable
class ContextPool(Protocol):
    """Protocol defining the callback record allocator."""

    def allocate(self, callback: TaskletCallback, context: Any) -> Optional[CallbackRecord]:
        """Allocate a record, or return None when the pool is exhausted."""
        ...

    def release(self, record: CallbackRecord) -> None:
        """Return a record to the pool."""
        ...
