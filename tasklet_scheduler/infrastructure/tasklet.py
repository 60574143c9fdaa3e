"""
Tasklet component: the unit of deferred work queued on a Scheduler.
"""

import logging
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from tasklet_scheduler.infrastructure.scheduler import Scheduler

logger = logging.getLogger(__name__)

TaskletHandler = Callable[["Tasklet"], None]


class Tasklet:
    """
    A unit of work that runs later, outside the context that posted it.

    A tasklet is owned by the component that defines it and is bound to one
    scheduler for its whole life. Its run method is either the handler given
    at construction or an overridden `run()`.
    """

    def __init__(self, scheduler: "Scheduler", handler: Optional[TaskletHandler] = None) -> None:
        """
        Initialize the Tasklet.

        Args:
            scheduler: The scheduler this tasklet is posted to
            handler: Called with the tasklet each time it runs

        Raises:
            TypeError: If no handler is given and `run()` is not overridden
        """
        if handler is None and type(self).run is Tasklet.run:
            raise TypeError(f"{type(self).__name__} needs a handler or an overridden run()")
        self._scheduler = scheduler
        self._handler = handler
        # Owned by the scheduler while queued, None otherwise.
        self._next: Optional["Tasklet"] = None

    @property
    def scheduler(self) -> "Scheduler":
        return self._scheduler

    @property
    def is_posted(self) -> bool:
        """Check if the tasklet is waiting in its scheduler's queue."""
        return self._next is not None

    def post(self) -> None:
        """Queue the tasklet. Does nothing if it is already queued."""
        self._scheduler.post(self)

    def run(self) -> None:
        """Run the tasklet's work. Called by the scheduler once per dequeue."""
        self._handler(self)

    def __repr__(self) -> str:
        name = getattr(self._handler, "__qualname__", type(self).__name__)
        return f"<Tasklet {name} posted={self.is_posted}>"
