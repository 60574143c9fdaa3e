"""
Domain interfaces for the Scheduler and the host loop that drives it.
"""

from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tasklet_scheduler.infrastructure.tasklet import Tasklet

PendingSignal = Callable[[Any], None]


@runtime_checkable
class SchedulerInterface(Protocol):
    """
    Interface for the Scheduler component.
    Defines the contract that all Scheduler implementations must follow.
    """

    def post(self, tasklet: "Tasklet") -> None:
        """
        Queue a tasklet to run on the next drain.

        Posting a tasklet that is already queued is a no-op.
        """
        ...

    def drain(self) -> int:
        """
        Run every tasklet queued at the time of the call, oldest first.

        Returns:
            The number of tasklets run
        """
        ...

    def are_tasklets_pending(self) -> bool:
        """Check if any tasklet is waiting for a drain."""
        ...


@runtime_checkable
class TaskletHost(Protocol):
    """The run-loop side of a tasklet instance, as seen by a host loop."""

    def tasklets_are_pending(self) -> bool:
        ...

    def process_tasklets(self) -> int:
        ...
