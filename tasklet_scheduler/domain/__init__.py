"""
Domain abstractions and value objects for the tasklet scheduler.
"""

from tasklet_scheduler.domain.config import TaskletConfig
from tasklet_scheduler.domain.pool import CallbackRecord, ContextPool, TaskletCallback
from tasklet_scheduler.domain.scheduler import PendingSignal, SchedulerInterface, TaskletHost

__all__ = [
    "CallbackRecord",
    "ContextPool",
    "PendingSignal",
    "SchedulerInterface",
    "TaskletCallback",
    "TaskletConfig",
    "TaskletHost",
]
