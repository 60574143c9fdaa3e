"""
Cooperative tasklet scheduler for deferring work out of callback context.
"""

from tasklet_scheduler.core import TaskletInstance
from tasklet_scheduler.domain.config import TaskletConfig
from tasklet_scheduler.exceptions import (
    TaskletError,
    TaskletExecutionError,
    TaskletMisuseError,
)
from tasklet_scheduler.infrastructure import (
    CallbackTasklet,
    ContextNodePool,
    EventLoop,
    Scheduler,
    Tasklet,
)

__all__ = [
    "CallbackTasklet",
    "ContextNodePool",
    "EventLoop",
    "Scheduler",
    "Tasklet",
    "TaskletConfig",
    "TaskletError",
    "TaskletExecutionError",
    "TaskletInstance",
    "TaskletMisuseError",
]
