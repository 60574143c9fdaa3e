"""
Concrete implementations of the tasklet scheduler components.
"""

from tasklet_scheduler.infrastructure.callback_tasklet import CallbackTasklet
from tasklet_scheduler.infrastructure.event_loop import EventLoop
from tasklet_scheduler.infrastructure.pool import ContextNodePool
from tasklet_scheduler.infrastructure.scheduler import Scheduler
from tasklet_scheduler.infrastructure.tasklet import Tasklet, TaskletHandler

__all__ = [
    "CallbackTasklet",
    "ContextNodePool",
    "EventLoop",
    "Scheduler",
    "Tasklet",
    "TaskletHandler",
]
