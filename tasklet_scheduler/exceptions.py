"""
Exception module for tasklet_scheduler.

This module defines specific exceptions that may be raised by the component.
"""


class TaskletError(Exception):
    """Base exception for errors in the tasklet scheduler."""


class TaskletMisuseError(TaskletError):
    """Raised by debug checks when the scheduler is used in a way it does not support."""


class TaskletExecutionError(TaskletError):
    """Raised when a tasklet's run method fails during a drain."""
