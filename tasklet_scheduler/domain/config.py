"""
Configuration value object for a tasklet instance.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TaskletConfig:
    """
    Settings shared by the scheduler, the context pool and the host loop.

    Attributes:
        context_pool_size: Number of callback records preallocated for
            callback tasklets.
        debug_checks: Detect misuse (foreign tasklets, re-entrant drains,
            double releases) and raise TaskletMisuseError.
        use_uvloop: Create uvloop event loops in the asyncio host.
    """

    context_pool_size: int = 16
    debug_checks: bool = True
    use_uvloop: bool = True

    def __post_init__(self) -> None:
        if self.context_pool_size < 0:
            raise ValueError("context_pool_size must not be negative")
