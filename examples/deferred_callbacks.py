"""
Example demonstrating tasklets and deferred callbacks driven by an asyncio loop.
"""

import asyncio
import logging

from tasklet_scheduler import EventLoop, Tasklet, TaskletInstance

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def on_frame_received(frame: bytes) -> None:
    """
    Handle a received frame outside of the receive path.

    Args:
        frame: The raw frame bytes.
    """
    logger.info(f"Processing frame {frame.hex()}")


def main():
    host = EventLoop()
    instance = TaskletInstance(signal_pending=host.signal_pending)
    callbacks = instance.new_callback_tasklet()

    polls = 0

    def poll(tasklet: Tasklet) -> None:
        nonlocal polls
        polls += 1
        logger.info(f"Poll #{polls}")
        if polls < 3:
            # Run again on a later drain
            tasklet.post()

    try:
        # Example 1: A tasklet that re-posts itself
        instance.new_tasklet(poll).post()

        # Example 2: Callbacks from a "receive handler" coalesced on one tasklet
        for frame in (b"\x01\x02", b"\x03\x04", b"\x05\x06"):
            callbacks.post_callback(on_frame_received, frame)

        # Example 3: Posting from a coroutine running on the loop
        async def producer() -> None:
            callbacks.post_callback(on_frame_received, b"\xff")
            await host.wait_idle(instance)

        host.run_until_idle(instance)
        host.get_loop().run_until_complete(producer())
        logger.info(f"Pending signals raised: {instance.signal_count}")
    finally:
        # Clean shutdown
        host.close()

if __name__ == "__main__":
    main()
