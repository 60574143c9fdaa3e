"""
Tests for the CallbackTasklet component.

The CallbackTasklet should:
1. Coalesce many deferred callbacks onto one scheduler slot
2. Run callbacks in post order, each exactly once
3. Consume callbacks posted while it is running in the same run
4. Drop callbacks silently when the context pool is exhausted
"""

from typing import List

import pytest

from tasklet_scheduler.exceptions import TaskletExecutionError
from tasklet_scheduler.infrastructure import CallbackTasklet, ContextNodePool, Scheduler, Tasklet


@pytest.fixture
def signals() -> List[object]:
    return []


@pytest.fixture
def scheduler(signals) -> Scheduler:
    return Scheduler(signal_pending=signals.append)


@pytest.fixture
def pool() -> ContextNodePool:
    return ContextNodePool(capacity=8)


@pytest.fixture
def callback_tasklet(scheduler, pool) -> CallbackTasklet:
    return CallbackTasklet(scheduler, pool)


def test_should_coalesce_posts_onto_one_slot(callback_tasklet, scheduler, signals):
    """Test that N callbacks before a drain cause a single tasklet run."""
    calls = []

    for i in range(5):
        assert callback_tasklet.post_callback(calls.append, i)

    # Then: one signal, one queued tasklet
    assert len(signals) == 1
    assert callback_tasklet.is_posted
    assert callback_tasklet.pending_callbacks == 5

    # When: drained
    assert scheduler.drain() == 1

    # Then: all callbacks ran in post order
    assert calls == [0, 1, 2, 3, 4]
    assert callback_tasklet.pending_callbacks == 0
    assert not callback_tasklet.is_posted


def test_should_default_context_to_none(callback_tasklet, scheduler):
    """Test that a callback posted without context receives None."""
    received = []
    callback_tasklet.post_callback(received.append)
    scheduler.drain()
    assert received == [None]


def test_should_release_records_after_callbacks_run(callback_tasklet, scheduler, pool):
    """Test that every record goes back to the pool after its callback."""
    callback_tasklet.post_callback(lambda ctx: None)
    callback_tasklet.post_callback(lambda ctx: None)
    assert pool.available == 6

    scheduler.drain()
    assert pool.available == pool.capacity


def test_callbacks_posted_during_run_should_run_in_same_pass(callback_tasklet, scheduler, signals):
    """Test that a callback posting another callback is consumed before the run ends."""
    calls = []

    def first(ctx: str) -> None:
        calls.append(ctx)
        callback_tasklet.post_callback(calls.append, "extra")

    callback_tasklet.post_callback(first, "first")
    callback_tasklet.post_callback(calls.append, "second")
    callback_tasklet.post_callback(calls.append, "third")

    # When: one drain
    scheduler.drain()

    # Then: the extra callback ran after the ones already queued
    assert calls == ["first", "second", "third", "extra"]
    assert callback_tasklet.pending_callbacks == 0

    # The extra post re-posted the tasklet, which finds an empty FIFO next time
    assert scheduler.are_tasklets_pending()
    assert len(signals) == 2
    scheduler.drain()
    assert calls == ["first", "second", "third", "extra"]


def test_callback_order_is_independent_of_scheduler_order(callback_tasklet, scheduler):
    """Test that callbacks keep their own order between other tasklets."""
    order = []
    before = Tasklet(scheduler, lambda t: order.append("before"))
    after = Tasklet(scheduler, lambda t: order.append("after"))

    before.post()
    callback_tasklet.post_callback(order.append, "cb1")
    after.post()
    callback_tasklet.post_callback(order.append, "cb2")

    scheduler.drain()
    assert order == ["before", "cb1", "cb2", "after"]


class TestPoolExhaustion:
    """Tests for best-effort delivery when no callback record is free."""

    def test_exhausted_pool_should_drop_without_posting(self, scheduler, signals):
        """Test that a dropped callback leaves no queue mutation."""
        callback_tasklet = CallbackTasklet(scheduler, ContextNodePool(capacity=0))
        calls = []

        assert not callback_tasklet.post_callback(calls.append, 1)

        assert not callback_tasklet.is_posted
        assert not scheduler.are_tasklets_pending()
        assert callback_tasklet.pending_callbacks == 0
        assert signals == []

    def test_exhaustion_should_not_disturb_queued_callbacks(self, scheduler):
        """Test that earlier callbacks still run after a later one is dropped."""
        pool = ContextNodePool(capacity=2)
        callback_tasklet = CallbackTasklet(scheduler, pool)
        calls = []

        assert callback_tasklet.post_callback(calls.append, 1)
        assert callback_tasklet.post_callback(calls.append, 2)
        assert not callback_tasklet.post_callback(calls.append, 3)

        scheduler.drain()
        assert calls == [1, 2]
        assert pool.available == 2

    def test_shared_pool_should_limit_all_callback_tasklets(self, scheduler):
        """Test that callback tasklets sharing a pool share its capacity."""
        pool = ContextNodePool(capacity=1)
        first = CallbackTasklet(scheduler, pool)
        second = CallbackTasklet(scheduler, pool)

        assert first.post_callback(lambda ctx: None)
        assert not second.post_callback(lambda ctx: None)
        assert not second.is_posted


class TestCallbackFailures:
    """Tests for callbacks that raise."""

    def test_failing_callback_should_not_lose_later_callbacks(self, callback_tasklet, scheduler, pool):
        """Test that callbacks after a failing one run on the next drain."""
        calls = []

        def fail(ctx: object) -> None:
            raise ValueError("callback failed")

        callback_tasklet.post_callback(calls.append, 1)
        callback_tasklet.post_callback(fail)
        callback_tasklet.post_callback(calls.append, 3)

        with pytest.raises(TaskletExecutionError, match="callback failed"):
            scheduler.drain()

        # The failing record was released, the last one is still queued
        assert calls == [1]
        assert pool.in_use == 1
        assert callback_tasklet.is_posted

        scheduler.drain()
        assert calls == [1, 3]
        assert pool.in_use == 0

    def test_failing_last_callback_should_not_repost(self, callback_tasklet, scheduler, pool):
        """Test that nothing is re-posted when the failing callback was the last one."""

        def fail(ctx: object) -> None:
            raise ValueError("only one")

        callback_tasklet.post_callback(fail)

        with pytest.raises(TaskletExecutionError):
            scheduler.drain()
        assert not callback_tasklet.is_posted
        assert pool.in_use == 0

    def test_interrupted_callback_should_not_lose_later_callbacks(self, callback_tasklet, scheduler, pool):
        """Test that a BaseException from a callback re-posts the leftover callbacks."""
        calls = []

        def interrupt(ctx: object) -> None:
            raise KeyboardInterrupt

        callback_tasklet.post_callback(interrupt)
        callback_tasklet.post_callback(calls.append, "after")

        with pytest.raises(KeyboardInterrupt):
            scheduler.drain()

        assert callback_tasklet.is_posted
        assert pool.in_use == 1

        scheduler.drain()
        assert calls == ["after"]
        assert pool.in_use == 0
