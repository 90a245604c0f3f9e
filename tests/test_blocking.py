"""Tests for BlockingBuffer: waiting removers, timeouts, interruption."""

import math
import threading
import time

import pytest

from colldeco.decorators.blocking import BlockingBuffer
from colldeco.decorators.predicated import PredicatedBuffer
from colldeco.engine.errors import (
    InvalidArgumentError,
    UnderflowError,
    WaitCancelledError,
    WaitTimeoutError,
)
from colldeco.engine.metrics import Metrics
from colldeco.engine.stores import FifoBuffer

from conftest import wait_until


class TestImmediatePath:

    def test_remove_available_element_without_waiting(self):
        metrics = Metrics()
        buf = BlockingBuffer(FifoBuffer([1, 2]), metrics=metrics)
        assert buf.get() == 1
        assert buf.remove() == 1
        assert buf.remove(timeout=0) == 2
        assert metrics.get("blocking.waits") == 0

    def test_negative_timeout_rejected(self):
        with pytest.raises(InvalidArgumentError):
            BlockingBuffer(FifoBuffer(), timeout=-1)
        with pytest.raises(InvalidArgumentError):
            BlockingBuffer(FifoBuffer()).remove(timeout=-0.5)

    @pytest.mark.parametrize("bad", [math.inf, float("nan"), -math.inf])
    def test_non_finite_timeout_rejected(self, bad):
        with pytest.raises(InvalidArgumentError):
            BlockingBuffer(FifoBuffer(), timeout=bad)
        buf = BlockingBuffer(FifoBuffer())
        with pytest.raises(InvalidArgumentError):
            buf.remove(timeout=bad)
        with pytest.raises(InvalidArgumentError):
            buf.get(timeout=bad)
        assert buf.waiting == 0

    def test_none_backing_rejected(self):
        with pytest.raises(InvalidArgumentError):
            BlockingBuffer(None)


class TestWaiting:

    def test_parked_remover_gets_later_insert(self, spawn):
        buf = BlockingBuffer(FifoBuffer())
        _, outcome = spawn(buf.remove)
        assert wait_until(lambda: buf.waiting == 1)
        buf.add("hello")
        assert outcome.finished.wait(2)
        assert outcome.error is None
        assert outcome.value == "hello"
        assert buf.is_empty()

    def test_k_removers_k_inserts_all_released(self, spawn):
        """Every parked remover returns a distinct inserted value."""
        k = 8
        buf = BlockingBuffer(FifoBuffer())
        outcomes = [spawn(buf.remove)[1] for _ in range(k)]
        assert wait_until(lambda: buf.waiting == k)

        for i in range(k):
            buf.add(i)

        for o in outcomes:
            assert o.finished.wait(5)
            assert o.error is None
        assert sorted(o.value for o in outcomes) == list(range(k))
        assert buf.waiting == 0

    def test_add_all_releases_every_waiter(self, spawn):
        buf = BlockingBuffer(FifoBuffer())
        outcomes = [spawn(buf.remove)[1] for _ in range(3)]
        assert wait_until(lambda: buf.waiting == 3)
        buf.add_all(["a", "b", "c"])
        for o in outcomes:
            assert o.finished.wait(2)
        assert sorted(o.value for o in outcomes) == ["a", "b", "c"]

    def test_notify_all_mode(self, spawn):
        buf = BlockingBuffer(FifoBuffer(), notify_all=True)
        outcomes = [spawn(buf.remove)[1] for _ in range(4)]
        assert wait_until(lambda: buf.waiting == 4)
        for i in range(4):
            buf.add(i)
        for o in outcomes:
            assert o.finished.wait(2)
        assert sorted(o.value for o in outcomes) == [0, 1, 2, 3]

    def test_peeker_does_not_swallow_the_wakeup(self, spawn):
        buf = BlockingBuffer(FifoBuffer())
        _, peek = spawn(buf.get, timeout=2)
        _, take = spawn(buf.remove)
        assert wait_until(lambda: buf.waiting == 2)

        buf.add("only")

        assert take.finished.wait(3)
        assert take.error is None
        assert take.value == "only"
        assert peek.finished.wait(3)
        # the peeker saw the element or lost the race to the remover
        assert peek.value == "only" or isinstance(peek.error, WaitTimeoutError)

    def test_get_waits_then_leaves_element(self, spawn):
        buf = BlockingBuffer(FifoBuffer())
        _, outcome = spawn(buf.get)
        assert wait_until(lambda: buf.waiting == 1)
        buf.add(42)
        assert outcome.finished.wait(2)
        assert outcome.value == 42
        assert len(buf) == 1

    def test_producer_consumer_threads(self):
        buf = BlockingBuffer(FifoBuffer())
        total = 2000
        got = []
        got_lock = threading.Lock()

        def consume(n):
            mine = [buf.remove(timeout=5) for _ in range(n)]
            with got_lock:
                got.extend(mine)

        consumers = [threading.Thread(target=consume, args=(500,)) for _ in range(4)]
        for t in consumers:
            t.start()
        for i in range(total):
            buf.add(i)
        for t in consumers:
            t.join(timeout=10)
            assert not t.is_alive()
        assert sorted(got) == list(range(total))


class TestTimeout:

    def test_bounded_wait_raises_timeout_not_underflow(self):
        buf = BlockingBuffer(FifoBuffer())
        start = time.monotonic()
        with pytest.raises(WaitTimeoutError) as exc_info:
            buf.remove(timeout=0.2)
        elapsed = time.monotonic() - start
        assert not isinstance(exc_info.value, UnderflowError)
        assert 0.19 <= elapsed < 1.2

    def test_default_timeout_from_construction(self):
        buf = BlockingBuffer(FifoBuffer(), timeout=0.05)
        with pytest.raises(WaitTimeoutError):
            buf.get()
        assert buf.waiting == 0

    def test_per_call_timeout_overrides_default(self, spawn):
        buf = BlockingBuffer(FifoBuffer(), timeout=0.01)
        _, outcome = spawn(buf.remove, timeout=None)
        time.sleep(0.1)
        assert not outcome.finished.is_set()
        buf.add("x")
        assert outcome.finished.wait(2)
        assert outcome.value == "x"

    def test_element_arriving_within_timeout(self, spawn):
        buf = BlockingBuffer(FifoBuffer())
        _, outcome = spawn(buf.remove, timeout=5)
        assert wait_until(lambda: buf.waiting == 1)
        buf.add(7)
        assert outcome.finished.wait(2)
        assert outcome.value == 7

    def test_timeouts_counted(self):
        metrics = Metrics()
        buf = BlockingBuffer(FifoBuffer(), metrics=metrics)
        with pytest.raises(WaitTimeoutError):
            buf.remove(timeout=0.01)
        assert metrics.get("blocking.waits") == 1
        assert metrics.get("blocking.timeouts") == 1


class TestInterrupt:

    def test_interrupt_releases_parked_callers(self, spawn):
        metrics = Metrics()
        buf = BlockingBuffer(FifoBuffer(), metrics=metrics)
        outcomes = [spawn(buf.remove)[1] for _ in range(3)]
        assert wait_until(lambda: buf.waiting == 3)

        assert buf.interrupt() == 3

        for o in outcomes:
            assert o.finished.wait(2)
            assert isinstance(o.error, WaitCancelledError)
        assert metrics.get("blocking.cancelled") == 3

    def test_interrupt_does_not_affect_later_callers(self, spawn):
        buf = BlockingBuffer(FifoBuffer())
        assert buf.interrupt() == 0
        _, outcome = spawn(buf.remove)
        assert wait_until(lambda: buf.waiting == 1)
        buf.add("after")
        assert outcome.finished.wait(2)
        assert outcome.value == "after"

    def test_bounded_waiter_is_cancelled_not_timed_out(self, spawn):
        buf = BlockingBuffer(FifoBuffer())
        _, outcome = spawn(buf.remove, timeout=10)
        assert wait_until(lambda: buf.waiting == 1)
        buf.interrupt()
        assert outcome.finished.wait(2)
        assert isinstance(outcome.error, WaitCancelledError)

    def test_cancelled_waiter_hands_on_the_wakeup(self, spawn):
        """A remover parked after an interrupt still gets an element added while the
        cancelled caller is on its way out, whichever thread runs first."""
        for round_no in range(20):
            buf = BlockingBuffer(FifoBuffer())
            _, cancelled = spawn(buf.remove)
            assert wait_until(lambda: buf.waiting == 1)

            with buf.lock:
                buf.interrupt()
                _, later = spawn(buf.remove, timeout=5)
            buf.add(round_no)

            assert cancelled.finished.wait(2)
            assert isinstance(cancelled.error, WaitCancelledError)
            assert later.finished.wait(5)
            assert later.error is None
            assert later.value == round_no
            assert buf.is_empty()
            assert buf.waiting == 0


class TestLayering:

    def test_rejection_from_inner_layer_propagates(self, spawn):
        buf = BlockingBuffer(PredicatedBuffer(FifoBuffer(), lambda x: x > 0))
        _, outcome = spawn(buf.remove, timeout=0.3)
        assert wait_until(lambda: buf.waiting == 1)
        with pytest.raises(InvalidArgumentError):
            buf.add(-1)
        assert len(buf) == 0
        assert outcome.finished.wait(2)
        assert isinstance(outcome.error, WaitTimeoutError)

    def test_wait_holds_no_lock(self, spawn):
        buf = BlockingBuffer(FifoBuffer())
        _, outcome = spawn(buf.remove)
        assert wait_until(lambda: buf.waiting == 1)
        # a parked remover must not keep others out
        assert buf.lock.acquire(timeout=1)
        buf.lock.release()
        buf.add(1)
        assert outcome.finished.wait(2)
