"""Tests for the concrete backing stores."""

import pytest

from colldeco.engine.errors import (
    BufferOverflowError,
    BufferUnderflowError,
    EmptyContainerError,
    InvalidArgumentError,
    UnderflowError,
)
from colldeco.engine.stores import ArrayStack, BoundedFifoBuffer, FifoBuffer, HashContainer, TreeContainer


class TestFifoBuffer:

    def test_removes_in_insertion_order(self):
        buf = FifoBuffer([1, 2, 3])
        assert buf.get() == 1
        assert [buf.remove() for _ in range(3)] == [1, 2, 3]
        assert buf.is_empty()

    def test_empty_remove_and_get_underflow(self):
        buf = FifoBuffer()
        with pytest.raises(BufferUnderflowError):
            buf.remove()
        with pytest.raises(UnderflowError):
            buf.get()

    def test_rejects_none(self):
        with pytest.raises(InvalidArgumentError):
            FifoBuffer().add(None)

    def test_contains_and_len(self):
        buf = FifoBuffer(["a", "b"])
        assert "a" in buf
        assert "z" not in buf
        assert len(buf) == 2
        buf.clear()
        assert len(buf) == 0


class TestBoundedFifoBuffer:

    def test_overflow_when_full(self):
        buf = BoundedFifoBuffer(2, [1, 2])
        assert buf.is_full()
        with pytest.raises(BufferOverflowError):
            buf.add(3)
        assert list(buf) == [1, 2]

    def test_capacity_must_be_positive(self):
        with pytest.raises(InvalidArgumentError):
            BoundedFifoBuffer(0)

    def test_of_sizes_to_items(self):
        buf = BoundedFifoBuffer.of([5, 6, 7])
        assert buf.max_size == 3
        assert buf.remove() == 5
        buf.add(8)
        assert list(buf) == [6, 7, 8]


class TestArrayStack:

    def test_last_in_first_out(self):
        stack = ArrayStack([1, 2, 3])
        assert stack.get() == 3
        assert stack.remove() == 3
        assert stack.remove() == 2
        assert list(stack) == [1]

    def test_empty_underflow(self):
        with pytest.raises(BufferUnderflowError):
            ArrayStack().remove()


class TestHashContainer:

    def test_counts_copies(self):
        bag = HashContainer(["a", "a", "b"])
        assert bag.get_count("a") == 2
        assert bag.get_count("b") == 1
        assert bag.get_count("z") == 0
        assert len(bag) == 3
        assert bag.unique_set() == frozenset({"a", "b"})

    def test_add_reports_new_element(self):
        bag = HashContainer()
        assert bag.add("x") is True
        assert bag.add("x", 3) is False
        assert bag.get_count("x") == 4

    def test_remove_some_or_all_copies(self):
        bag = HashContainer()
        bag.add("x", 5)
        assert bag.remove("x", 2) is True
        assert bag.get_count("x") == 3
        assert bag.remove("x") is True
        assert "x" not in bag
        assert bag.remove("x") is False
        assert len(bag) == 0

    def test_iterates_every_copy(self):
        bag = HashContainer()
        bag.add("q", 3)
        assert list(bag) == ["q", "q", "q"]

    def test_bad_copies(self):
        with pytest.raises(InvalidArgumentError):
            HashContainer().add("x", 0)

    def test_bad_copies_on_remove_whether_or_not_present(self):
        bag = HashContainer(["x"])
        with pytest.raises(InvalidArgumentError):
            bag.remove("x", 0)
        with pytest.raises(InvalidArgumentError):
            bag.remove("absent", 0)
        assert bag.get_count("x") == 1


class TestTreeContainer:

    def test_iterates_in_sorted_order(self):
        bag = TreeContainer([5, 1, 3, 1])
        assert list(bag) == [1, 1, 3, 5]
        assert bag.first() == 1
        assert bag.last() == 5

    def test_custom_key(self):
        bag = TreeContainer(["bbb", "a", "cc"], key=len)
        assert list(bag) == ["a", "cc", "bbb"]
        assert bag.key is len

    def test_remove_updates_order(self):
        bag = TreeContainer([2, 4, 6])
        bag.remove(2)
        assert bag.first() == 4
        bag.remove(6)
        assert bag.last() == 4

    def test_equal_keys_keep_distinct_elements(self):
        bag = TreeContainer(["ab", "cd"], key=len)
        bag.remove("cd")
        assert list(bag) == ["ab"]

    def test_empty_first_last(self):
        bag = TreeContainer()
        with pytest.raises(EmptyContainerError):
            bag.first()
        with pytest.raises(UnderflowError):
            bag.last()

    def test_unorderable_item_leaves_counts_alone(self):
        bag = TreeContainer([1, 2])
        with pytest.raises(TypeError):
            bag.add("x")
        assert len(bag) == 2
        assert bag.get_count("x") == 0
