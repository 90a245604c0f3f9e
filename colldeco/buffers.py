"""
Factory functions for decorating Buffer instances.

Each function wraps the given buffer and returns a new Buffer, so calls nest:

    buf = blocking_buffer(typed_buffer(FifoBuffer(), int))

Arguments are checked before anything is built; a None buffer or collaborator
raises InvalidArgumentError and nothing is returned. After wrapping, only use
the returned object: the original buffer bypasses every decorator around it.
"""
from __future__ import annotations
from typing import Any, Callable, Optional, TypeVar

from colldeco.decorators.blocking import BlockingBuffer
from colldeco.decorators.predicated import PredicatedBuffer
from colldeco.decorators.synchronized import SynchronizedBuffer
from colldeco.decorators.transformed import TransformedBuffer
from colldeco.decorators.typed import Kind, TypedBuffer
from colldeco.decorators.unmodifiable import UnmodifiableBuffer
from colldeco.engine.contracts import Buffer
from colldeco.engine.metrics import Metrics
from colldeco.engine.stores import ArrayStack

T = TypeVar("T")

EMPTY_BUFFER: Buffer[Any] = UnmodifiableBuffer.decorate(ArrayStack())

def synchronized_buffer(buffer: Buffer[T]) -> SynchronizedBuffer[T]:
    """
    Thread-safe buffer backed by buffer. Hold ``.lock`` around compound
    sequences; iteration is a snapshot.
    """
    return SynchronizedBuffer.decorate(buffer)

def blocking_buffer(
    buffer: Buffer[T],
    timeout: Optional[float] = None,
    *,
    notify_all: bool = False,
    metrics: Metrics | None = None,
) -> BlockingBuffer[T]:
    """
    Synchronized buffer whose remove()/get() wait for an element instead of
    raising BufferUnderflowError. timeout=None waits indefinitely.
    """
    return BlockingBuffer.decorate(buffer, timeout, notify_all=notify_all, metrics=metrics)

def unmodifiable_buffer(buffer: Buffer[T]) -> Buffer[T]:
    return UnmodifiableBuffer.decorate(buffer)

def predicated_buffer(buffer: Buffer[T], predicate: Callable[[Any], bool]) -> PredicatedBuffer[T]:
    """Only elements accepted by predicate can be added; existing elements are checked too."""
    return PredicatedBuffer.decorate(buffer, predicate)

def typed_buffer(buffer: Buffer[T], kind: Kind) -> TypedBuffer[T]:
    """Only instances of kind (a class or tuple of classes) can be added."""
    return TypedBuffer.decorate(buffer, kind)

def transformed_buffer(
    buffer: Buffer[T],
    transformer: Callable[[Any], Any],
    *,
    transform_existing: bool = False,
) -> TransformedBuffer[T]:
    """Every added element is stored as transformer(element)."""
    return TransformedBuffer.decorate(buffer, transformer, transform_existing=transform_existing)
