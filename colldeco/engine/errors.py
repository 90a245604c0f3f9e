from __future__ import annotations

class CollectionError(Exception):
    """Base for every error raised by colldeco."""

class InvalidArgumentError(CollectionError, ValueError):
    """
    Missing or malformed input: a None store or collaborator,
    an element rejected by a validating decorator, a bad construction knob.
    """

class UnsupportedOperationError(CollectionError, TypeError):
    """Mutation attempted through an unmodifiable wrapper."""

class UnderflowError(CollectionError, LookupError):
    pass

class BufferUnderflowError(UnderflowError):
    """remove()/get() on an empty buffer (non-blocking path)."""

class EmptyContainerError(UnderflowError):
    """first()/last() on an empty sorted container."""

class BufferOverflowError(CollectionError):
    """add() on a bounded buffer that is already full."""

class WaitTimeoutError(CollectionError, TimeoutError):
    """
    A bounded blocking wait ran out before an element arrived.
    Deliberately not an UnderflowError so callers can tell the two apart.
    """

class WaitCancelledError(CollectionError):
    """A blocked wait was released by interrupt()."""
