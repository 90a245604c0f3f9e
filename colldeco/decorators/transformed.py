from __future__ import annotations
import logging
from typing import Any, Callable, Iterable, List, TypeVar

from colldeco.engine.contracts import Buffer, Container, SortedContainer
from colldeco.engine.decorator import BufferDecorator, ContainerDecorator, SortedContainerDecorator
from colldeco.engine.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Transform = Callable[[Any], Any]

class Transforming:
    """
    Shared rewrite logic for the transformed decorators.

    Every inserted element is replaced by transform(element), exactly once,
    before it is forwarded. Lookups (get_count, remove on a bag, ``in``) use
    the caller's value untouched. A transform that raises aborts the insert
    and leaves the backing collection as it was.

    With transform_existing=True the elements already present are rewritten
    at decoration time, all or nothing. Using the collection you wrapped
    afterwards skips the transform.
    """
    transformer: Transform

    def _init_transformer(self, transformer: Transform) -> None:
        if transformer is None:
            raise InvalidArgumentError("Transformer must not be None")
        if not callable(transformer):
            raise InvalidArgumentError(f"Transformer must be callable, got {type(transformer).__name__}")
        self.transformer = transformer

    def transform(self, item: Any) -> Any:
        return self.transformer(item)

    def transform_all(self, items: Iterable[Any]) -> List[Any]:
        return [self.transformer(item) for item in items]

    def _rewrite_existing(self, target: Any) -> None:
        originals = list(target)
        rewritten = self.transform_all(originals)
        target.clear()
        try:
            target.add_all(rewritten)
        except Exception:
            # store refused a rewritten value; put the originals back
            target.clear()
            target.add_all(originals)
            raise
        logger.debug("%s rewrote %d existing element(s)", type(self).__name__, len(rewritten))

class TransformedBuffer(BufferDecorator[T], Transforming):
    def __init__(self, buffer: Buffer[T], transformer: Transform, *, transform_existing: bool = False):
        super().__init__(buffer)
        self._init_transformer(transformer)
        if transform_existing:
            self._rewrite_existing(self._decorated)

    def add(self, item: T) -> bool:
        return self._decorated.add(self.transform(item))

    def add_all(self, items: Iterable[T]) -> bool:
        return self._decorated.add_all(self.transform_all(items))

class TransformedContainer(ContainerDecorator[T], Transforming):
    def __init__(self, container: Container[T], transformer: Transform, *, transform_existing: bool = False):
        super().__init__(container)
        self._init_transformer(transformer)
        if transform_existing:
            self._rewrite_existing(self._decorated)

    def add(self, item: T, copies: int = 1) -> bool:
        return self._decorated.add(self.transform(item), copies)

    def add_all(self, items: Iterable[T]) -> bool:
        return self._decorated.add_all(self.transform_all(items))

class TransformedSortedContainer(TransformedContainer[T], SortedContainerDecorator[T]):
    def __init__(self, container: SortedContainer[T], transformer: Transform, *, transform_existing: bool = False):
        SortedContainerDecorator.__init__(self, container)
        self._init_transformer(transformer)
        if transform_existing:
            self._rewrite_existing(self._decorated)
