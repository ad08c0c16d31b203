"""Push-based value streams with an explicit subscribe/unsubscribe lifecycle.

An :class:`Observable` wraps an async *producer* coroutine. Every call to
:meth:`Observable.subscribe` runs the producer in its own asyncio task, and
:meth:`Subscription.unsubscribe` cancels that task. A producer that depends
on another stream forwards it with ``await inner.forward(observer)`` so the
inner work runs in the same task and is cancelled with it.

Usage::

    sub = token.allowances({"owner": me}).subscribe(print)
    ...
    sub.unsubscribe()

    state = await scheme.state().first()

    async for schemes in Scheme.search(arc):
        ...
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing
from typing import Any, Generic, TypeVar

from daoarc.exceptions import ArcError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_NEXT = "next"
_ERROR = "error"
_COMPLETE = "complete"

# Strong references to running producer tasks; the loop only keeps weak ones.
_tasks: set[asyncio.Task[None]] = set()


class EmptyStreamError(ArcError):
    """Raised by :meth:`Observable.first` when the stream completes without a value."""


class Observer(Generic[T]):
    """Receiving end of a stream. Ignores everything after error or completion."""

    def __init__(
        self,
        on_next: Callable[[T], Any] | None = None,
        on_error: Callable[[BaseException], Any] | None = None,
        on_complete: Callable[[], Any] | None = None,
    ) -> None:
        self._on_next = on_next
        self._on_error = on_error
        self._on_complete = on_complete
        self.closed = False

    def next(self, value: T) -> None:
        if self.closed:
            return
        if self._on_next is not None:
            self._on_next(value)

    def error(self, exc: BaseException) -> None:
        if self.closed:
            return
        self.closed = True
        if self._on_error is not None:
            self._on_error(exc)
        else:
            logger.error("Unhandled error in subscription", exc_info=exc)

    def complete(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._on_complete is not None:
            self._on_complete()


class Subscription:
    """Handle returned by :meth:`Observable.subscribe`."""

    def __init__(self, task: asyncio.Task[None]) -> None:
        self._task = task

    @property
    def closed(self) -> bool:
        return self._task.done()

    def unsubscribe(self) -> None:
        self._task.cancel()


Producer = Callable[[Observer[T]], Awaitable[None]]


class Observable(Generic[T]):
    """A lazily started stream of values of type ``T``."""

    def __init__(self, producer: Producer[T]) -> None:
        self._producer = producer

    async def forward(self, observer: Observer[T]) -> None:
        """Run the producer in the current task, pushing values to *observer*."""
        await self._producer(observer)

    async def _run(self, observer: Observer[T]) -> None:
        try:
            await self._producer(observer)
        except asyncio.CancelledError:
            observer.closed = True
            raise
        except Exception as exc:
            observer.error(exc)
        else:
            observer.complete()

    def subscribe(
        self,
        on_next: Callable[[T], Any] | None = None,
        on_error: Callable[[BaseException], Any] | None = None,
        on_complete: Callable[[], Any] | None = None,
    ) -> Subscription:
        """Start the producer on the running event loop."""
        observer: Observer[T] = Observer(on_next, on_error, on_complete)
        task = asyncio.get_running_loop().create_task(self._run(observer))
        _tasks.add(task)
        task.add_done_callback(_tasks.discard)
        return Subscription(task)

    def map(self, fn: Callable[[T], R]) -> Observable[R]:
        async def producer(observer: Observer[R]) -> None:
            await self.forward(_MappingObserver(observer, fn))

        return Observable(producer)

    async def first(self) -> T:
        """Wait for the first value, then unsubscribe."""
        loop = asyncio.get_running_loop()
        future: asyncio.Future[T] = loop.create_future()

        def on_next(value: T) -> None:
            if not future.done():
                future.set_result(value)

        def on_error(exc: BaseException) -> None:
            if not future.done():
                future.set_exception(exc)

        def on_complete() -> None:
            if not future.done():
                future.set_exception(EmptyStreamError("Stream completed without a value"))

        subscription = self.subscribe(on_next, on_error, on_complete)
        try:
            return await future
        finally:
            subscription.unsubscribe()

    async def to_list(self) -> list[T]:
        """Collect every value until the stream completes."""
        values: list[T] = []
        async with aclosing(self.values()) as it:
            async for value in it:
                values.append(value)
        return values

    async def values(self) -> AsyncIterator[T]:
        """Iterate over emitted values. Closing the iterator unsubscribes."""
        queue: asyncio.Queue[tuple[str, Any]] = asyncio.Queue()
        subscription = self.subscribe(
            lambda value: queue.put_nowait((_NEXT, value)),
            lambda exc: queue.put_nowait((_ERROR, exc)),
            lambda: queue.put_nowait((_COMPLETE, None)),
        )
        try:
            while True:
                kind, value = await queue.get()
                if kind == _NEXT:
                    yield value
                elif kind == _ERROR:
                    raise value
                else:
                    return
        finally:
            subscription.unsubscribe()

    def __aiter__(self) -> AsyncIterator[T]:
        return self.values()


class _MappingObserver(Observer[T]):
    def __init__(self, target: Observer[Any], fn: Callable[[T], Any]) -> None:
        super().__init__()
        self._target = target
        self._fn = fn

    def next(self, value: T) -> None:
        self._target.next(self._fn(value))
