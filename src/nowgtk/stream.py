"""Push-based event streams and one-shot events.

EventStream: emit values, subscribe to them, and compose with map/filter/
before. Each operator returns a new stream (immutable chain). dispose()
tears down the stream, its downstream children, and its link to the parent.

Event: a stream that occurs at most once. Subscribers added after the
occurrence are called right away.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")

Disposer = Callable[[], None]


class EventStream(Generic[T]):
    """Push-based event stream with operator chaining."""

    def __init__(self) -> None:
        self._subscribers: list[Callable[[T], None]] = []
        self._children: list[EventStream] = []  # downstream streams for dispose
        self._disposed = False
        self._parent_disposer: Disposer | None = None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def emit(self, value: T) -> None:
        """Push a value to all subscribers, in subscription order."""
        if self._disposed:
            return
        for cb in list(self._subscribers):
            cb(value)

    def subscribe(self, callback: Callable[[T], None]) -> Disposer:
        """Register a callback. Returns a function that removes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    def map(self, fn: Callable[[T], U]) -> EventStream[U]:
        """Transform events through fn."""
        child: EventStream[U] = EventStream()
        self._link(child, lambda v: child.emit(fn(v)))
        return child

    def filter(self, fn: Callable[[T], bool]) -> EventStream[T]:
        """Only pass events where fn returns True."""
        child: EventStream[T] = EventStream()
        self._link(child, lambda v: child.emit(v) if fn(v) else None)
        return child

    def before(self, event: Event) -> EventStream[T]:
        """Only pass events that happen before `event` occurs.

        The returned stream is disposed when the event occurs, so nothing
        delivered at or after that point gets through.
        """
        child: EventStream[T] = EventStream()
        self._link(child, child.emit)
        event.subscribe(lambda _: child.dispose())
        return child

    def dispose(self) -> None:
        """Tear down this stream and all downstream children."""
        self._disposed = True
        self._subscribers.clear()
        for child in list(self._children):
            child.dispose()
        self._children.clear()
        if self._parent_disposer is not None:
            self._parent_disposer()
            self._parent_disposer = None

    def _link(self, child: EventStream, callback: Callable[[T], None]) -> None:
        """Feed child through callback; child.dispose() detaches it from us."""
        self._children.append(child)
        unsubscribe = self.subscribe(callback)

        def _remove() -> None:
            unsubscribe()
            try:
                self._children.remove(child)
            except ValueError:
                pass

        child._parent_disposer = _remove


class Event(Generic[T]):
    """A one-shot event. The first emit() wins; later ones are ignored."""

    __slots__ = ("_occurred", "_value", "_subscribers", "__weakref__")

    def __init__(self) -> None:
        self._occurred = False
        self._value: T | None = None
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def occurred(self) -> bool:
        return self._occurred

    @property
    def value(self) -> T | None:
        """The occurrence value, or None while the event is pending."""
        return self._value

    def emit(self, value: T) -> None:
        if self._occurred:
            return
        self._occurred = True
        self._value = value
        subscribers, self._subscribers = self._subscribers, []
        for cb in subscribers:
            cb(value)

    def subscribe(self, callback: Callable[[T], None]) -> Disposer:
        """Call callback on occurrence (now, if it already happened)."""
        if self._occurred:
            callback(self._value)
            return lambda: None
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass

        return _unsubscribe

    def __repr__(self) -> str:
        state = f"occurred={self._value!r}" if self._occurred else "pending"
        return f"Event({state})"


def never() -> Event:
    """An event that never occurs."""
    return Event()
