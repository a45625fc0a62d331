"""Behaviors — values that are readable at any instant.

A Behavior read inside a Computed or Reaction evaluation registers itself as
a dependency. When it changes, all dependents are scheduled for
re-evaluation.

Two concrete flavors:
- Cell: holds the latest value of a discrete source (see from_changes).
- Computed: a lazy value derived from other behaviors.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from nowgtk._tracking import current_derivation, schedule, untracked

T = TypeVar("T")
U = TypeVar("U")

_UNSET = object()


class Behavior(Generic[T]):
    """A continuous value with automatic dependency tracking."""

    __slots__ = ("_observers", "__weakref__")

    def __init__(self) -> None:
        self._observers: set = set()

    def get(self) -> T:
        """Read the value. If inside a derivation, registers the dependency."""
        derivation = current_derivation.get()
        if derivation is not None:
            self._observers.add(derivation)
            derivation._dependencies.add(self)
        return self._current()

    def sample(self) -> T:
        """Read the value without registering a dependency."""
        with untracked():
            return self._current()

    def map(self, fn: Callable[[T], U]) -> Computed[U]:
        """Derived behavior applying fn to every value of this one."""
        return Computed(lambda: fn(self.get()))

    def _current(self) -> T:
        raise NotImplementedError

    def _notify(self) -> None:
        """Schedule all observers for re-evaluation."""
        for observer in list(self._observers):
            schedule(observer)

    def _remove_observer(self, observer) -> None:
        """Remove an observer. Called during dependency cleanup."""
        self._observers.discard(observer)


class Cell(Behavior[T]):
    """Holds the last observed value of a discrete source.

    Read-only to consumers; only the folding side calls _update(). Every
    update notifies observers, even when the new value equals the old one.
    """

    __slots__ = ("_value", "_source")

    def __init__(self, value: T) -> None:
        super().__init__()
        self._value = value
        self._source = None

    def _current(self) -> T:
        return self._value

    def _update(self, value: T) -> None:
        self._value = value
        self._notify()

    def __repr__(self) -> str:
        return f"Cell({self._value!r})"


class Computed(Behavior[T]):
    """A derived value that auto-tracks dependencies and caches the result.

    Computed values are lazy — they only recompute when read.
    """

    __slots__ = ("_fn", "_cached", "_dirty", "_dependencies")

    def __init__(self, fn: Callable[[], T]) -> None:
        super().__init__()
        self._fn = fn
        self._cached = _UNSET
        self._dirty = True
        self._dependencies: set = set()

    def _current(self) -> T:
        if self._dirty:
            self._recompute()
        return self._cached

    def _recompute(self) -> None:
        """Re-evaluate the function, tracking dependencies."""
        for dep in self._dependencies:
            dep._remove_observer(self)
        self._dependencies.clear()

        token = current_derivation.set(self)
        try:
            self._cached = self._fn()
        finally:
            current_derivation.reset(token)

        self._dirty = False

    def _run(self) -> None:
        """Called by the scheduler when a dependency changed.

        Marks dirty and propagates to our own observers. Recomputation
        happens on the next read.
        """
        if not self._dirty:
            self._dirty = True
            self._notify()

    def dispose(self) -> None:
        """Disconnect from all dependencies. The computed becomes inert."""
        for dep in self._dependencies:
            dep._remove_observer(self)
        self._dependencies.clear()
        self._observers.clear()
        self._dirty = True
        self._cached = _UNSET

    def __repr__(self) -> str:
        state = "dirty" if self._dirty else f"cached={self._cached!r}"
        return f"Computed({getattr(self._fn, '__name__', 'fn')}, {state})"


def constant(value: T) -> Computed[T]:
    """A behavior that never changes."""
    return Computed(lambda: value)


def lift(fn: Callable[[], T]) -> Computed[T]:
    """Decorator/factory to create a Computed from a function.

    Usage:
        clock = get_clock(now, 0.1)

        @lift
        def caption():
            return f"{clock.get():.1f}s"
    """
    return Computed(fn)


def ffor(functor, fn):
    """functor.map(fn) with the arguments flipped, for inline lambdas."""
    return functor.map(fn)
