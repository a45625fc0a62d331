"""Reactions — side effects triggered by behavior changes.

Unlike Computed (which is lazy and only evaluates on read), a Reaction
eagerly re-runs its side effect whenever its tracked dependencies change.

Two flavors:
- autorun(fn): runs fn immediately, re-runs when any behavior it read changes.
- reaction(data_fn, effect_fn): tracks data_fn, calls effect_fn with the new
  value. By default only when the result changes; dedupe=False passes every
  re-evaluation through.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from nowgtk._tracking import current_derivation

T = TypeVar("T")


class Reaction:
    """A reactive side effect that re-runs when its dependencies change."""

    __slots__ = ("_fn", "_dependencies", "_disposed")

    def __init__(self, fn: Callable[[], None]) -> None:
        self._fn = fn
        self._dependencies: set = set()
        self._disposed = False

    def _track(self, fn: Callable[[], T]) -> T:
        """Evaluate fn with this reaction as the current derivation."""
        for dep in self._dependencies:
            dep._remove_observer(self)
        self._dependencies.clear()

        token = current_derivation.set(self)
        try:
            return fn()
        finally:
            current_derivation.reset(token)

    def _run(self) -> None:
        """Re-evaluate the reaction function, re-tracking dependencies."""
        if self._disposed:
            return
        self._track(self._fn)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Stop this reaction. Disconnects from all dependencies."""
        self._disposed = True
        for dep in self._dependencies:
            dep._remove_observer(self)
        self._dependencies.clear()

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"Reaction({getattr(self._fn, '__name__', 'fn')}, {state})"


class _DataReaction(Reaction):
    """Internal: reaction(data_fn, effect_fn) implementation.

    The effect runs outside the tracking context, so behaviors it reads do
    not become dependencies.
    """

    __slots__ = ("_effect_fn", "_dedupe", "_last_value", "_initialized")

    def __init__(self, data_fn: Callable, effect_fn: Callable, dedupe: bool) -> None:
        super().__init__(data_fn)
        self._effect_fn = effect_fn
        self._dedupe = dedupe
        self._last_value = None
        self._initialized = False

    def _run(self) -> None:
        if self._disposed:
            return
        new_value = self._track(self._fn)
        if not self._initialized or not self._dedupe or new_value != self._last_value:
            self._last_value = new_value
            self._initialized = True
            self._effect_fn(new_value)


def autorun(fn: Callable[[], None]) -> Reaction:
    """Run fn immediately, then re-run whenever any behavior it reads changes.

    Returns the Reaction (call .dispose() to stop).
    """
    r = Reaction(fn)
    r._run()
    return r


def reaction(
    data_fn: Callable[[], T],
    effect_fn: Callable[[T], None],
    *,
    fire_immediately: bool = False,
    dedupe: bool = True,
) -> Reaction:
    """Track data_fn's behaviors; call effect_fn when they change.

    Returns the reaction (call .dispose() to stop).

    Usage:
        first = Cell("Alice")
        effects = []
        r = reaction(lambda: first.get().upper(), effects.append)
        # effects == [] — data_fn ran to establish deps only

        first._update("Bob")
        # effects == ["BOB"]
    """
    r = _DataReaction(data_fn, effect_fn, dedupe)
    if fire_immediately:
        r._run()
    else:
        r._last_value = r._track(data_fn)
        r._initialized = True
    return r
