"""Dependency tracking and step batching for the runtime.

Uses contextvars to track which behaviors are read during a computed/reaction
evaluation, building the dependency graph automatically.

Batching: everything that happens inside one runtime step (or an explicit
`with transaction()`) accumulates invalidations and flushes them once at the
end, so a reaction sees all of a step's updates together.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nowgtk.behavior import Computed
    from nowgtk.reaction import Reaction

    Derivation = Computed | Reaction

# The currently-evaluating derivation (computed or reaction).
# When set, any Behavior.get() call registers itself as a dependency.
current_derivation: contextvars.ContextVar[Derivation | None] = contextvars.ContextVar(
    "current_derivation", default=None
)

# Batch depth counter. When > 0, invalidations are deferred.
_batch_depth: int = 0

# Derivations that were invalidated during a batch, awaiting flush.
# dict keeps invalidation order, so reactions run in the order they were hit.
_pending: dict[Derivation, None] = {}


def begin_batch() -> None:
    """Enter a batching scope. Nested batches are supported."""
    global _batch_depth
    _batch_depth += 1


def end_batch() -> None:
    """Exit a batching scope. When the outermost scope exits, flush pending derivations."""
    global _batch_depth
    _batch_depth -= 1
    if _batch_depth == 0:
        _flush_pending()


def schedule(derivation: Derivation) -> None:
    """Schedule a derivation for re-evaluation.

    If inside a batch, defers. Otherwise, runs immediately.
    """
    if _batch_depth > 0:
        _pending[derivation] = None
    else:
        derivation._run()


def _flush_pending() -> None:
    """Run all pending derivations. Handles derivations scheduled during flush."""
    while _pending:
        batch = list(_pending)
        _pending.clear()
        for derivation in batch:
            derivation._run()


@contextmanager
def transaction():
    """Batch every update made inside the block.

    Usage:
        with transaction():
            a._update(1)
            b._update(2)
            # reactions fire here, after both are set
    """
    begin_batch()
    try:
        yield
    finally:
        end_batch()


@contextmanager
def untracked():
    """Read behaviors without registering them as dependencies."""
    token = current_derivation.set(None)
    try:
        yield
    finally:
        current_derivation.reset(token)


def get_pending_count() -> int:
    """Number of derivations waiting to run. Useful for testing."""
    return len(_pending)
