"""Conversions between discrete streams and continuous behaviors."""

from __future__ import annotations

from typing import TypeVar

from nowgtk.behavior import Behavior, Cell
from nowgtk.reaction import reaction
from nowgtk.stream import Event, EventStream

T = TypeVar("T")


def from_changes(initial: T, stream: EventStream[T]) -> Cell[T]:
    """Behavior that starts at initial and then holds the latest element.

    Only the latest value is kept. The cell holds a strong reference to its
    source, so the stream lives exactly as long as something needs the cell.
    """
    cell = Cell(initial)
    cell._source = stream
    stream.subscribe(cell._update)
    return cell


def to_changes(behavior: Behavior[T]) -> EventStream[T]:
    """Stream of every later value of behavior, equal values included.

    Disposing the stream stops watching the behavior.
    """
    stream: EventStream[T] = EventStream()
    r = reaction(behavior.get, stream.emit, dedupe=False)
    stream._parent_disposer = r.dispose
    return stream


def before_es(stream: EventStream[T], event: Event) -> EventStream[T]:
    """Elements of stream that occur strictly before event."""
    return stream.before(event)
