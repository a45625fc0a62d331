"""Toolkit-side glue: signals in, properties out, and a polling clock.

Everything here talks to widgets through the plain GObject surface
(connect/disconnect/set_property/queue_draw), so nothing in this module
imports gi. nowgtk.gtk binds it to the real GTK and GLib.
"""

from __future__ import annotations

import logging
import weakref
from typing import Callable, TypeVar

from nowgtk.behavior import Behavior, Cell
from nowgtk.combinators import before_es, from_changes, to_changes
from nowgtk.now import Now
from nowgtk.stream import EventStream

logger = logging.getLogger("nowgtk.bridge")

T = TypeVar("T")

# A GObject property name, or a setter called as setter(widget, value).
Attr = str | Callable[[object, object], object]


def _writer(attr: Attr) -> Callable[[object, object], object]:
    if isinstance(attr, str):
        return lambda widget, value: widget.set_property(attr, value)
    return attr


def set_attr(now: Now, attr: Attr, widget, behavior: Behavior[T]) -> None:
    """Keep a widget attribute equal to a behavior.

    The current value is written immediately. Every later change is written
    too, followed by a redraw request, until the widget is unrealized.
    Equal values are written again; nothing is elided.
    """
    write = _writer(attr)
    now.sync(write, widget, now.sample(behavior))

    destroyed, on_destroyed = now.callback()
    now.sync(widget.connect, "unrealize", lambda *_: on_destroyed(None))

    changes = to_changes(behavior)
    updates = before_es(changes, destroyed)

    def _write(value: T) -> None:
        write(widget, value)
        widget.queue_draw()

    now.call_stream(_write, updates)
    now.call_event(lambda _: changes.dispose(), destroyed)


def get_signal(now: Now, signal: str, widget, convert: Callable[[Callable[[T], None]], Callable]) -> EventStream[T]:
    """General interface to turn a GTK signal into an event stream.

    convert receives the function that feeds the stream and returns the
    native handler. For a handler shaped (range, scroll, value) -> bool:

        def convert(push):
            def handler(_range, _scroll, value):
                push(value)
                return True
            return handler

    Disposing the returned stream disconnects the handler.
    """
    stream, push = now.callback_stream()
    handler_id = now.sync(widget.connect, signal, convert(push))
    logger.debug("connected %r on %r (handler %s)", signal, widget, handler_id)

    def _disconnect() -> None:
        widget.disconnect(handler_id)

    stream._parent_disposer = _disconnect
    return stream


def get_unit_signal(now: Now, signal: str, widget) -> EventStream[None]:
    """Event stream from a signal whose handler carries no value."""
    return get_signal(now, signal, widget, lambda push: lambda *_: push(None))


def get_simple_signal(now: Now, signal: str, widget) -> EventStream:
    """Event stream from a signal whose handler carries a single value."""
    return get_signal(now, signal, widget, lambda push: lambda _widget, value: push(value))


class ClockPoller:
    """Periodic timer that feeds elapsed seconds into a sink while it lives.

    The poller only holds a weak reference to the sink. On the first tick
    where the sink has been collected, the timer cancels itself for good.
    """

    __slots__ = ("_deliver", "_sink", "_start", "_clock_us", "_running", "interval_ms")

    def __init__(
        self,
        deliver: Callable[[EventStream, float], None],
        sink: EventStream,
        precision: float,
        *,
        timeout_add: Callable[[int, Callable[[], bool]], object],
        clock_us: Callable[[], int],
    ) -> None:
        self._deliver = deliver
        self._sink = weakref.ref(sink)
        self._clock_us = clock_us
        self._start = clock_us()
        self._running = True
        self.interval_ms = round(precision * 1000)
        timeout_add(self.interval_ms, self.tick)

    @property
    def running(self) -> bool:
        return self._running

    def elapsed(self) -> float:
        """Seconds since the poller was created."""
        return (self._clock_us() - self._start) * 0.000001

    def tick(self) -> bool:
        """One timer callback. True keeps the timer, False cancels it."""
        if not self._running:
            return False
        sink = self._sink()
        if sink is None:
            self._running = False
            logger.debug("clock sink collected, cancelling %d ms timer", self.interval_ms)
            return False
        self._deliver(sink, self.elapsed())
        return True


def get_clock(
    now: Now,
    precision: float,
    *,
    timeout_add: Callable[[int, Callable[[], bool]], object],
    clock_us: Callable[[], int],
) -> Cell[float]:
    """Seconds since the clock was created, updated at most every precision seconds.

    The timer is freed once the returned behavior has been garbage collected.
    """
    stream, _ = now.callback_stream()
    ClockPoller(now.push, stream, precision, timeout_add=timeout_add, clock_us=clock_us)
    return from_changes(0.0, stream)
