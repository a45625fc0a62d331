"""The Now effect context — where the outside world meets the reactive graph.

Values coming from toolkit callbacks are not emitted on the spot. push()
queues them and posts one processing step through the configured schedule
function; the step drains the queue in arrival order inside a transaction.
Under GTK the schedule function is GLib.idle_add, so every step runs on the
GUI thread after the native handler has returned.

With no schedule function the step runs synchronously inside push().
"""

from __future__ import annotations

import functools
from collections import deque
from typing import Callable, TypeVar

from nowgtk._tracking import transaction
from nowgtk.behavior import Behavior
from nowgtk.stream import Disposer, Event, EventStream

T = TypeVar("T")
R = TypeVar("R")

Schedule = Callable[[Callable[[], None]], object]


class Now:
    """Effect context handed to setup code and the bridge functions."""

    def __init__(self, schedule: Schedule | None = None) -> None:
        self._schedule = schedule
        self._queue: deque[tuple[EventStream | Event, object]] = deque()
        self._step_posted = False
        self._in_step = False

    def sample(self, behavior: Behavior[T]) -> T:
        """Current value of a behavior, without tracking."""
        return behavior.sample()

    def sync(self, fn: Callable[..., R], *args, **kwargs) -> R:
        """Run a side-effecting call right now and return its result."""
        return fn(*args, **kwargs)

    def callback(self) -> tuple[Event, Callable[[object], None]]:
        """A fresh one-shot event and the function that fires it from outside."""
        event: Event = Event()
        return event, functools.partial(self.push, event)

    def callback_stream(self) -> tuple[EventStream, Callable[[object], None]]:
        """A fresh stream and the function that feeds it from outside."""
        stream: EventStream = EventStream()
        return stream, functools.partial(self.push, stream)

    def push(self, target: EventStream | Event, value: object) -> None:
        """Queue value for target and make sure a step is coming."""
        self._queue.append((target, value))
        if not self._in_step:
            self._request_step()

    def call_stream(self, fn: Callable[[T], object], stream: EventStream[T]) -> Disposer:
        """Run fn for every element of stream."""
        return stream.subscribe(fn)

    def call_event(self, fn: Callable[[T], object], event: Event[T]) -> Disposer:
        """Run fn once when event occurs."""
        return event.subscribe(fn)

    @property
    def pending(self) -> int:
        """Number of queued values not yet delivered."""
        return len(self._queue)

    def _request_step(self) -> None:
        if self._schedule is None:
            self._step()
        elif not self._step_posted:
            self._step_posted = True
            self._schedule(self._step)

    def _step(self) -> bool:
        """Deliver everything queued so far, plus whatever that delivery queues."""
        self._step_posted = False
        self._in_step = True
        try:
            # Reactions flush when the transaction exits and may push again.
            while self._queue:
                with transaction():
                    while self._queue:
                        target, value = self._queue.popleft()
                        target.emit(value)
        finally:
            self._in_step = False
        # False tells GLib.idle_add not to call us again.
        return False


def init_now(setup: Callable[[Now], R], schedule: Schedule | None = None) -> tuple[Now, R]:
    """Create a Now context and run setup(now) as its first step."""
    now = Now(schedule)
    now._in_step = True
    try:
        with transaction():
            result = setup(now)
    finally:
        now._in_step = False
    if now._queue:
        now._request_step()
    return now, result
