"""Tests for EventStream and Event."""

from nowgtk import Event, EventStream, never


class TestEmitSubscribe:
    """Core emit/subscribe behavior."""

    def test_subscribe_receives_emitted_values_in_order(self):
        stream = EventStream()
        received = []
        stream.subscribe(received.append)
        stream.emit(1)
        stream.emit(2)
        assert received == [1, 2]

    def test_multiple_subscribers(self):
        stream = EventStream()
        a, b = [], []
        stream.subscribe(a.append)
        stream.subscribe(b.append)
        stream.emit("x")
        assert a == ["x"]
        assert b == ["x"]

    def test_unsubscribe(self):
        stream = EventStream()
        received = []
        unsub = stream.subscribe(received.append)
        stream.emit(1)
        unsub()
        stream.emit(2)
        assert received == [1]

    def test_unsubscribe_idempotent(self):
        stream = EventStream()
        unsub = stream.subscribe(lambda v: None)
        unsub()
        unsub()  # should not raise


class TestOperators:
    def test_map(self):
        stream = EventStream()
        received = []
        stream.map(lambda v: v * 2).subscribe(received.append)
        stream.emit(3)
        stream.emit(5)
        assert received == [6, 10]

    def test_filter_then_map(self):
        stream = EventStream()
        received = []
        stream.filter(lambda v: v > 0).map(lambda v: v * 10).subscribe(received.append)
        stream.emit(-1)
        stream.emit(3)
        assert received == [30]


class TestBefore:
    def test_passes_until_event(self):
        stream = EventStream()
        stop = Event()
        received = []
        stream.before(stop).subscribe(received.append)
        stream.emit(1)
        stream.emit(2)
        stop.emit(None)
        stream.emit(3)
        assert received == [1, 2]

    def test_event_already_occurred(self):
        stream = EventStream()
        stop = Event()
        stop.emit(None)
        received = []
        truncated = stream.before(stop)
        truncated.subscribe(received.append)
        stream.emit(1)
        assert received == []
        assert truncated.disposed

    def test_truncation_detaches_from_parent(self):
        stream = EventStream()
        stop = Event()
        stream.before(stop)
        assert len(stream._subscribers) == 1
        stop.emit(None)
        assert stream._subscribers == []
        assert stream._children == []


class TestDispose:
    def test_emit_after_dispose_is_noop(self):
        stream = EventStream()
        received = []
        stream.subscribe(received.append)
        stream.dispose()
        stream.emit(1)
        assert received == []

    def test_dispose_propagates_to_children(self):
        parent = EventStream()
        child = parent.map(lambda v: v)
        grandchild = child.filter(lambda v: True)

        parent.dispose()

        assert child.disposed
        assert grandchild.disposed

    def test_child_dispose_does_not_affect_parent(self):
        parent = EventStream()
        child = parent.map(lambda v: v)
        received_parent = []
        parent.subscribe(received_parent.append)

        child.dispose()

        parent.emit(1)
        assert received_parent == [1]
        assert not parent.disposed

    def test_parent_disposer_runs_once(self):
        calls = []
        stream = EventStream()
        stream._parent_disposer = lambda: calls.append(1)
        stream.dispose()
        stream.dispose()
        assert calls == [1]


class TestEvent:
    def test_first_emit_wins(self):
        e = Event()
        received = []
        e.subscribe(received.append)
        e.emit("a")
        e.emit("b")
        assert received == ["a"]
        assert e.occurred
        assert e.value == "a"

    def test_late_subscriber_called_immediately(self):
        e = Event()
        e.emit(7)
        received = []
        e.subscribe(received.append)
        assert received == [7]

    def test_unsubscribe_before_occurrence(self):
        e = Event()
        received = []
        unsub = e.subscribe(received.append)
        unsub()
        e.emit(1)
        assert received == []

    def test_never_is_pending(self):
        e = never()
        assert not e.occurred
        assert e.value is None
