"""Tests for Reaction, autorun, and reaction."""

from nowgtk import Cell, autorun, reaction


class TestAutorun:
    def test_runs_immediately(self):
        c = Cell(10)
        log = []
        autorun(lambda: log.append(c.get()))
        assert log == [10]

    def test_reruns_on_change(self):
        c = Cell(10)
        log = []
        autorun(lambda: log.append(c.get()))
        c._update(20)
        assert log == [10, 20]

    def test_dispose_stops(self):
        c = Cell(10)
        log = []
        r = autorun(lambda: log.append(c.get()))
        r.dispose()
        c._update(20)
        assert log == [10]
        assert r.disposed


class TestReaction:
    def test_no_initial_effect(self):
        c = Cell("a")
        effects = []
        reaction(lambda: c.get(), effects.append)
        assert effects == []

    def test_fires_on_change(self):
        c = Cell("a")
        effects = []
        reaction(lambda: c.get(), effects.append)
        c._update("b")
        assert effects == ["b"]

    def test_fire_immediately(self):
        c = Cell("a")
        effects = []
        reaction(lambda: c.get(), effects.append, fire_immediately=True)
        assert effects == ["a"]

    def test_dedup_effect(self):
        """Effect only fires when data_fn result actually changes."""
        c = Cell(1)
        effects = []
        reaction(lambda: "even" if c.get() % 2 == 0 else "odd", effects.append)
        c._update(3)
        assert effects == []
        c._update(4)
        assert effects == ["even"]

    def test_no_dedupe_passes_equal_values(self):
        c = Cell(1)
        effects = []
        reaction(lambda: c.get(), effects.append, dedupe=False)
        c._update(1)
        c._update(1)
        assert effects == [1, 1]

    def test_effect_reads_are_not_tracked(self):
        c = Cell(1)
        other = Cell("x")
        effects = []
        reaction(lambda: c.get(), lambda v: effects.append((v, other.get())))
        other._update("y")
        assert effects == []
        c._update(2)
        assert effects == [(2, "y")]

    def test_dispose(self):
        c = Cell(1)
        effects = []
        r = reaction(lambda: c.get(), effects.append)
        c._update(2)
        r.dispose()
        c._update(3)
        assert effects == [2]
