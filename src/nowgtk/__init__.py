"""nowgtk: drive GTK widgets with behaviors and event streams."""

from importlib.metadata import version as _version

__version__ = _version("nowgtk")

from nowgtk._tracking import get_pending_count, transaction, untracked
from nowgtk.behavior import Behavior, Cell, Computed, constant, ffor, lift
from nowgtk.reaction import Reaction, autorun, reaction
from nowgtk.stream import Event, EventStream, never
from nowgtk.now import Now, init_now
from nowgtk.combinators import before_es, from_changes, to_changes
from nowgtk.bridge import ClockPoller, get_clock, get_signal, get_simple_signal, get_unit_signal, set_attr
# gtk NOT auto-imported — opt-in only, needs PyGObject

__all__ = [
    "Behavior",
    "Cell",
    "Computed",
    "constant",
    "ffor",
    "lift",
    "Reaction",
    "autorun",
    "reaction",
    "transaction",
    "untracked",
    "get_pending_count",
    "Event",
    "EventStream",
    "never",
    "Now",
    "init_now",
    "before_es",
    "from_changes",
    "to_changes",
    "ClockPoller",
    "get_clock",
    "get_signal",
    "get_simple_signal",
    "get_unit_signal",
    "set_attr",
]
