"""GTK 3 integration for nowgtk. Opt-in — requires PyGObject.

Binds the bridge to the real toolkit: runtime steps are posted with
GLib.idle_add, the clock uses GLib timeouts and the monotonic clock, and a
handful of widget constructors come pre-wired with their natural stream or
behavior.
"""

from __future__ import annotations

import logging
from typing import Callable

import gi

gi.require_version("Gtk", "3.0")
from gi.repository import GLib, Gtk  # noqa: E402

from nowgtk.behavior import Behavior, Cell  # noqa: E402
from nowgtk.bridge import get_signal, get_unit_signal, set_attr  # noqa: E402
from nowgtk.bridge import get_clock as _get_clock  # noqa: E402
from nowgtk.combinators import from_changes  # noqa: E402
from nowgtk.now import Now, init_now  # noqa: E402
from nowgtk.stream import Event, EventStream  # noqa: E402

logger = logging.getLogger("nowgtk.gtk")

IconName = str

# Module-owned: the GTK main loop may only be entered once per process.
_started = False


def _post(step: Callable[[], bool]) -> None:
    GLib.idle_add(step)


def run_now_gtk(setup: Callable[[Now], Event | None]) -> None:
    """Run setup in a fresh Now context, then hand control to Gtk.main().

    Call only once per process. If setup returns an Event, the main loop
    quits when it occurs.
    """
    global _started
    if _started:
        raise RuntimeError("run_now_gtk() may only be called once per process")
    _started = True

    now, done = init_now(setup, _post)
    if isinstance(done, Event):
        if done.occurred:
            logger.info("setup finished before the main loop started")
            return
        now.call_event(lambda _: Gtk.main_quit(), done)

    logger.info("entering GTK main loop")
    Gtk.main()
    logger.info("GTK main loop finished")


def get_clock(now: Now, precision: float) -> Cell[float]:
    """Seconds since creation, updated at most every precision seconds.

    The GLib timeout is removed once the behavior is garbage collected.
    """
    return _get_clock(now, precision, timeout_add=GLib.timeout_add, clock_us=GLib.get_monotonic_time)


# ─── Widgets ─────────────────────────────────────────────────────────────────


def _decorate(now: Now, button, icon_name: IconName | None, label: str | None) -> None:
    if icon_name is not None:
        image = now.sync(Gtk.Image.new_from_icon_name, icon_name, Gtk.IconSize.BUTTON)
        now.sync(button.set_property, "image", image)
    if label is not None:
        now.sync(button.set_property, "label", label)


def create_label(now: Now, text: Behavior[str]) -> Gtk.Label:
    label = now.sync(Gtk.Label)
    set_attr(now, "label", label, text)
    return label


def create_dynamic_button(now: Now, text: Behavior[str]) -> tuple[Gtk.Button, EventStream[None]]:
    """Button whose caption follows a behavior."""
    button = now.sync(Gtk.Button)
    set_attr(now, "label", button, text)
    clicks = get_unit_signal(now, "clicked", button)
    return button, clicks


def create_button(
    now: Now, icon_name: IconName | None = None, label: str | None = None
) -> tuple[Gtk.Button, EventStream[None]]:
    button = now.sync(Gtk.Button)
    _decorate(now, button, icon_name, label)
    clicks = get_unit_signal(now, "clicked", button)
    return button, clicks


def create_toggle_button(
    now: Now, icon_name: IconName | None, label: str | None, initial: bool
) -> tuple[Gtk.ToggleButton, Behavior[bool]]:
    """Toggle button plus a behavior tracking whether it is active."""
    button = now.sync(Gtk.ToggleButton)
    _decorate(now, button, icon_name, label)
    now.sync(button.set_property, "active", initial)
    toggled = get_signal(now, "toggled", button, lambda push: lambda b: push(b.get_active()))
    return button, from_changes(initial, toggled)


def create_entry(now: Now, initial_text: str) -> tuple[Gtk.Entry, Behavior[str]]:
    """Text entry plus a behavior tracking its text."""
    entry = now.sync(Gtk.Entry)
    now.sync(entry.set_property, "text", initial_text)
    edits = get_signal(now, "changed", entry, lambda push: lambda e: push(e.get_text()))
    return entry, from_changes(initial_text, edits)


def create_progress_bar(now: Now, progress: Behavior[float]) -> Gtk.ProgressBar:
    bar = now.sync(Gtk.ProgressBar)
    set_attr(now, "fraction", bar, progress)
    return bar


def create_slider(
    now: Now, lo: float, hi: float, step: float, value: Behavior[float]
) -> tuple[Gtk.Scale, EventStream[float]]:
    """Horizontal slider driven by value; the stream carries requested values.

    The change-value handler reports the value and stops the default
    handler, so the slider only moves when value changes.
    """
    slider = now.sync(Gtk.Scale.new_with_range, Gtk.Orientation.HORIZONTAL, lo, hi, step)
    set_attr(now, Gtk.Range.set_value, slider, value)

    def convert(push):
        def handler(_range, _scroll, requested):
            push(requested)
            return True

        return handler

    requests = get_signal(now, "change-value", slider, convert)
    return slider, requests


def run_file_chooser_dialog(now: Now, dialog: Gtk.FileChooserDialog) -> Event[str | None]:
    """Show dialog; the event carries the chosen path, or None if cancelled."""
    chosen, fire = now.callback()
    handler_id = None

    def on_response(dlg, response) -> None:
        dlg.hide()
        if response == Gtk.ResponseType.ACCEPT:
            fire(dlg.get_filename())
        else:
            fire(None)
        dlg.disconnect(handler_id)

    handler_id = now.sync(dialog.connect, "response", on_response)
    now.sync(dialog.show)
    return chosen
