"""Textual integration for bones_reactive. Opt-in, requires textual.

Signals never leave their thread, so worker threads reach them through
setter(), which hands the write to the app thread with call_from_thread.
Widget-facing effects go through reaction(), which skips its side effect
while the widget tree is being replaced and tolerates widgets that have
not been mounted yet.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Callable, TypeVar

from textual.css.query import NoMatches

from bones_reactive.effect import Effect, create_effect
from bones_reactive.signal import WriteSignal

T = TypeVar("T")

# Keyed by id(app) so several apps can coexist in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend guarded side effects during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def reaction(
    app,
    data_fn: Callable[[], T],
    effect_fn: Callable[[T], Any],
    *,
    fire_immediately: bool = False,
) -> Effect:
    """Track data_fn; call effect_fn with its result when the result changes.

    data_fn always runs, so dependencies survive a paused app. effect_fn is
    skipped while the app is not safe, and NoMatches from widget queries is
    ignored. Other errors propagate out of the triggering write.
    """
    first_run = True

    def _body(previous):
        nonlocal first_run
        value = data_fn()
        fire = fire_immediately if first_run else value != previous
        first_run = False
        if fire and is_safe(app):
            try:
                effect_fn(value)
            except NoMatches:
                pass
        return value

    return create_effect(_body, value_type=object)


def setter(app, write: WriteSignal[T]) -> Callable[[T], None]:
    """Return a callable that sets `write` from any thread.

    Calls from the signal's own thread write directly; calls from other
    threads are marshaled with ``app.call_from_thread``.
    """
    owner = write.owning_thread

    def _set(value: T) -> None:
        if threading.current_thread() is owner:
            write.set(value)
        else:
            app.call_from_thread(write.set, value)

    return _set
