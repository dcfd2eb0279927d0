"""Batched writes.

Inside a batch, writes still update values and mark dependents immediately,
but leaf effects are queued instead of run. They run once each when the
outermost batch exits, so no effect observes a half-applied group of writes.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Callable, ParamSpec, TypeVar

from bones_reactive._runtime import current_runtime

P = ParamSpec("P")
R = TypeVar("R")


@contextmanager
def batch():
    """Context manager for batching writes.

    Usage:
        with batch():
            set_a.set(1)
            set_b.set(2)
            # effects reading a and b run here, once
    """
    runtime = current_runtime()
    runtime.begin_batch()
    try:
        yield
    finally:
        runtime.end_batch()


def batched(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator: run fn inside a batch.

    Usage:
        @batched
        def swap():
            a, b = first.get(), second.get()
            set_first.set(b)
            set_second.set(a)
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        with batch():
            return fn(*args, **kwargs)

    return wrapper


def pending_count() -> int:
    """Number of effects waiting to run. Useful for testing."""
    return current_runtime().pending_count
