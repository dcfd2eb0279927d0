"""Signals: reactive storage cells.

Reading a signal inside an effect body registers the effect as a dependent.
Writing it re-runs every leaf effect downstream before the write returns.

Handles only hold a node id; the value lives in the creating thread's
dependency graph.
"""

from __future__ import annotations

from typing import TypeVar

from bones_reactive._handle import Readable, Writable
from bones_reactive._runtime import current_runtime

T = TypeVar("T")


class ReadSignal(Readable[T]):
    """Read half of a signal."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"ReadSignal(node={self._id}, type={self._type.__name__})"


class WriteSignal(Writable[T]):
    """Write half of a signal."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"WriteSignal(node={self._id}, type={self._type.__name__})"


class RwSignal(Readable[T], Writable[T]):
    """A signal handle with both read and write capability."""

    __slots__ = ()

    def read_only(self) -> ReadSignal[T]:
        self._runtime()
        return ReadSignal(self._id, self._type, self._thread)

    def write_only(self) -> WriteSignal[T]:
        self._runtime()
        return WriteSignal(self._id, self._type, self._thread)

    def __repr__(self) -> str:
        return f"RwSignal(node={self._id}, type={self._type.__name__})"


def create_signal(initial: T, value_type: type[T] | None = None) -> tuple[ReadSignal[T], WriteSignal[T]]:
    """Create a signal and return its read and write halves.

    The value type defaults to ``type(initial)`` and is fixed for the
    signal's lifetime.

    Usage:
        count, set_count = create_signal(12)
        count.get()  # 12
        set_count.set(13)
    """
    node_id, stored_type = current_runtime().create_signal_node(initial, value_type)
    return ReadSignal(node_id, stored_type), WriteSignal(node_id, stored_type)


def create_rw_signal(initial: T, value_type: type[T] | None = None) -> RwSignal[T]:
    """Create a signal and return a single read/write handle."""
    node_id, stored_type = current_runtime().create_signal_node(initial, value_type)
    return RwSignal(node_id, stored_type)
