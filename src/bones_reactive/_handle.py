"""Thread-tagged node handles.

A handle is a thin reference to a node in its creating thread's Runtime: the
node id, the creating thread, and the value type the node was created with.
Every operation checks the calling thread before touching the runtime.
"""

from __future__ import annotations

import copy
import threading
from typing import Callable, Generic, TypeVar

from bones_reactive._graph import NodeId, NodeState
from bones_reactive._runtime import Runtime, current_runtime
from bones_reactive.errors import CrossThreadAccessError

T = TypeVar("T")
R = TypeVar("R")


class NodeHandle(Generic[T]):
    """Base for signal and effect handles."""

    __slots__ = ("_id", "_thread", "_type")

    def __init__(self, node_id: NodeId, value_type: type[T], thread: threading.Thread | None = None) -> None:
        self._id = node_id
        self._type = value_type
        self._thread = threading.current_thread() if thread is None else thread

    @property
    def node_id(self) -> NodeId:
        return self._id

    @property
    def owning_thread(self) -> threading.Thread:
        return self._thread

    @property
    def value_type(self) -> type[T]:
        return self._type

    def _runtime(self) -> Runtime:
        if threading.current_thread() is not self._thread:
            raise CrossThreadAccessError(
                "Attempted to use a signal on a different thread than the one it was created on."
            )
        return current_runtime()

    @property
    def state(self) -> NodeState:
        return self._runtime().state_of(self._id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeHandle):
            return NotImplemented
        return self._id == other._id and self._thread is other._thread

    def __hash__(self) -> int:
        return hash((self._id, id(self._thread)))


class Readable(NodeHandle[T]):
    """Read capability: get() and with_()."""

    __slots__ = ()

    def get(self) -> T:
        """Read the value. Inside an effect body, registers the dependency."""
        runtime = self._runtime()
        value = runtime.read(self._id, self._type)
        if runtime.config.clone_on_get:
            return copy.copy(value)
        return value

    def with_(self, fn: Callable[[T], R]) -> R:
        """Call fn with the stored value (no copy) and return its result.

        The read is tracked exactly like get().
        """
        return fn(self._runtime().read(self._id, self._type))


class Writable(NodeHandle[T]):
    """Write capability: set() and update()."""

    __slots__ = ()

    def set(self, value: T) -> None:
        """Replace the value and re-run every effect that depends on it."""

        def _assign(cell):
            cell.replace(self._type, value)

        self._runtime().write(self._id, self._type, _assign)

    def update(self, fn: Callable[[T], R]) -> R:
        """Mutate the value in place through fn and return fn's result.

        fn receives the stored value itself; use set() for immutable values.
        """
        return self._runtime().write(self._id, self._type, lambda cell: fn(cell.cast(self._type)))
