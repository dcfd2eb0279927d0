"""Effects: computations that re-run when what they read changes.

An effect is evaluated once, synchronously, when it is created. Every signal
(or effect) it reads during that evaluation becomes a dependency. Writing any
of those re-runs the effect, passing it the result of its previous run.

Only leaf effects are re-run: an effect that some other effect reads is
marked CHECK during propagation and the leaf downstream of it re-runs instead.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from bones_reactive._handle import Readable
from bones_reactive._runtime import current_runtime
from bones_reactive.errors import DisposedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Effect(Readable[T]):
    """Handle to an effect's latest result."""

    __slots__ = ("_disposed",)

    def __init__(self, node_id, value_type, thread=None) -> None:
        super().__init__(node_id, value_type, thread)
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _runtime(self):
        runtime = super()._runtime()
        if self._disposed:
            raise DisposedError(f"Effect {self._id} has been disposed.")
        return runtime

    def dispose(self) -> None:
        """Remove the effect from the graph. It will never run again."""
        self._runtime().dispose(self._id)
        self._disposed = True
        logger.debug("Disposed effect %d", self._id)

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"Effect(node={self._id}, {state})"


def create_effect(fn: Callable[[T | None], T], value_type: type[T] | None = None) -> Effect[T]:
    """Run fn(None) now, then fn(previous) whenever a dependency is written.

    The result type defaults to the type of the first result. Pass
    ``value_type=object`` for an effect whose result type varies between runs.

    Raises NestedEffectError when called from inside another effect body.

    Usage:
        count, set_count = create_signal(1)
        doubled = create_effect(lambda _: count.get() * 2)
        set_count.set(5)
        doubled.get()  # 10
    """
    node_id, stored_type = current_runtime().create_effect(fn, value_type)
    return Effect(node_id, stored_type)


def effect(fn: Callable[[T | None], T]) -> Effect[T]:
    """Decorator form of create_effect().

    Usage:
        name, set_name = create_signal("Alice")

        @effect
        def greet(previous):
            print(f"Hello, {name.get()}")
    """
    return create_effect(fn)
