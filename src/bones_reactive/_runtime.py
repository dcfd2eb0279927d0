"""Thread-confined runtime, the heart of bones_reactive.

Each thread lazily gets its own Runtime, which owns the dependency graph and
the single tracking scope. While an effect body evaluates, the scope records
every node it reads; those reads become the effect's outgoing edges.

Writes mark the written node, walk its dependents, and re-run the leaf
effects reached. Effects queued while a scope is open or a batch is active
run once everything has settled.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from bones_reactive._cell import ValueCell
from bones_reactive._graph import DependencyGraph, Node, NodeId, NodeState
from bones_reactive.config import RuntimeConfig
from bones_reactive.errors import CycleError, NestedEffectError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_local = threading.local()


class Runtime:
    """Dependency graph plus tracking scope for one thread."""

    def __init__(self, config: RuntimeConfig | None = None) -> None:
        self.graph = DependencyGraph()
        self.config = RuntimeConfig.from_env() if config is None else config
        # Node ids read by the effect currently evaluating, in read order.
        self.tracking_scope: list[NodeId] | None = None
        self._batch_depth = 0
        # Ordered set of effects waiting to re-run.
        self._pending: dict[NodeId, None] = {}
        self._flushing = False

    # --- Tracking scope ---

    @contextmanager
    def tracking(self) -> Iterator[list[NodeId]]:
        """Open the tracking scope for one evaluation. Closed on every exit path."""
        if self.tracking_scope is not None:
            raise NestedEffectError("You cannot create an effect while inside of an effect.")
        reads: list[NodeId] = []
        self.tracking_scope = reads
        try:
            yield reads
        finally:
            self.tracking_scope = None

    # --- Nodes ---

    def create_signal_node(self, value: Any, value_type: type | None = None) -> tuple[NodeId, type]:
        cell = ValueCell(value, value_type)
        return self.graph.add_node(Node(NodeState.DIRTY, cell)), cell.value_type

    def create_effect(self, fn: Callable[[Any], Any], value_type: type | None = None) -> tuple[NodeId, type]:
        """Evaluate fn(None) under tracking and insert a clean effect node.

        Effects queued by writes in the body run even when the body raises.
        """
        try:
            with self.tracking() as reads:
                value = fn(None)
            cell = ValueCell(value, value_type)
            node_id = self.graph.add_node(Node(NodeState.CLEAN, cell, compute=fn))
            self.graph.replace_dependencies(node_id, reads)
            logger.debug("Effect %d depends on %s", node_id, self.graph.dependencies_of(node_id))
        finally:
            self._flush()
        return node_id, cell.value_type

    def rerun(self, node_id: NodeId) -> None:
        """Re-evaluate an existing effect against its previous value."""
        node = self.graph.node(node_id)
        previous = node.cell.cast(node.cell.value_type)
        with self.tracking() as reads:
            value = node.compute(previous)
        if node_id not in self.graph:
            # The body disposed its own effect.
            return
        node.cell.check_value(value)
        self.graph.replace_dependencies(node_id, reads)
        node.cell.replace(node.cell.value_type, value)
        node.state = NodeState.CLEAN
        if self.config.log_reruns:
            logger.debug("Re-ran effect %d", node_id)

    def dispose(self, node_id: NodeId) -> None:
        self.graph.remove_node(node_id)
        self._pending.pop(node_id, None)

    # --- Read / write ---

    def read(self, node_id: NodeId, expected: type[T]) -> T:
        node = self.graph.node(node_id)
        value = node.cell.cast(expected)
        if self.tracking_scope is not None:
            self.tracking_scope.append(node_id)
        return value

    def write(self, node_id: NodeId, expected: type[T], mutator: Callable[[ValueCell], R]) -> R:
        """Apply mutator to the node's cell, then propagate and run effects."""
        node = self.graph.node(node_id)
        # Fail on a mismatched handle before the mutator runs.
        node.cell.cast(expected)
        result = mutator(node.cell)
        node.state = NodeState.DIRTY
        self._pending.update(dict.fromkeys(self.propagate(node_id)))
        node.state = NodeState.CLEAN
        self._flush()
        return result

    def propagate(self, node_id: NodeId) -> list[NodeId]:
        """Mark everything downstream of node_id CHECK and collect the leaf effects.

        Depth-first over dependents. A leaf reachable through several paths is
        collected once, in first-reached order.
        """
        leaves: dict[NodeId, None] = {}
        expanded: set[NodeId] = set()
        stack = [node_id]
        while stack:
            current = stack.pop()
            if current in expanded:
                continue
            expanded.add(current)
            dependents = self.graph.dependents_of(current)
            if not dependents:
                if self.graph.node(current).is_effect:
                    leaves[current] = None
                continue
            for dependent in reversed(dependents):
                self.graph.node(dependent).state = NodeState.CHECK
                stack.append(dependent)
        logger.debug("Write to node %d schedules %s", node_id, list(leaves))
        return list(leaves)

    # --- Scheduling ---

    def begin_batch(self) -> None:
        self._batch_depth += 1

    def end_batch(self) -> None:
        self._batch_depth -= 1
        self._flush()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _flush(self) -> None:
        """Run queued effects until none are left.

        Deferred while a batch or tracking scope is open, and re-entrant calls
        return early so the outermost flush drives every pass.
        """
        if self._flushing or self._batch_depth > 0 or self.tracking_scope is not None:
            return
        self._flushing = True
        try:
            passes = 0
            while self._pending:
                passes += 1
                if passes > self.config.max_flush_passes:
                    logger.warning(
                        "Effects still scheduled after %d passes, aborting: %s",
                        self.config.max_flush_passes,
                        list(self._pending),
                    )
                    raise CycleError(
                        f"Effects kept re-triggering for more than {self.config.max_flush_passes} passes."
                    )
                batch = list(self._pending)
                self._pending.clear()
                for node_id in batch:
                    if node_id in self.graph:
                        self.rerun(node_id)
        except BaseException:
            self._pending.clear()
            raise
        finally:
            self._flushing = False

    # --- Introspection ---

    def state_of(self, node_id: NodeId) -> NodeState:
        return self.graph.node(node_id).state

    def dependencies_of(self, node_id: NodeId) -> list[NodeId]:
        return self.graph.dependencies_of(node_id)

    def dependents_of(self, node_id: NodeId) -> list[NodeId]:
        return self.graph.dependents_of(node_id)


def current_runtime() -> Runtime:
    """The calling thread's Runtime, created on first use."""
    runtime = getattr(_local, "runtime", None)
    if runtime is None:
        runtime = _local.runtime = Runtime()
    return runtime


def reset_runtime(config: RuntimeConfig | None = None) -> Runtime:
    """Replace the calling thread's Runtime with a fresh one. Useful for testing."""
    _local.runtime = Runtime(config)
    return _local.runtime
