"""Dependency graph: nodes, their invalidation state, and read edges.

An edge A -> B means "A read B during its last evaluation". Dependents of a
node are therefore its predecessors in the underlying networkx.DiGraph, and
dependencies are its successors.

Edges are checked at insertion so the graph stays acyclic; propagation can
walk it without a depth bound.
"""

from __future__ import annotations

import enum
import itertools
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import networkx as nx

from bones_reactive._cell import ValueCell
from bones_reactive.errors import CycleError, DisposedError

logger = logging.getLogger(__name__)

NodeId = int


class NodeState(enum.Enum):
    CLEAN = "clean"
    # An upstream dependency changed; whether this node is stale is unknown.
    CHECK = "check"
    DIRTY = "dirty"


@dataclass(slots=True)
class Node:
    state: NodeState
    cell: ValueCell
    compute: Callable[[Any], Any] | None = None

    @property
    def is_effect(self) -> bool:
        return self.compute is not None

    @property
    def kind(self) -> str:
        return "effect" if self.is_effect else "signal"


class DependencyGraph:
    """Owned directed graph of Nodes, keyed by stable integer ids."""

    __slots__ = ("_g", "_ids")

    def __init__(self) -> None:
        self._g = nx.DiGraph()
        self._ids = itertools.count(1)

    def add_node(self, node: Node) -> NodeId:
        node_id = next(self._ids)
        self._g.add_node(node_id, node=node)
        logger.debug("Added %s node %d", node.kind, node_id)
        return node_id

    def node(self, node_id: NodeId) -> Node:
        try:
            return self._g.nodes[node_id]["node"]
        except KeyError:
            raise DisposedError(f"Node {node_id} is not in the graph.") from None

    def add_edge(self, from_id: NodeId, to_id: NodeId) -> None:
        """Record that `from_id` depends on `to_id`.

        Not idempotent from the caller's point of view: evaluations must go
        through replace_dependencies() so stale edges never accumulate.
        """
        self._ensure(from_id)
        self._ensure(to_id)
        if from_id == to_id or nx.has_path(self._g, to_id, from_id):
            raise CycleError(f"Node {from_id} would depend on itself through node {to_id}.")
        self._g.add_edge(from_id, to_id)

    def replace_dependencies(self, node_id: NodeId, deps: Iterable[NodeId]) -> None:
        """Swap the outgoing edge set of `node_id` for `deps` (deduplicated).

        On CycleError the previous edge set is restored before re-raising.
        """
        previous = self.dependencies_of(node_id)
        self._g.remove_edges_from([(node_id, dep) for dep in previous])
        try:
            for dep in dict.fromkeys(deps):
                self.add_edge(node_id, dep)
        except (CycleError, DisposedError):
            self._g.remove_edges_from(list(self._g.out_edges(node_id)))
            self._g.add_edges_from((node_id, dep) for dep in previous)
            raise

    def dependents_of(self, node_id: NodeId) -> list[NodeId]:
        """Nodes that recorded `node_id` as a dependency."""
        self._ensure(node_id)
        return list(self._g.predecessors(node_id))

    def dependencies_of(self, node_id: NodeId) -> list[NodeId]:
        self._ensure(node_id)
        return list(self._g.successors(node_id))

    def _ensure(self, node_id: NodeId) -> None:
        if node_id not in self._g:
            raise DisposedError(f"Node {node_id} is not in the graph.")

    def remove_node(self, node_id: NodeId) -> None:
        self._ensure(node_id)
        self._g.remove_node(node_id)
        logger.debug("Removed node %d", node_id)

    def is_acyclic(self) -> bool:
        return nx.is_directed_acyclic_graph(self._g)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._g

    def __len__(self) -> int:
        return self._g.number_of_nodes()

    def __repr__(self) -> str:
        return f"DependencyGraph(nodes={self._g.number_of_nodes()}, edges={self._g.number_of_edges()})"
