"""
Graph Store - single owner of nodes and edges.

Nodes are identified by their position in an ordered list (insertion order),
so deleting a node compacts the indices of every later node and rewrites the
edges that reference them. Edges are undirected and unique per unordered pair.

Only the `state` field of a node is written by anything other than this
module (the traversal engine and explicit colour resets).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import networkx as nx

from graphwalk.constants import HIT_RADIUS

logger = logging.getLogger(__name__)


class VisualState(str, Enum):
    """Per-node render state driven by the traversal engine."""
    DEFAULT = "default"
    VISITING = "visiting"
    VISITED = "visited"


@dataclass
class Node:
    x: float
    y: float
    label: str
    state: VisualState = VisualState.DEFAULT


@dataclass
class Edge:
    u: int
    v: int

    def touches(self, index: int) -> bool:
        return self.u == index or self.v == index

    def connects(self, a: int, b: int) -> bool:
        return (self.u == a and self.v == b) or (self.u == b and self.v == a)

    def other(self, index: int) -> int:
        return self.v if self.u == index else self.u


class GraphStore:
    """
    Ordered nodes plus undirected edges.

    Usage:
        store = GraphStore()
        a = store.add_node(0, 0, "A")
        b = store.add_node(100, 0, "B")
        store.add_edge(a, b)          # True
        store.add_edge(b, a)          # False, duplicate
        store.hit_test(90, 5)         # 1
    """

    def __init__(self):
        self.nodes: List[Node] = []
        self.edges: List[Edge] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def node(self, index: int) -> Node:
        self._check_index(index)
        return self.nodes[index]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.nodes):
            raise IndexError(f"Node index {index} out of range (0..{len(self.nodes) - 1})")

    # --- Mutations ---

    def add_node(self, x: float, y: float, label: str) -> int:
        """Append a node in the DEFAULT state and return its index."""
        self.nodes.append(Node(float(x), float(y), label))
        index = len(self.nodes) - 1
        logger.debug(f"Added node {index} '{label}' at ({x:.1f}, {y:.1f})")
        return index

    def has_edge(self, u: int, v: int) -> bool:
        return any(e.connects(u, v) for e in self.edges)

    def add_edge(self, u: int, v: int) -> bool:
        """
        Connect u and v. Returns False (and changes nothing) when the pair is
        already connected in either order or when u == v.
        """
        self._check_index(u)
        self._check_index(v)
        if u == v or self.has_edge(u, v):
            return False
        self.edges.append(Edge(u, v))
        logger.debug(f"Added edge {u} - {v}")
        return True

    def delete_node(self, index: int) -> Node:
        """
        Remove a node and every edge touching it, then shift every endpoint
        above `index` down by one so edges keep pointing at the same nodes.
        """
        self._check_index(index)
        removed = self.nodes.pop(index)

        self.edges = [e for e in self.edges if not e.touches(index)]
        for e in self.edges:
            if e.u > index:
                e.u -= 1
            if e.v > index:
                e.v -= 1

        logger.debug(f"Deleted node {index} '{removed.label}'")
        return removed

    def reset_states(self) -> None:
        for n in self.nodes:
            n.state = VisualState.DEFAULT

    def clear(self) -> None:
        self.nodes = []
        self.edges = []

    # --- Queries ---

    def hit_test(self, wx: float, wy: float, radius: float = HIT_RADIUS) -> Optional[int]:
        """
        Index of the first node (lowest index, not the nearest) whose center is
        closer than `radius` to the world point, or None.
        """
        r2 = radius * radius
        for i, n in enumerate(self.nodes):
            dx = wx - n.x
            dy = wy - n.y
            if dx * dx + dy * dy < r2:
                return i
        return None

    def neighbors_of(self, u: int) -> List[int]:
        """Neighbors of u in edge-insertion order."""
        self._check_index(u)
        return [e.other(u) for e in self.edges if e.touches(u)]

    def edge_pairs(self) -> List[Tuple[int, int]]:
        return [(e.u, e.v) for e in self.edges]

    def labels(self) -> List[str]:
        return [n.label for n in self.nodes]

    def to_networkx(self) -> nx.Graph:
        """
        Export topology as an undirected networkx graph. Nodes are added in
        index order and edges in insertion order, so each adjacency dict keeps
        the same neighbor order as `neighbors_of`.
        """
        G = nx.Graph()
        for i, n in enumerate(self.nodes):
            G.add_node(i, label=n.label, x=n.x, y=n.y, state=n.state.value)
        G.add_edges_from(self.edge_pairs())
        return G

    def component_count(self) -> int:
        if not self.nodes:
            return 0
        return nx.number_connected_components(self.to_networkx())
