from __future__ import annotations

import networkx as nx
from typing import Any, Dict, List, Optional, Tuple, Union

from mmgraph.exceptions import DuplicateVertexError, MissingVertexError
from mmgraph.graph.graph_schema import Edge, Vertex, VisitingState

VertexRef = Union[Vertex, int]


def vertex_key(vertex: VertexRef) -> int:
    if isinstance(vertex, Vertex):
        return vertex.key
    return vertex


class Graph:
    """
    Authoritative in-memory graph representation.

    Vertices and edges live in arenas addressed by integer handles: the
    networkx multigraph is the adjacency index (nodes are vertex keys,
    edge keys are edge handles), the edge arena maps handles to Edge
    values and the edge sequence is an ordered list of handles.

    Undirected graphs link a reverse edge into the adjacency index for
    every added edge; reverse edges never enter the edge sequence.
    """

    def __init__(self, directed: bool = True) -> None:
        self._directed = directed
        self.grouped_vertex_count = 0
        self.metadata: Dict[str, Any] = {}

        self._adjacency = nx.MultiDiGraph()
        self._edge_arena: Dict[int, Edge] = {}
        self._sequence: List[int] = []
        # sequenced handle -> its materialized reverse handle, and back
        self._reverse: Dict[int, int] = {}
        self._reverse_owner: Dict[int, int] = {}
        self._next_handle = 0

    @property
    def directed(self) -> bool:
        return self._directed

    def is_directed(self) -> bool:
        return self._directed

    # -------------------- Vertices --------------------

    def add_vertex(self, vertex: Vertex) -> None:
        if vertex.key in self._adjacency:
            raise DuplicateVertexError(vertex.key)
        self._adjacency.add_node(vertex.key, data=vertex)

    def remove_vertex(self, key: int) -> None:
        if key not in self._adjacency:
            return

        incident = self._incoming_handles(key) + self._outgoing_handles(key)
        for handle in incident:
            # self-loops show up in both lists
            if handle in self._edge_arena:
                self._unlink(handle)

        self._adjacency.remove_node(key)

    def get_vertex(self, key: int) -> Optional[Vertex]:
        if key not in self._adjacency:
            return None
        return self._adjacency.nodes[key]["data"]

    def get_vertices(self) -> List[Vertex]:
        return [data["data"] for _, data in self._adjacency.nodes(data=True)]

    def contains_vertex(self, vertex: VertexRef) -> bool:
        return vertex_key(vertex) in self._adjacency

    def get_first_vertex(self) -> Vertex:
        for _, data in self._adjacency.nodes(data=True):
            return data["data"]
        raise LookupError("graph has no vertices")

    def unvisit_all_vertices(self) -> None:
        for vertex in self.get_vertices():
            vertex.visiting_state = VisitingState.NOT_VISITED

    # -------------------- Edges --------------------

    def add_edge(self, edge: Edge, index: Optional[int] = None) -> None:
        for key in (edge.source, edge.sink):
            if key not in self._adjacency:
                raise MissingVertexError(key)

        if index is not None and not 0 <= index <= len(self._sequence):
            raise IndexError(
                f"edge index {index} outside 0..{len(self._sequence)}"
            )

        handle = self._link(edge)
        if index is None:
            self._sequence.append(handle)
        else:
            self._sequence.insert(index, handle)

        if not self._directed:
            reverse = self._link(edge.revert())
            self._reverse[handle] = reverse
            self._reverse_owner[reverse] = handle

    def remove_edge(self, edge: Edge, include_reverse: bool = False) -> None:
        """
        Remove the first edge equal to ``edge`` by (source, sink).

        A sequenced edge is preferred over an adjacency-only reverse edge.
        The reverse edge materialized for an undirected graph stays linked
        unless ``include_reverse`` is set, in which case exactly that
        edge's own reverse is unlinked with it.
        """
        if edge.source not in self._adjacency:
            return

        handle = next(
            (h for h in self._sequence if self._edge_arena[h] == edge),
            None,
        )
        if handle is None:
            handle = next(
                (
                    h
                    for h in self._outgoing_handles(edge.source)
                    if self._edge_arena[h] == edge
                ),
                None,
            )
        if handle is None:
            return

        reverse = self._reverse.get(handle)
        self._unlink(handle)
        if include_reverse and reverse is not None:
            self._unlink(reverse)

    def get_edge(self, source: VertexRef, sink: VertexRef) -> Optional[Edge]:
        source_key = vertex_key(source)
        sink_key = vertex_key(sink)
        if source_key not in self._adjacency:
            return None

        for handle in self._outgoing_handles(source_key):
            edge = self._edge_arena[handle]
            if edge.sink == sink_key:
                return edge
        return None

    def get_edges(self) -> Tuple[Edge, ...]:
        return tuple(self._edge_arena[h] for h in self._sequence)

    # -------------------- Adjacency --------------------

    def outgoing_edges(self, vertex: VertexRef) -> List[Edge]:
        key = self._require(vertex)
        return [self._edge_arena[h] for h in self._outgoing_handles(key)]

    def incoming_edges(self, vertex: VertexRef) -> List[Edge]:
        key = self._require(vertex)
        return [self._edge_arena[h] for h in self._incoming_handles(key)]

    def successors(self, vertex: VertexRef) -> List[Vertex]:
        return [self.get_vertex(e.sink) for e in self.outgoing_edges(vertex)]

    def predecessors(self, vertex: VertexRef) -> List[Vertex]:
        return [self.get_vertex(e.source) for e in self.incoming_edges(vertex)]

    # -------------------- Analytics --------------------

    def count_vertices(self) -> int:
        return self._adjacency.number_of_nodes()

    def count_edges(self) -> int:
        return len(self._sequence)

    # -------------------- Cloning --------------------

    def copy(self) -> "Graph":
        g = Graph(self._directed)
        g.grouped_vertex_count = self.grouped_vertex_count
        g.metadata = dict(self.metadata)

        for v in self.get_vertices():
            g.add_vertex(Vertex(key=v.key, balance=v.balance))

        for e in self.get_edges():
            g.add_edge(
                Edge(
                    source=e.source,
                    sink=e.sink,
                    capacity=e.capacity,
                    cost=e.cost,
                )
            )

        return g

    # -------------------- Internals --------------------

    def _require(self, vertex: VertexRef) -> int:
        key = vertex_key(vertex)
        if key not in self._adjacency:
            raise MissingVertexError(key)
        return key

    def _link(self, edge: Edge) -> int:
        handle = self._next_handle
        self._next_handle += 1

        self._edge_arena[handle] = edge
        self._adjacency.add_edge(edge.source, edge.sink, key=handle)
        return handle

    def _unlink(self, handle: int) -> None:
        edge = self._edge_arena.pop(handle)
        self._adjacency.remove_edge(edge.source, edge.sink, key=handle)
        reverse = self._reverse.pop(handle, None)
        if reverse is not None:
            del self._reverse_owner[reverse]
        owner = self._reverse_owner.pop(handle, None)
        if owner is not None:
            del self._reverse[owner]
        if handle in self._sequence:
            self._sequence.remove(handle)

    # handles grow monotonically, so sorting restores insertion order
    def _outgoing_handles(self, key: int) -> List[int]:
        return sorted(k for _, _, k in self._adjacency.out_edges(key, keys=True))

    def _incoming_handles(self, key: int) -> List[int]:
        return sorted(k for _, _, k in self._adjacency.in_edges(key, keys=True))

    def __repr__(self) -> str:
        kind = "directed" if self._directed else "undirected"
        return (
            f"Graph({kind}, vertices={self.count_vertices()}, "
            f"edges={self.count_edges()})"
        )
