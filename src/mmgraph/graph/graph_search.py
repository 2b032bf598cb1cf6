from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from mmgraph.config.settings import TraversalConfig
from mmgraph.exceptions import MissingVertexError, ResourceExhaustedError
from mmgraph.graph.graph_schema import Vertex, VisitingState
from mmgraph.graph.graph_store import Graph, VertexRef, vertex_key


@dataclass
class SearchContext:
    """
    State of a single depth-first search.

    Each call owns its context, so concurrent searches on different graphs
    never share the "found" signal.
    """

    target: Optional[Vertex]
    visited: List[Vertex] = field(default_factory=list)
    found: bool = False


@dataclass(frozen=True)
class SearchResult:
    """
    Vertices in visit order and whether the target was reached.
    """

    vertices: List[Vertex]
    found: bool


class DepthFirstSearch:
    """
    Depth-first reachability and connectivity queries over a Graph.

    Searches follow outgoing edges only and enter vertices that are still
    NOT_VISITED. Visited vertices are marked VISITED and are never reset
    here; call ``Graph.unvisit_all_vertices()`` before a search that needs
    a clean slate.
    """

    def __init__(
        self,
        graph: Graph,
        config: Optional[TraversalConfig] = None,
    ) -> None:
        self.graph = graph
        self.config = config or TraversalConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def accessible_vertices(self, start: VertexRef) -> List[Vertex]:
        """
        All vertices reachable from ``start``, in visit order (start first).
        """
        return self.search(start).vertices

    def has_path(self, start: VertexRef, end: VertexRef) -> bool:
        return self.search(start, end).found

    def vertices_on_path(self, start: VertexRef, end: VertexRef) -> List[Vertex]:
        """
        Depth-first exploration trace from ``start``, truncated where
        ``end`` is first reached.

        The trace includes dead-end branches explored before the target,
        so it is not a shortest path. If ``end`` is unreachable the full
        exploration is returned.
        """
        return self.search(start, end).vertices

    def count_components(self, start: Optional[VertexRef] = None) -> int:
        """
        Number of depth-first sweeps needed to reach every vertex.

        Each sweep starts at a vertex not reached by an earlier sweep. On
        directed graphs this counts forward-reachability components, so the
        result depends on edge direction and on the seed.
        """
        if start is None:
            if self.graph.count_vertices() == 0:
                return 0
            seed: Optional[Vertex] = self.graph.get_first_vertex()
        else:
            seed = self._resolve(start)

        remaining = self.graph.get_vertices()
        components = 0

        while seed is not None:
            components += 1

            reached = set(self.search(seed).vertices)
            remaining = [v for v in remaining if v not in reached]
            seed = remaining[0] if remaining else None

        logging.getLogger("mmgraph.search").debug(
            "components=%s vertices=%s",
            components,
            self.graph.count_vertices(),
        )
        return components

    def search(
        self,
        start: VertexRef,
        end: Optional[VertexRef] = None,
    ) -> SearchResult:
        """
        Run one depth-first search, stopping early once ``end`` is reached.
        """
        context = SearchContext(
            target=self._resolve(end) if end is not None else None
        )
        first = self._resolve(start)

        try:
            self._run(context, first)
        except MemoryError as exc:
            raise ResourceExhaustedError(
                f"search from vertex {first.key} ran out of memory"
            ) from exc

        logging.getLogger("mmgraph.search").debug(
            "search start=%s end=%s visited=%s found=%s",
            first.key,
            None if context.target is None else context.target.key,
            len(context.visited),
            context.found,
        )
        return SearchResult(vertices=context.visited, found=context.found)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run(self, context: SearchContext, start: Vertex) -> None:
        # An explicit stack of successor iterators reproduces the order of
        # the recursive formulation without touching the interpreter's
        # recursion limit.
        self._visit(context, start)
        if context.found:
            return

        stack: List[Iterator[Vertex]] = [iter(self.graph.successors(start))]
        while stack:
            vertex = next(stack[-1], None)
            if vertex is None:
                stack.pop()
                continue

            if vertex.visiting_state is not VisitingState.NOT_VISITED:
                continue

            self._visit(context, vertex)
            if context.found:
                return

            if len(stack) >= self.config.max_depth:
                raise ResourceExhaustedError(
                    f"search depth exceeded {self.config.max_depth} "
                    f"at vertex {vertex.key}"
                )
            stack.append(iter(self.graph.successors(vertex)))

    @staticmethod
    def _visit(context: SearchContext, vertex: Vertex) -> None:
        context.visited.append(vertex)
        if vertex is context.target:
            context.found = True
            return
        vertex.visiting_state = VisitingState.VISITED

    def _resolve(self, vertex: VertexRef) -> Vertex:
        key = vertex_key(vertex)
        resolved = self.graph.get_vertex(key)
        if resolved is None:
            raise MissingVertexError(key)
        return resolved
