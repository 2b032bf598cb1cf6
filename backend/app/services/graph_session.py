from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple, Union

from mmgraph.config.settings import MmgraphConfig
from mmgraph.graph.graph_schema import Edge, Vertex
from mmgraph.graph.graph_search import DepthFirstSearch
from mmgraph.graph.graph_store import Graph
from mmgraph.serialization.graphml_exporter import GraphMLExporter
from mmgraph.serialization.text_parser import load_graph, parse_graph


class NoActiveGraphError(RuntimeError):
    """Raised when an operation needs a graph but none has been loaded."""

    def __init__(self) -> None:
        super().__init__("no graph has been loaded")


class GraphChangedListener(Protocol):
    def graph_changed(self, graph: Graph) -> None:
        ...


class GraphStatsLogger:
    """
    Listener that logs the size of every newly activated graph.
    """

    def __init__(self, logger_name: str = "mmgraph.session") -> None:
        self.logger = logging.getLogger(logger_name)

    def graph_changed(self, graph: Graph) -> None:
        self.logger.info(
            "graph changed: vertices=%s edges=%s directed=%s",
            graph.count_vertices(),
            graph.count_edges(),
            graph.directed,
        )


class GraphSession:
    """
    Owns the active graph on behalf of the presentation layer.

    Loads, mutations and searches run under one lock, so a search never
    observes a half-applied mutation and two searches never share visiting
    marks. Listeners are notified in parallel once the new state is
    complete. A second write lock stays held until every listener has
    returned, so other loads and mutations wait for the fan-out while
    reads and searches through the session keep working. Listeners must
    not mutate the graph or call mutating session methods; doing so from
    a listener thread blocks on the write lock.
    """

    def __init__(
        self,
        *,
        config: Optional[MmgraphConfig] = None,
        directed: bool = False,
        max_workers: int = 4,
    ) -> None:
        self.config = config or MmgraphConfig()
        self.directed = directed
        self.max_workers = max_workers

        self._graph: Optional[Graph] = None
        self._lock = threading.RLock()
        self._write_lock = threading.RLock()
        self._listeners: List[GraphChangedListener] = []
        self._logger = logging.getLogger("mmgraph.session")

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: GraphChangedListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: GraphChangedListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Active graph
    # ------------------------------------------------------------------

    @property
    def graph(self) -> Graph:
        with self._lock:
            if self._graph is None:
                raise NoActiveGraphError()
            return self._graph

    def has_graph(self) -> bool:
        with self._lock:
            return self._graph is not None

    def set_graph(self, graph: Graph) -> Graph:
        with self._write_lock:
            with self._lock:
                self._graph = graph
            self._fire_graph_changed(graph)
        return graph

    def load_text(self, text: str, directed: Optional[bool] = None) -> Graph:
        graph = parse_graph(
            text,
            directed=self.directed if directed is None else directed,
            config=self.config.parser,
        )
        return self.set_graph(graph)

    def load_file(
        self,
        path: Union[str, Path],
        directed: Optional[bool] = None,
    ) -> Graph:
        graph = load_graph(
            path,
            directed=self.directed if directed is None else directed,
            config=self.config.parser,
        )
        self._logger.info("loaded %s", path)
        return self.set_graph(graph)

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            graph = self.graph
            return {
                "vertices": graph.count_vertices(),
                "edges": graph.count_edges(),
                "directed": graph.directed,
                "grouped_vertex_count": graph.grouped_vertex_count,
                "metadata": dict(graph.metadata),
            }

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_vertex(self, key: int, balance: float = 0.0) -> Graph:
        vertex = Vertex(key=key, balance=balance)
        return self._apply(lambda graph: graph.add_vertex(vertex))

    def remove_vertex(self, key: int) -> Graph:
        return self._apply(lambda graph: graph.remove_vertex(key))

    def add_edge(
        self,
        source: int,
        sink: int,
        capacity: Optional[float] = None,
        cost: Optional[float] = None,
        index: Optional[int] = None,
    ) -> Graph:
        edge = Edge(
            source=source,
            sink=sink,
            capacity=self.config.parser.default_capacity if capacity is None else capacity,
            cost=self.config.parser.default_cost if cost is None else cost,
        )
        return self._apply(lambda graph: graph.add_edge(edge, index))

    def remove_edge(self, source: int, sink: int, both_directions: bool = False) -> Graph:
        """
        Remove the edge ``source -> sink``.

        On an undirected graph the edge's own reverse link goes with it.
        ``both_directions`` also removes an edge ``sink -> source``.
        """
        edge = Edge(source=source, sink=sink)

        def change(graph: Graph) -> None:
            graph.remove_edge(edge, include_reverse=not graph.directed)
            if both_directions:
                graph.remove_edge(edge.revert(), include_reverse=not graph.directed)

        return self._apply(change)

    # ------------------------------------------------------------------
    # Searches
    # ------------------------------------------------------------------

    def accessible_vertices(self, start: int) -> List[int]:
        with self._lock:
            graph = self.graph
            graph.unvisit_all_vertices()
            search = DepthFirstSearch(graph, self.config.traversal)
            return [v.key for v in search.accessible_vertices(start)]

    def find_path(self, start: int, end: int) -> Tuple[bool, List[int]]:
        with self._lock:
            graph = self.graph
            graph.unvisit_all_vertices()
            result = DepthFirstSearch(graph, self.config.traversal).search(start, end)
            return result.found, [v.key for v in result.vertices]

    def count_components(self, start: Optional[int] = None) -> int:
        with self._lock:
            graph = self.graph
            graph.unvisit_all_vertices()
            return DepthFirstSearch(graph, self.config.traversal).count_components(start)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_graphml(self) -> str:
        with self._lock:
            return GraphMLExporter(self.graph, self.config.export).to_graphml()

    def export_file(self, path: Union[str, Path, None] = None) -> Path:
        with self._lock:
            return GraphMLExporter(self.graph, self.config.export).write(path)

    # ------------------------------------------------------------------
    # Notification
    # ------------------------------------------------------------------

    def _apply(self, change: Callable[[Graph], None]) -> Graph:
        with self._write_lock:
            with self._lock:
                graph = self.graph
                change(graph)
            self._fire_graph_changed(graph)
        return graph

    def _fire_graph_changed(self, graph: Graph) -> None:
        with self._lock:
            listeners = list(self._listeners)
        if not listeners:
            return

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(listener.graph_changed, graph)
                for listener in listeners
            ]

            for listener, future in zip(listeners, futures):
                try:
                    future.result()
                except Exception:
                    self._logger.exception(
                        "listener %r failed on graph change", listener
                    )
