"""
Graph subsystem for mmgraph.

Defines the in-memory graph model and the depth-first algorithms that
run over it.
"""

from mmgraph.graph.graph_schema import Vertex, Edge, VisitingState
from mmgraph.graph.graph_store import Graph
from mmgraph.graph.graph_search import DepthFirstSearch, SearchContext, SearchResult

__all__ = [
    "Vertex",
    "Edge",
    "VisitingState",
    "Graph",
    "DepthFirstSearch",
    "SearchContext",
    "SearchResult",
]
