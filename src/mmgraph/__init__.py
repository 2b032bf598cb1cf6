"""
mmgraph
=======

A small graph engine for loading, inspecting and analyzing directed or
undirected, capacitated graphs in the classroom.

Core idea:
- Keep the graph consistent under every mutation, so algorithms and
  exporters can trust it.

Public API:
- Graph, Vertex, Edge
- DepthFirstSearch
- parse_graph / load_graph
- GraphMLExporter
"""

from mmgraph.graph.graph_schema import Vertex, Edge, VisitingState
from mmgraph.graph.graph_store import Graph
from mmgraph.graph.graph_search import DepthFirstSearch
from mmgraph.serialization.text_parser import parse_graph, load_graph, format_graph
from mmgraph.serialization.graphml_exporter import GraphMLExporter, read_graphml

__all__ = [
    "Vertex",
    "Edge",
    "VisitingState",
    "Graph",
    "DepthFirstSearch",
    "parse_graph",
    "load_graph",
    "format_graph",
    "GraphMLExporter",
    "read_graphml",
]

__version__ = "0.1.0"
