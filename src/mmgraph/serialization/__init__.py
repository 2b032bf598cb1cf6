"""
Serialization boundaries for mmgraph.

- line-based text descriptions (parse and format)
- GraphML documents (export, plus a reader for round trips)
"""

from mmgraph.serialization.text_parser import (
    TextGraphParser,
    parse_graph,
    load_graph,
    format_graph,
)
from mmgraph.serialization.graphml_exporter import GraphMLExporter, read_graphml

__all__ = [
    "TextGraphParser",
    "parse_graph",
    "load_graph",
    "format_graph",
    "GraphMLExporter",
    "read_graphml",
]
