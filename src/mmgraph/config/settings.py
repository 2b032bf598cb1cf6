from __future__ import annotations

from dataclasses import dataclass, field

# ---------------------------------------------------------------------
# Depth-first traversal
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class TraversalConfig:
    """
    Limits applied to depth-first searches.

    ``max_depth`` bounds the explicit search stack; exceeding it raises
    ResourceExhaustedError instead of growing without bound.
    """

    max_depth: int = 1_000_000


# ---------------------------------------------------------------------
# Text input
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class ParserConfig:
    """
    Controls how line-based graph descriptions are interpreted.
    """

    default_capacity: float = 1.0
    default_cost: float = 0.0
    comment_prefix: str = "#"


# ---------------------------------------------------------------------
# GraphML output
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class ExportConfig:
    """
    Controls GraphML rendering and the default output location.
    """

    output_path: str = "data/graph_out.graphml"
    prettyprint: bool = True


# ---------------------------------------------------------------------
# Root configuration object
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class MmgraphConfig:
    """
    Root configuration object for mmgraph.

    Constructed explicitly by the caller and passed to the parser,
    the search engine and the exporter.
    """

    traversal: TraversalConfig = field(default_factory=TraversalConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
