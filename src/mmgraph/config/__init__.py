"""
Configuration layer for mmgraph.

Configuration in mmgraph is:
- Explicit (passed, not global)
- Typed (frozen dataclasses)
"""

from mmgraph.config.settings import (
    TraversalConfig,
    ParserConfig,
    ExportConfig,
    MmgraphConfig,
)

__all__ = [
    "TraversalConfig",
    "ParserConfig",
    "ExportConfig",
    "MmgraphConfig",
]
