from __future__ import annotations

from pathlib import Path
from typing import Optional
import time
import logging

from mmgraph.graph.graph_store import Graph

from backend.app.services.graph_session import GraphSession


def load_initial_graph(
    *,
    session: GraphSession,
    path: Optional[Path],
    directed: Optional[bool] = None,
) -> Optional[Graph]:
    """
    Load the configured startup graph into the session.

    Returns None when no path is configured or the file does not exist;
    parse failures propagate to the caller.
    """
    logger = logging.getLogger("mmgraph.load_graph")

    if path is None or not str(path):
        return None
    if not path.exists():
        logger.warning("initial graph %s not found; starting empty", path)
        return None

    t0 = time.perf_counter()
    graph = session.load_file(path, directed=directed)
    logger.info(
        "loaded vertices=%s edges=%s from %s in %.3fs",
        graph.count_vertices(),
        graph.count_edges(),
        path,
        time.perf_counter() - t0,
    )
    return graph
