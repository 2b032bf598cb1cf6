from functools import lru_cache
import logging
from pathlib import Path
import time

from backend.app.config import AppConfig
from backend.app.loaders.graph_loader import load_initial_graph
from backend.app.services.graph_session import GraphSession, GraphStatsLogger


@lru_cache
def get_config() -> AppConfig:
    return AppConfig()


@lru_cache
def get_session() -> GraphSession:
    logger = logging.getLogger("mmgraph.startup")
    t0 = time.perf_counter()
    config = get_config()

    session = GraphSession(
        config=config.mmgraph,
        directed=config.directed,
        max_workers=config.notify_max_workers,
    )
    session.add_listener(GraphStatsLogger())

    if config.initial_graph_path:
        load_initial_graph(
            session=session,
            path=Path(config.initial_graph_path),
        )
    logger.info("[startup] get_session total %.3fs", time.perf_counter() - t0)
    return session
