import argparse
import logging
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mmgraph.exceptions import GraphError  # noqa: E402

from backend.app.config import AppConfig  # noqa: E402
from backend.app.services.graph_session import (  # noqa: E402
    GraphSession,
    GraphStatsLogger,
)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Load a graph description, report it and export GraphML."
    )
    parser.add_argument("graph", type=Path, help="text graph description")
    parser.add_argument("--directed", action="store_true", default=None)
    parser.add_argument("--undirected", dest="directed", action="store_false")
    parser.add_argument("--output", type=Path, default=None, help="GraphML target")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    logger = logging.getLogger("mmgraph.run")
    start = time.perf_counter()
    config = AppConfig()

    session = GraphSession(
        config=config.mmgraph,
        directed=config.directed,
        max_workers=config.notify_max_workers,
    )
    session.add_listener(GraphStatsLogger())

    try:
        session.load_file(args.graph, directed=args.directed)
        stats = session.stats()
        logger.info(
            "graph loaded, vertices: %s, edges: %s",
            stats["vertices"],
            stats["edges"],
        )
        logger.info("components: %s", session.count_components())

        target = session.export_file(args.output)
        logger.info("exported to %s", target)
    except GraphError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1

    logger.info("done in %.2fs", time.perf_counter() - start)
    return 0


if __name__ == "__main__":
    sys.exit(main())
