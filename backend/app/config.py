from dataclasses import dataclass
from dynaconf import Dynaconf
from backend.app.constants import DEFAULTS

from mmgraph.config.settings import (
    TraversalConfig,
    ParserConfig,
    ExportConfig,
    MmgraphConfig,
)

settings = Dynaconf(
    envvar_prefix="MMGRAPH",
    load_dotenv=True,
    settings_files=[],
)


def _setting(key: str):
    return settings.get(key, DEFAULTS[key])


@dataclass(frozen=True)
class AppConfig:
    # ---------------- App ----------------
    app_name: str = settings.get("APP_NAME", "mmgraph-backend")
    api_prefix: str = settings.get("API_PREFIX", "")

    # ---------------- Session ----------------
    directed: bool = _setting("GRAPH_DIRECTED")
    initial_graph_path: str = _setting("INITIAL_GRAPH_PATH")
    notify_max_workers: int = _setting("NOTIFY_MAX_WORKERS")

    # ---------------- Engine Policy ----------------
    mmgraph: MmgraphConfig = MmgraphConfig(
        traversal=TraversalConfig(
            max_depth=_setting("TRAVERSAL_MAX_DEPTH"),
        ),
        parser=ParserConfig(
            default_capacity=_setting("PARSER_DEFAULT_CAPACITY"),
            default_cost=_setting("PARSER_DEFAULT_COST"),
            comment_prefix=_setting("PARSER_COMMENT_PREFIX"),
        ),
        export=ExportConfig(
            output_path=_setting("EXPORT_PATH"),
            prettyprint=_setting("EXPORT_PRETTYPRINT"),
        ),
    )
