DEFAULTS = {
    # Directedness used when a load request does not say
    "GRAPH_DIRECTED": False,
    # Graph description loaded at startup (empty = start without a graph)
    "INITIAL_GRAPH_PATH": "",
    # Where exported GraphML is written when no path is given
    "EXPORT_PATH": "data/graph_out.graphml",
    # Indent exported GraphML
    "EXPORT_PRETTYPRINT": True,
    # Maximum depth of the explicit depth-first search stack
    "TRAVERSAL_MAX_DEPTH": 1000000,
    # Capacity assumed for edges declared without one
    "PARSER_DEFAULT_CAPACITY": 1.0,
    # Cost assumed for edges declared without one
    "PARSER_DEFAULT_COST": 0.0,
    # Comment prefix in text graph descriptions
    "PARSER_COMMENT_PREFIX": "#",
    # Worker threads used to notify graph listeners
    "NOTIFY_MAX_WORKERS": 4,
}
