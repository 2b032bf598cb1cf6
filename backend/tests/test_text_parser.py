import pytest

from mmgraph.config.settings import ParserConfig
from mmgraph.exceptions import MalformedInputError
from mmgraph.graph.graph_search import DepthFirstSearch
from mmgraph.serialization.text_parser import format_graph, load_graph, parse_graph


def test_parse_directed_chain(chain_text):
    graph = parse_graph(chain_text, directed=True)

    assert graph.directed
    assert graph.count_vertices() == 3
    assert graph.count_edges() == 2
    assert graph.grouped_vertex_count == 1

    edge = graph.get_edge(1, 2)
    assert edge.capacity == 5.0
    assert edge.cost == 1.5
    assert graph.get_edge(2, 3).cost == -1.0


def test_parse_undirected_counts_edges_once(chain_text):
    graph = parse_graph(chain_text, directed=False)

    assert graph.count_edges() == 2
    reached = DepthFirstSearch(graph).accessible_vertices(graph.get_vertex(3))
    assert 1 in [v.key for v in reached]


def test_header_sets_directedness_unless_caller_overrides():
    text = "directed true\nvertex 1\nvertex 2\nedge 1 2\n"

    assert parse_graph(text).directed
    assert not parse_graph(text, directed=False).directed
    assert not parse_graph("vertex 1\n").directed


def test_defaults_balance_and_keyword_case():
    text = "VERTEX 1 -3\nVertex 2 3\nEdge 1 2\n"
    graph = parse_graph(text, config=ParserConfig(default_capacity=7.0, default_cost=2.0))

    assert graph.get_vertex(1).balance == -3.0
    edge = graph.get_edge(1, 2)
    assert edge.capacity == 7.0
    assert edge.cost == 2.0


def test_empty_input_yields_empty_graph():
    graph = parse_graph("# nothing here\n\n")

    assert graph.count_vertices() == 0
    assert graph.count_edges() == 0


@pytest.mark.parametrize(
    "text, line, token",
    [
        ("vertex 1\nvertex 1\n", 2, "1"),
        ("vertex 1\nedge 1 2\n", 2, "2"),
        ("vertex 1\nvertex 2\nedge 1 2 x\n", 3, "x"),
        ("vertex one\n", 1, "one"),
        ("group -2\n", 1, "-2"),
        ("node 1\n", 1, "node"),
        ("vertex 1\nvertex 2\nedge 1 2 -4\n", 3, "-4"),
        ("vertex 1\nvertex 2\nedge 1 2 nan\n", 3, "nan"),
        ("vertex 1\ndirected true\n", 2, "directed"),
        ("vertex\n", 1, "vertex"),
    ],
)
def test_malformed_input_names_line_and_token(text, line, token):
    with pytest.raises(MalformedInputError) as info:
        parse_graph(text)

    assert info.value.line == line
    assert info.value.token == token


def test_invalid_default_capacity_is_malformed_without_token():
    config = ParserConfig(default_capacity=-1.0)

    with pytest.raises(MalformedInputError) as info:
        parse_graph("vertex 1\nvertex 2\nedge 1 2\n", config=config)

    assert info.value.line == 3
    assert info.value.token is None


def test_load_graph_from_file(tmp_path, chain_text):
    path = tmp_path / "graph.txt"
    path.write_text(chain_text, encoding="utf-8")

    graph = load_graph(path, directed=True)

    assert graph.count_vertices() == 3
    assert graph.metadata["source"] == str(path)

    with pytest.raises(MalformedInputError):
        load_graph(tmp_path / "missing.txt")


def test_format_then_parse_preserves_structure(chain_text):
    graph = parse_graph(chain_text, directed=False)
    graph.get_vertex(2).balance = 0.25

    again = parse_graph(format_graph(graph))

    assert not again.directed
    assert again.grouped_vertex_count == graph.grouped_vertex_count
    assert [v.key for v in again.get_vertices()] == [1, 2, 3]
    assert again.get_vertex(2).balance == 0.25
    assert [(e.endpoints, e.capacity, e.cost) for e in again.get_edges()] == [
        (e.endpoints, e.capacity, e.cost) for e in graph.get_edges()
    ]
