import xml.etree.ElementTree as ET

import pytest

from mmgraph.exceptions import MalformedInputError, SerializationError
from mmgraph.graph.graph_schema import VisitingState
from mmgraph.serialization.graphml_exporter import (
    GRAPHML_NS,
    GraphMLExporter,
    read_graphml,
)
from mmgraph.serialization.text_parser import parse_graph

NS = {"g": GRAPHML_NS}


def _edge_data(root, edge):
    names = {
        k.get("id"): k.get("attr.name") for k in root.findall("g:key", NS)
    }
    return {names[d.get("key")]: d.text for d in edge.findall("g:data", NS)}


def test_export_directed_document(chain_text):
    graph = parse_graph(chain_text, directed=True)

    xml = GraphMLExporter(graph).to_graphml()
    root = ET.fromstring(xml)

    graph_el = root.find("g:graph", NS)
    assert graph_el.get("edgedefault") == "directed"
    assert [n.get("id") for n in graph_el.findall("g:node", NS)] == ["1", "2", "3"]

    edges = graph_el.findall("g:edge", NS)
    assert [(e.get("source"), e.get("target")) for e in edges] == [("1", "2"), ("2", "3")]
    assert _edge_data(root, edges[0]) == {"capacity": "5.0", "cost": "1.5"}


def test_export_undirected_lists_only_sequenced_edges(chain_text):
    graph = parse_graph(chain_text, directed=False)

    root = ET.fromstring(GraphMLExporter(graph).to_graphml())
    graph_el = root.find("g:graph", NS)

    assert graph_el.get("edgedefault") == "undirected"
    assert len(graph_el.findall("g:edge", NS)) == 2


def test_export_is_read_only(chain_text):
    graph = parse_graph(chain_text, directed=True)
    graph.get_vertex(2).visiting_state = VisitingState.VISITED

    GraphMLExporter(graph).to_graphml()

    assert graph.get_vertex(2).visiting_state is VisitingState.VISITED
    assert graph.get_vertex(1).visiting_state is VisitingState.NOT_VISITED
    assert graph.count_edges() == 2


def test_export_escapes_metadata(chain_text):
    graph = parse_graph(chain_text, directed=True)
    graph.metadata["source"] = 'a&b <"c">.txt'

    xml = GraphMLExporter(graph).to_graphml()

    assert "a&amp;b &lt;" in xml
    assert read_graphml(xml).metadata["source"] == 'a&b <"c">.txt'


def test_round_trip_preserves_keys_pairs_and_numbers(chain_text):
    graph = parse_graph(chain_text, directed=False)
    graph.get_vertex(3).balance = -0.1

    again = read_graphml(GraphMLExporter(graph).to_graphml())

    assert not again.directed
    assert again.grouped_vertex_count == 1
    assert [v.key for v in again.get_vertices()] == [1, 2, 3]
    assert again.get_vertex(3).balance == -0.1
    assert [(e.endpoints, e.capacity, e.cost) for e in again.get_edges()] == [
        ((1, 2), 5.0, 1.5),
        ((2, 3), 2.0, -1.0),
    ]
    assert again.get_edge(3, 2) is not None


def test_write_overwrites_utf8_file(tmp_path, chain_text):
    graph = parse_graph(chain_text, directed=True)
    target = tmp_path / "nested" / "graph.graphml"
    target.parent.mkdir()
    target.write_text("stale", encoding="utf-8")

    written = GraphMLExporter(graph).write(target)

    assert written == target
    content = target.read_bytes().decode("utf-8")
    assert content.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert "stale" not in content


def test_write_failure_raises_serialization_error(tmp_path, chain_text):
    graph = parse_graph(chain_text, directed=True)
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(SerializationError):
        GraphMLExporter(graph).write(blocker / "graph.graphml")


@pytest.mark.parametrize(
    "xml",
    [
        "<graphml",
        "<graphml/>",
        '<graphml><graph edgedefault="directed"><node id="a"/></graph></graphml>',
        '<graphml><graph edgedefault="directed"><node id="1"/>'
        '<edge source="1" target="2"/></graph></graphml>',
        '<graphml><key id="c" for="edge" attr.name="capacity"/>'
        '<graph edgedefault="directed"><node id="1"/><node id="2"/>'
        '<edge source="1" target="2"><data key="c">NaN</data></edge>'
        '</graph></graphml>',
    ],
)
def test_read_graphml_rejects_malformed_documents(xml):
    with pytest.raises(MalformedInputError):
        read_graphml(xml)
