from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from mmgraph.config.settings import ExportConfig
from mmgraph.exceptions import (
    DuplicateVertexError,
    MalformedInputError,
    MissingVertexError,
    SerializationError,
)
from mmgraph.graph.graph_schema import Edge, Vertex
from mmgraph.graph.graph_store import Graph

GRAPHML_NS = "http://graphml.graphdrawing.org/xmlns"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
SCHEMA_LOCATION = (
    "http://graphml.graphdrawing.org/xmlns "
    "http://graphml.graphdrawing.org/xmlns/1.0/graphml.xsd"
)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# (id, for, attr.name, attr.type)
_KEYS = (
    ("d0", "graph", "grouped_vertex_count", "int"),
    ("d1", "graph", "source", "string"),
    ("d2", "node", "balance", "double"),
    ("d3", "edge", "capacity", "double"),
    ("d4", "edge", "cost", "double"),
)


class GraphMLExporter:
    """
    Renders a Graph as a GraphML document.

    Only sequenced edges are written; the graph element's ``edgedefault``
    tells readers whether they are directed. Exporting never mutates the
    graph.
    """

    def __init__(self, graph: Graph, config: Optional[ExportConfig] = None) -> None:
        self.graph = graph
        self.config = config or ExportConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def to_graphml(self) -> str:
        try:
            root = self._build()
            if self.config.prettyprint:
                ET.indent(root)
            body = ET.tostring(root, encoding="unicode")
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"cannot render GraphML: {exc}") from exc

        return XML_DECLARATION + body + "\n"

    def write(self, path: Union[str, Path, None] = None) -> Path:
        """
        Write the document as UTF-8, replacing any existing file.
        """
        target = Path(path if path is not None else self.config.output_path)
        xml = self.to_graphml()

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(xml.encode("utf-8"))
        except OSError as exc:
            raise SerializationError(f"cannot write {target}: {exc}") from exc

        logging.getLogger("mmgraph.export").info(
            "wrote graphml vertices=%s edges=%s -> %s",
            self.graph.count_vertices(),
            self.graph.count_edges(),
            target,
        )
        return target

    # ------------------------------------------------------------------
    # Document
    # ------------------------------------------------------------------

    def _build(self) -> ET.Element:
        root = ET.Element(
            "graphml",
            {
                "xmlns": GRAPHML_NS,
                "xmlns:xsi": XSI_NS,
                "xsi:schemaLocation": SCHEMA_LOCATION,
            },
        )

        for key_id, domain, name, attr_type in _KEYS:
            ET.SubElement(
                root,
                "key",
                {
                    "id": key_id,
                    "for": domain,
                    "attr.name": name,
                    "attr.type": attr_type,
                },
            )

        graph_el = ET.SubElement(
            root,
            "graph",
            {
                "id": "G",
                "edgedefault": "directed" if self.graph.directed else "undirected",
            },
        )
        _data(graph_el, "d0", str(self.graph.grouped_vertex_count))
        if "source" in self.graph.metadata:
            _data(graph_el, "d1", str(self.graph.metadata["source"]))

        for v in self.graph.get_vertices():
            node_el = ET.SubElement(graph_el, "node", {"id": str(v.key)})
            _data(node_el, "d2", repr(float(v.balance)))

        for index, e in enumerate(self.graph.get_edges()):
            edge_el = ET.SubElement(
                graph_el,
                "edge",
                {
                    "id": f"e{index}",
                    "source": str(e.source),
                    "target": str(e.sink),
                },
            )
            _data(edge_el, "d3", repr(float(e.capacity)))
            _data(edge_el, "d4", repr(float(e.cost)))

        return root


def _data(parent: ET.Element, key: str, value: str) -> None:
    ET.SubElement(parent, "data", {"key": key}).text = value


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def read_graphml(text: str) -> Graph:
    """
    Build a Graph from a GraphML document.

    Node ids must be integers. Edge capacity and cost are read from data
    keys named ``capacity`` and ``cost``; missing values default to
    capacity 1 and cost 0.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        line = exc.position[0] if exc.position else None
        raise MalformedInputError(f"invalid GraphML: {exc}", line=line) from exc

    keys: Dict[str, Tuple[str, str]] = {}
    graph_el = None
    for child in root:
        tag = _local(child.tag)
        if tag == "key":
            keys[child.get("id", "")] = (
                child.get("for", ""),
                child.get("attr.name", ""),
            )
        elif tag == "graph" and graph_el is None:
            graph_el = child

    if graph_el is None:
        raise MalformedInputError("GraphML document has no graph element")

    edgedefault = graph_el.get("edgedefault", "directed")
    if edgedefault not in ("directed", "undirected"):
        raise MalformedInputError(
            "edgedefault must be directed or undirected",
            token=edgedefault,
        )
    graph = Graph(edgedefault == "directed")

    def attrs(element: ET.Element) -> Dict[str, str]:
        values = {}
        for data in element:
            if _local(data.tag) == "data":
                _, name = keys.get(data.get("key", ""), ("", data.get("key", "")))
                values[name] = (data.text or "").strip()
        return values

    graph_attrs = attrs(graph_el)
    if "grouped_vertex_count" in graph_attrs:
        graph.grouped_vertex_count = _parse(int, graph_attrs["grouped_vertex_count"])
    if "source" in graph_attrs:
        graph.metadata["source"] = graph_attrs["source"]

    for element in graph_el:
        tag = _local(element.tag)
        values = attrs(element)

        if tag == "node":
            key = _parse(int, element.get("id", ""))
            try:
                graph.add_vertex(
                    Vertex(key=key, balance=_parse(float, values.get("balance", "0")))
                )
            except DuplicateVertexError as exc:
                raise MalformedInputError(
                    f"node {key} declared twice", token=element.get("id")
                ) from exc

        elif tag == "edge":
            try:
                edge = Edge(
                    source=_parse(int, element.get("source", "")),
                    sink=_parse(int, element.get("target", "")),
                    capacity=_parse(float, values.get("capacity", "1")),
                    cost=_parse(float, values.get("cost", "0")),
                )
                graph.add_edge(edge)
            except ValueError as exc:
                raise MalformedInputError(
                    f"invalid edge: {exc}", token=element.get("id")
                ) from exc
            except MissingVertexError as exc:
                raise MalformedInputError(
                    f"edge references undeclared node {exc.key}",
                    token=element.get("id"),
                ) from exc

    return graph


def _parse(kind, token: str):
    try:
        return kind(token)
    except ValueError as exc:
        raise MalformedInputError(
            f"expected {kind.__name__}", token=token
        ) from exc
