from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional, Union

from mmgraph.config.settings import ParserConfig
from mmgraph.exceptions import (
    DuplicateVertexError,
    MalformedInputError,
    MissingVertexError,
)
from mmgraph.graph.graph_schema import Edge, Vertex
from mmgraph.graph.graph_store import Graph
from mmgraph.utils.text import format_number, split_fields, strip_comment

_BOOLEANS = {
    "true": True,
    "yes": True,
    "1": True,
    "false": False,
    "no": False,
    "0": False,
}


class TextGraphParser:
    """
    Builds a Graph from a line-oriented description.

    Grammar, one declaration per line::

        directed true|false
        group <count>
        vertex <key> [<balance>]
        edge <source> <sink> [<capacity> [<cost>]]

    Keywords are case-insensitive, ``#`` starts a comment and blank lines
    are ignored. A ``directed`` line must precede every other declaration;
    a directedness passed by the caller overrides it.
    """

    def __init__(
        self,
        *,
        directed: Optional[bool] = None,
        config: Optional[ParserConfig] = None,
    ) -> None:
        self.directed = directed
        self.config = config or ParserConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, text: str) -> Graph:
        t0 = time.perf_counter()

        graph: Optional[Graph] = None
        declared_directed: Optional[bool] = None

        for number, raw in enumerate(text.splitlines(), start=1):
            fields = split_fields(strip_comment(raw, self.config.comment_prefix))
            if not fields:
                continue

            keyword = fields[0].lower()

            if keyword == "directed":
                if graph is not None or declared_directed is not None:
                    raise MalformedInputError(
                        "directed must appear once, before any declaration",
                        line=number,
                        token=fields[0],
                    )
                self._expect_fields(fields, 2, 2, number)
                declared_directed = self._boolean(fields[1], number)
                continue

            if graph is None:
                graph = self._new_graph(declared_directed)

            if keyword == "group":
                self._expect_fields(fields, 2, 2, number)
                count = self._integer(fields[1], number)
                if count < 0:
                    raise MalformedInputError(
                        "group count must not be negative",
                        line=number,
                        token=fields[1],
                    )
                graph.grouped_vertex_count = count
            elif keyword == "vertex":
                self._expect_fields(fields, 2, 3, number)
                self._add_vertex(graph, fields, number)
            elif keyword == "edge":
                self._expect_fields(fields, 3, 5, number)
                self._add_edge(graph, fields, number)
            else:
                raise MalformedInputError(
                    "unknown declaration",
                    line=number,
                    token=fields[0],
                )

        if graph is None:
            graph = self._new_graph(declared_directed)

        logging.getLogger("mmgraph.parser").info(
            "parsed vertices=%s edges=%s directed=%s in %.3fs",
            graph.count_vertices(),
            graph.count_edges(),
            graph.directed,
            time.perf_counter() - t0,
        )
        return graph

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _new_graph(self, declared_directed: Optional[bool]) -> Graph:
        if self.directed is not None:
            return Graph(self.directed)
        return Graph(bool(declared_directed))

    def _add_vertex(self, graph: Graph, fields: List[str], number: int) -> None:
        key = self._integer(fields[1], number)
        balance = self._number(fields[2], number) if len(fields) > 2 else 0.0

        try:
            graph.add_vertex(Vertex(key=key, balance=balance))
        except DuplicateVertexError as exc:
            raise MalformedInputError(
                f"vertex {key} declared twice",
                line=number,
                token=fields[1],
            ) from exc

    def _add_edge(self, graph: Graph, fields: List[str], number: int) -> None:
        source = self._integer(fields[1], number)
        sink = self._integer(fields[2], number)
        capacity = (
            self._number(fields[3], number)
            if len(fields) > 3
            else self.config.default_capacity
        )
        cost = (
            self._number(fields[4], number)
            if len(fields) > 4
            else self.config.default_cost
        )

        try:
            edge = Edge(source=source, sink=sink, capacity=capacity, cost=cost)
        except ValueError as exc:
            raise MalformedInputError(
                "capacity must be a non-negative number",
                line=number,
                token=fields[3] if len(fields) > 3 else None,
            ) from exc

        try:
            graph.add_edge(edge)
        except MissingVertexError as exc:
            raise MalformedInputError(
                f"edge references undeclared vertex {exc.key}",
                line=number,
                token=fields[1] if exc.key == source else fields[2],
            ) from exc

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    @staticmethod
    def _expect_fields(fields: List[str], low: int, high: int, number: int) -> None:
        if not low <= len(fields) <= high:
            raise MalformedInputError(
                f"{fields[0]} expects {low - 1} to {high - 1} values, got {len(fields) - 1}",
                line=number,
                token=fields[0],
            )

    @staticmethod
    def _integer(token: str, number: int) -> int:
        try:
            return int(token)
        except ValueError as exc:
            raise MalformedInputError(
                "expected an integer",
                line=number,
                token=token,
            ) from exc

    @staticmethod
    def _number(token: str, number: int) -> float:
        try:
            return float(token)
        except ValueError as exc:
            raise MalformedInputError(
                "expected a number",
                line=number,
                token=token,
            ) from exc

    @staticmethod
    def _boolean(token: str, number: int) -> bool:
        try:
            return _BOOLEANS[token.lower()]
        except KeyError as exc:
            raise MalformedInputError(
                "expected true or false",
                line=number,
                token=token,
            ) from exc


def parse_graph(
    text: str,
    directed: Optional[bool] = None,
    config: Optional[ParserConfig] = None,
) -> Graph:
    return TextGraphParser(directed=directed, config=config).parse(text)


def load_graph(
    path: Union[str, Path],
    directed: Optional[bool] = None,
    config: Optional[ParserConfig] = None,
) -> Graph:
    """
    Read a UTF-8 graph description from disk.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MalformedInputError(f"cannot read {path}: {exc}") from exc

    graph = parse_graph(text, directed=directed, config=config)
    graph.metadata["source"] = str(path)
    return graph


def format_graph(graph: Graph) -> str:
    """
    Render a graph in the text grammar accepted by TextGraphParser.

    Only sequenced edges are written; reverse edges of undirected graphs
    are rebuilt on parse.
    """
    lines = [
        f"directed {'true' if graph.directed else 'false'}",
        f"group {graph.grouped_vertex_count}",
    ]

    for v in graph.get_vertices():
        if v.balance:
            lines.append(f"vertex {v.key} {format_number(v.balance)}")
        else:
            lines.append(f"vertex {v.key}")

    for e in graph.get_edges():
        lines.append(
            f"edge {e.source} {e.sink} "
            f"{format_number(e.capacity)} {format_number(e.cost)}"
        )

    return "\n".join(lines) + "\n"
