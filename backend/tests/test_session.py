import logging
import threading

import pytest

from mmgraph.exceptions import DuplicateVertexError, MalformedInputError

from backend.app.loaders.graph_loader import load_initial_graph
from backend.app.services.graph_session import (
    GraphSession,
    GraphStatsLogger,
    NoActiveGraphError,
)


class RecordingListener:
    def __init__(self) -> None:
        self.graphs = []
        self._lock = threading.Lock()

    def graph_changed(self, graph) -> None:
        with self._lock:
            self.graphs.append(graph)


class FailingListener:
    def graph_changed(self, graph) -> None:
        raise RuntimeError("panel exploded")


def test_session_requires_a_graph(session: GraphSession):
    assert not session.has_graph()

    with pytest.raises(NoActiveGraphError):
        session.stats()


def test_load_notifies_every_listener_with_new_graph(session: GraphSession, chain_text):
    first, second = RecordingListener(), RecordingListener()
    session.add_listener(first)
    session.add_listener(second)

    graph = session.load_text(chain_text)

    assert first.graphs == [graph]
    assert second.graphs == [graph]
    assert session.stats()["vertices"] == 3
    assert session.stats()["directed"] is True


def test_failed_load_keeps_previous_graph(session: GraphSession, chain_text):
    listener = RecordingListener()
    session.add_listener(listener)
    graph = session.load_text(chain_text)

    with pytest.raises(MalformedInputError):
        session.load_text("vertex 1\nvertex 1\n")

    assert session.graph is graph
    assert listener.graphs == [graph]


def test_failing_listener_is_logged_not_fatal(session: GraphSession, chain_text, caplog):
    recorder = RecordingListener()
    session.add_listener(FailingListener())
    session.add_listener(recorder)

    with caplog.at_level(logging.ERROR, logger="mmgraph.session"):
        session.load_text(chain_text)

    assert len(recorder.graphs) == 1
    assert "panel exploded" in caplog.text


def test_mutations_notify_and_validate(session: GraphSession, chain_text):
    session.load_text(chain_text, directed=False)
    listener = RecordingListener()
    session.add_listener(listener)

    session.add_vertex(4)
    session.add_edge(3, 4, capacity=2.0)
    assert session.stats()["edges"] == 3
    assert session.accessible_vertices(4) == [4, 3, 2, 1]

    session.remove_edge(3, 4)
    assert session.graph.get_edge(4, 3) is None
    assert session.count_components() == 2

    with pytest.raises(DuplicateVertexError):
        session.add_vertex(4)

    session.remove_vertex(4)
    assert session.stats()["vertices"] == 3
    assert len(listener.graphs) == 4

    session.remove_listener(listener)
    session.add_vertex(9)
    assert len(listener.graphs) == 4


def test_undirected_remove_edge_keeps_opposite_edge(session: GraphSession):
    session.load_text("vertex 1\nvertex 2\nedge 1 2\nedge 2 1\n", directed=False)

    graph = session.remove_edge(1, 2)

    assert session.stats()["edges"] == 1
    assert [e.endpoints for e in graph.get_edges()] == [(2, 1)]
    assert len(graph.outgoing_edges(1)) == 1
    assert len(graph.outgoing_edges(2)) == 1

    session.remove_edge(2, 1)
    assert graph.get_edge(1, 2) is None
    assert graph.get_edge(2, 1) is None


def test_remove_edge_both_directions_on_directed_graph(session: GraphSession):
    session.load_text("vertex 1\nvertex 2\nedge 1 2\nedge 2 1\n", directed=True)

    graph = session.remove_edge(1, 2, both_directions=True)

    assert graph.count_edges() == 0
    assert graph.outgoing_edges(2) == []


class BlockingListener:
    def __init__(self) -> None:
        self.entered = threading.Event()
        self.release = threading.Event()

    def graph_changed(self, graph) -> None:
        self.entered.set()
        self.release.wait(5)


def test_mutations_wait_for_listener_fan_out(session: GraphSession, chain_text):
    session.load_text(chain_text)
    listener = BlockingListener()
    session.add_listener(listener)

    first = threading.Thread(target=session.add_vertex, args=(4,))
    first.start()
    assert listener.entered.wait(5)

    second = threading.Thread(target=session.add_vertex, args=(5,))
    second.start()
    second.join(0.2)

    assert second.is_alive()
    assert session.graph.get_vertex(4) is not None
    assert session.graph.get_vertex(5) is None
    assert session.find_path(1, 3) == (True, [1, 2, 3])

    listener.release.set()
    first.join(5)
    second.join(5)

    assert not first.is_alive()
    assert not second.is_alive()
    assert session.graph.get_vertex(5) is not None


def test_find_path_resets_marks_between_queries(session: GraphSession, chain_text):
    session.load_text(chain_text)

    assert session.find_path(1, 3) == (True, [1, 2, 3])
    assert session.find_path(3, 1) == (False, [3])
    assert session.find_path(1, 3) == (True, [1, 2, 3])


def test_export_file_uses_configured_path(session: GraphSession, chain_text):
    session.load_text(chain_text)

    path = session.export_file()

    assert path.name == "graph.graphml"
    assert path.read_text(encoding="utf-8") == session.export_graphml()


def test_load_initial_graph(tmp_path, chain_text, caplog):
    session = GraphSession(directed=True)
    session.add_listener(GraphStatsLogger())
    path = tmp_path / "initial.txt"

    assert load_initial_graph(session=session, path=path) is None
    assert not session.has_graph()

    path.write_text(chain_text, encoding="utf-8")
    with caplog.at_level(logging.INFO, logger="mmgraph.session"):
        graph = load_initial_graph(session=session, path=path)

    assert graph is session.graph
    assert graph.count_edges() == 2
    assert "vertices=3 edges=2" in caplog.text
