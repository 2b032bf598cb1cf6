from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from contextlib import asynccontextmanager

from backend.app.main import create_app
from backend.app.config import AppConfig
from backend.app.dependencies import get_session
from backend.app.services.graph_session import GraphSession

from mmgraph.config.settings import ExportConfig, MmgraphConfig


CHAIN_TEXT = """
# three vertices in a row
group 1
vertex 1
vertex 2
vertex 3
edge 1 2 5 1.5
edge 2 3 2 -1
"""


@pytest.fixture()
def chain_text() -> str:
    return CHAIN_TEXT


@pytest.fixture()
def session(tmp_path) -> GraphSession:
    config = MmgraphConfig(
        export=ExportConfig(output_path=str(tmp_path / "out" / "graph.graphml")),
    )
    return GraphSession(config=config, directed=True, max_workers=2)


@pytest.fixture()
def client(session: GraphSession):
    @asynccontextmanager
    async def _no_lifespan(_: FastAPI):
        yield

    app = create_app(AppConfig())
    app.router.lifespan_context = _no_lifespan

    app.dependency_overrides[get_session] = lambda: session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
